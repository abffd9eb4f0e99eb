from hostvoice.main import run

run()
