"""
hostvoice command line.

Speaks text from arguments or from stdin:

    hostvoice Oh _my_, the computer is _talking_
    echo "Isn't that.. _fascinating_?" | hostvoice --stdin
    hostvoice --file hello.wav Hello there
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import List, Optional

import typer

from hostvoice.core.backends.factory import BACKENDS
from hostvoice.core.errors import ErrorHandler, HostVoiceError, InvalidInput, describe
from hostvoice.core.errors import logger as errors_logger
from hostvoice.core.system_config import load_config
from hostvoice.core.voice import VoiceHandle, any_voice, voice_named
from hostvoice.version import __version__

logger = logging.getLogger("hostvoice")

error_handler = ErrorHandler()

app = typer.Typer(add_completion=False, help="Speaks text from arguments or from stdin.")


def setup_logging(level_name: str = "WARNING", log_file: str = "") -> None:
    """Install console and optional rotating file handlers on the hostvoice logger."""
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Replace handlers from an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    # Handled errors reach the console as the user message, only the file gets the record
    console_handler.addFilter(lambda record: record.name != errors_logger.name)
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(getattr(logging, level_name.upper(), logging.WARNING))
    logger.propagate = False


def _version_callback(value: bool):
    if value:
        typer.echo(f"hostvoice {__version__}")
        raise typer.Exit()


def _decode_stdin(data: bytes, line_number: Optional[int] = None) -> str:
    encoding = sys.stdin.encoding or "utf-8"
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        where = f"Line {line_number} of stdin" if line_number else "stdin"
        raise InvalidInput(f"{where} is not valid {encoding} text.", e) from e


def _speak_stdin(voice: VoiceHandle, target_file: Optional[Path]) -> None:
    if target_file is not None:
        # A file can only hold one recording, speak everything at once
        voice.say(_decode_stdin(sys.stdin.buffer.read()), target_file)
    else:
        for number, line in enumerate(sys.stdin.buffer, start=1):
            voice.say(_decode_stdin(line, number).rstrip("\r\n"))


@app.command()
def main(
    words: Optional[List[str]] = typer.Argument(
        None, help="Words to speak aloud, joined with spaces"
    ),
    stdin: bool = typer.Option(
        False, "--stdin", "-i", help="Read input from stdin instead of command line args"
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Write a WAV file to the specified path instead of speaking out loud"
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help="Use this backend instead of the first available one"
    ),
    list_backends: bool = typer.Option(
        False, "--list-backends", help="Show which backends are available and exit"
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """Speak text out loud with the speech synthesizer of this system."""
    config = load_config()
    setup_logging(config.log_level, config.log_file)

    if list_backends:
        for candidate in BACKENDS:
            status = "available" if candidate.is_present() else "not found"
            typer.echo(f"{candidate.name:<10}{status}")
        return

    if not stdin and not words:
        raise typer.BadParameter("No command line arguments for speech specified", param_hint="WORDS")

    backend_name = backend or config.backend

    try:
        voice = voice_named(backend_name) if backend_name else any_voice()
        logger.info(f"Speaking with {voice.name}")

        if stdin:
            _speak_stdin(voice, file)
        else:
            voice.say(" ".join(words), file)

    except (HostVoiceError, KeyboardInterrupt) as e:
        logger.debug(describe(e))
        user_message, exit_code = error_handler.handle(e, {"backend": backend_name or "any"})
        typer.echo(user_message, err=True)
        raise typer.Exit(exit_code)


def run():
    app()


if __name__ == "__main__":
    run()
