"""
Unit tests for the hostvoice command line.

Voices are replaced by mocks, nothing is spoken.
"""

import io
import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from hostvoice.core.errors import BackendUnavailable, ErrorHandler, NoBackendFound, NonZeroExit, SpawnFailed
from hostvoice.core.system_config import SpeechConfig
from hostvoice.main import app, setup_logging
from hostvoice.main import logger as cli_logger
from hostvoice.version import __version__


class CliTestCase(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.voice = MagicMock()
        self.voice.name = "espeak"

        patches = [
            patch("hostvoice.main.load_config", return_value=SpeechConfig()),
            patch("hostvoice.main.setup_logging"),
            patch("hostvoice.main.any_voice", return_value=self.voice),
            patch("hostvoice.main.voice_named", return_value=self.voice),
        ]
        mocks = [p.start() for p in patches]
        for p in patches:
            self.addCleanup(p.stop)

        self.load_config, _, self.any_voice, self.voice_named = mocks

    def invoke(self, *args, **kwargs):
        return self.runner.invoke(app, list(args), **kwargs)


class TestSpeakArguments(CliTestCase):
    """Test speaking command line words."""

    def test_words_are_joined(self):
        """Test words are spoken as one line."""
        result = self.invoke("Oh", "_my_,", "the", "computer", "is", "_talking_")

        self.assertEqual(result.exit_code, 0)
        self.voice.say.assert_called_once_with("Oh _my_, the computer is _talking_", None)
        self.any_voice.assert_called_once_with()

    def test_file_output(self):
        """Test --file is passed on as output path."""
        result = self.invoke("--file", "hello.wav", "Hello")

        self.assertEqual(result.exit_code, 0)
        self.voice.say.assert_called_once_with("Hello", Path("hello.wav"))

    def test_no_input(self):
        """Test missing words is a usage error."""
        result = self.invoke()

        self.assertEqual(result.exit_code, 2)
        self.voice.say.assert_not_called()

    def test_backend_option(self):
        """Test --backend selects the backend by name."""
        result = self.invoke("-b", "say", "Hello")

        self.assertEqual(result.exit_code, 0)
        self.voice_named.assert_called_once_with("say")
        self.any_voice.assert_not_called()

    def test_backend_from_config(self):
        """Test the configured backend is used without --backend."""
        self.load_config.return_value = SpeechConfig(backend="cscript")

        self.invoke("Hello")

        self.voice_named.assert_called_once_with("cscript")


class TestSpeakStdin(CliTestCase):
    """Test reading text from stdin."""

    def test_line_by_line(self):
        """Test every stdin line is spoken on its own."""
        result = self.invoke("--stdin", input="Hello.\nIsn't that.. _fascinating_?\n")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(
            [c.args for c in self.voice.say.call_args_list],
            [("Hello.",), ("Isn't that.. _fascinating_?",)]
        )

    def test_undecodable_line(self):
        """Test invalid bytes on stdin are reported as a usage error."""
        result = self.invoke("--stdin", input=b"hello\n\xff\xfe there\nnever\n")

        self.assertEqual(result.exit_code, 2)
        self.assertIn("Invalid input. Line 2 of stdin", result.output)
        self.voice.say.assert_called_once_with("hello")

    def test_undecodable_stdin_into_file(self):
        """Test invalid bytes are reported before recording into a file."""
        result = self.invoke("-i", "-f", "out.wav", input=b"\xff")

        self.assertEqual(result.exit_code, 2)
        self.assertIn("Invalid input.", result.output)
        self.voice.say.assert_not_called()

    def test_stdin_into_file(self):
        """Test stdin is recorded into one file at once."""
        result = self.invoke("-i", "-f", "out.wav", input="one\ntwo\n")

        self.assertEqual(result.exit_code, 0)
        self.voice.say.assert_called_once_with("one\ntwo\n", Path("out.wav"))


class TestFailures(CliTestCase):
    """Test errors turn into messages and exit codes."""

    def test_no_backend(self):
        """Test detection failure exits with status 3."""
        self.any_voice.side_effect = NoBackendFound(("espeak", "say", "cscript"))

        result = self.invoke("Hello")

        self.assertEqual(result.exit_code, 3)
        self.assertIn("No speech backend found", result.output)

    def test_backend_unavailable(self):
        """Test an absent requested backend exits with status 3."""
        self.voice_named.side_effect = BackendUnavailable("say")

        result = self.invoke("--backend", "say", "Hello")

        self.assertEqual(result.exit_code, 3)
        self.assertIn("'say' is not available", result.output)

    def test_non_zero_exit(self):
        """Test backend failure exits with status 1 and shows stderr."""
        self.voice.say.side_effect = NonZeroExit("espeak", 1, "no audio device\n")

        result = self.invoke("Hello")

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Speaking with espeak failed. no audio device", result.output)

    def test_spawn_failed(self):
        """Test a backend that cannot start exits with status 1."""
        self.voice.say.side_effect = SpawnFailed("espeak", ["espeak", "-m"], FileNotFoundError(2, "missing"))

        result = self.invoke("Hello")

        self.assertEqual(result.exit_code, 1)

    def test_stops_at_first_failing_line(self):
        """Test stdin lines after a failure are not spoken."""
        self.voice.say.side_effect = [None, NonZeroExit("espeak", 1), None]

        result = self.invoke("--stdin", input="a\nb\nc\n")

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(self.voice.say.call_count, 2)


class TestInformation(CliTestCase):
    """Test the informational options."""

    def test_version(self):
        """Test --version prints the version."""
        result = self.invoke("--version")

        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_list_backends(self):
        """Test --list-backends shows each backend with its status."""
        present, absent = MagicMock(), MagicMock()
        present.name, absent.name = "espeak", "say"
        present.is_present.return_value = True
        absent.is_present.return_value = False

        with patch("hostvoice.main.BACKENDS", (present, absent)):
            result = self.invoke("--list-backends")

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.splitlines(), ["espeak    available", "say       not found"])
        self.voice.say.assert_not_called()


class TestSetupLogging(unittest.TestCase):
    """Test console and file handlers."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.addCleanup(self._reset_logger)

    def _reset_logger(self):
        for handler in list(cli_logger.handlers):
            cli_logger.removeHandler(handler)
            handler.close()
        cli_logger.setLevel(logging.NOTSET)
        cli_logger.propagate = True

    def test_handled_errors_stay_off_the_console(self):
        """Test handled errors are logged to the file but printed only once."""
        log_file = Path(self.tmp.name) / "logs" / "hostvoice.log"
        console = io.StringIO()

        with patch("sys.stderr", console):
            setup_logging("info", str(log_file))

        ErrorHandler().handle(NonZeroExit("espeak", 1, "no audio device"))
        logging.getLogger("hostvoice.process").info("espeak exited with status 1")
        for handler in cli_logger.handlers:
            handler.flush()

        self.assertNotIn("no audio device", console.getvalue())
        self.assertIn("espeak exited with status 1", console.getvalue())
        self.assertIn("no audio device", log_file.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
