"""
Error taxonomy for speech backends with user-friendly messages.

Library code raises these and never logs or swallows them. The ErrorHandler
is meant for the outermost caller (the command line) to turn them into
messages and exit codes.
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

logger = logging.getLogger("hostvoice.errors")


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"  # Expected errors (user mistakes)
    MEDIUM = "medium"  # Unexpected but recoverable
    HIGH = "high"  # Speech unusable for this session
    CRITICAL = "critical"  # Bug


class ErrorCategory(Enum):
    """Categories for error classification."""
    USER_INPUT = "user_input"
    DETECTION = "detection"
    PROCESS = "process"
    INTERNAL = "internal"


class HostVoiceError(Exception):
    """Base exception for speech errors with user-facing messages."""

    def __init__(
            self,
            user_message: str,
            log_message: str = None,
            category: ErrorCategory = ErrorCategory.INTERNAL,
            severity: ErrorSeverity = ErrorSeverity.MEDIUM,
            original_error: Exception = None
    ):
        self.user_message = user_message
        self.log_message = log_message or user_message
        self.category = category
        self.severity = severity
        self.original_error = original_error
        super().__init__(self.log_message)


class NoBackendFound(HostVoiceError):
    """No known backend is present on this host."""

    def __init__(self, tried: Sequence[str] = ()):
        self.tried = tuple(tried)
        super().__init__(
            "No speech backend is available on this system.",
            f"No pre-installed voice found (tried: {', '.join(self.tried) or 'nothing'})",
            ErrorCategory.DETECTION,
            ErrorSeverity.HIGH
        )


class BackendUnavailable(HostVoiceError):
    """An explicitly requested backend is unknown or not present."""

    def __init__(self, name: str, known: bool = True):
        self.name = name
        self.known = known
        if known:
            log_message = f"Backend '{name}' is not available on this host"
        else:
            log_message = f"Unknown backend '{name}'"
        super().__init__(
            f"The speech backend '{name}' is not available.",
            log_message,
            ErrorCategory.DETECTION,
            ErrorSeverity.MEDIUM
        )


class InvalidInput(HostVoiceError):
    """Text to speak could not be read, e.g. undecodable bytes on stdin."""

    def __init__(self, detail: str, original_error: Exception = None):
        super().__init__(
            detail,
            f"Invalid input: {detail}",
            ErrorCategory.USER_INPUT,
            ErrorSeverity.LOW,
            original_error
        )


class SpeechError(HostVoiceError):
    """Errors while driving a backend process."""

    def __init__(
            self,
            backend: str,
            log_message: str,
            severity: ErrorSeverity = ErrorSeverity.MEDIUM,
            original_error: Exception = None
    ):
        self.backend = backend
        super().__init__(
            f"Speaking with {backend} failed.",
            log_message,
            ErrorCategory.PROCESS,
            severity,
            original_error
        )


class SpawnFailed(SpeechError):
    """The backend process could not be started."""

    def __init__(self, backend: str, command: Sequence[str], original_error: OSError):
        self.command = list(command)
        super().__init__(
            backend,
            f"{backend} could not be started ({self.command[0]}): {original_error}",
            ErrorSeverity.HIGH,
            original_error
        )


class NonZeroExit(SpeechError):
    """The backend process started but reported an unsuccessful exit."""

    def __init__(self, backend: str, returncode: int, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        message = f"{backend} reported unsuccessful exit: status {returncode}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(backend, message)


class ErrorHandler:
    """Maps errors to user messages and exit codes at the command line."""

    USER_MESSAGES = {
        "default": "Something went wrong. The issue has been logged.",
        "no_backend": "No speech backend found. Install espeak, or use macOS or Windows.",
        "invalid_input": "Invalid input.",
        "interrupted": "Interrupted.",
    }

    EXIT_CODES = {
        ErrorCategory.USER_INPUT: 2,
        ErrorCategory.DETECTION: 3,
        ErrorCategory.PROCESS: 1,
        ErrorCategory.INTERNAL: 1,
    }

    def __init__(self):
        self.error_count = 0
        self.errors_by_category = {}
        self.last_errors = []
        self.max_error_history = 100

    def log_error(
            self,
            error: Exception,
            context: dict = None,
            severity: ErrorSeverity = ErrorSeverity.MEDIUM,
            category: ErrorCategory = ErrorCategory.INTERNAL
    ):
        """Log an error with full context."""

        self.error_count += 1

        cat_name = category.value
        self.errors_by_category[cat_name] = self.errors_by_category.get(cat_name, 0) + 1

        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "error_type": type(error).__name__,
            "severity": severity.value,
            "category": category.value,
            "message": str(error),
        }

        if context:
            log_data["context"] = context

        self.last_errors.append(log_data)
        if len(self.last_errors) > self.max_error_history:
            self.last_errors.pop(0)

        if severity == ErrorSeverity.CRITICAL:
            logger.critical(
                f"CRITICAL ERROR: {error}\n"
                f"Context: {context}\n"
                f"Traceback: {traceback.format_exc()}"
            )
        elif severity == ErrorSeverity.HIGH:
            logger.error(f"{error}\nContext: {context}")
        elif severity == ErrorSeverity.MEDIUM:
            logger.error(f"Error: {error}\nContext: {context}")
        else:  # LOW
            logger.warning(f"Minor error: {error}\nContext: {context}")

    def handle(self, error: Exception, context: dict = None) -> tuple[str, int]:
        """
        Handle an error raised while speaking.

        Returns:
            (user_message, exit_code)
        """
        if isinstance(error, NoBackendFound):
            user_message = self.USER_MESSAGES["no_backend"]
            self.log_error(error, context, error.severity, error.category)
            exit_code = self.EXIT_CODES[error.category]

        elif isinstance(error, InvalidInput):
            user_message = f"{self.USER_MESSAGES['invalid_input']} {error.user_message}"
            self.log_error(error, context, error.severity, error.category)
            exit_code = self.EXIT_CODES[error.category]

        elif isinstance(error, NonZeroExit) and error.stderr:
            user_message = f"{error.user_message} {error.stderr.strip()}"
            self.log_error(error, context, error.severity, error.category)
            exit_code = self.EXIT_CODES[error.category]

        elif isinstance(error, HostVoiceError):
            user_message = error.user_message
            self.log_error(error, context, error.severity, error.category)
            exit_code = self.EXIT_CODES[error.category]

        elif isinstance(error, KeyboardInterrupt):
            user_message = self.USER_MESSAGES["interrupted"]
            exit_code = 130

        else:
            user_message = self.USER_MESSAGES["default"]
            self.log_error(error, context, ErrorSeverity.CRITICAL, ErrorCategory.INTERNAL)
            exit_code = self.EXIT_CODES[ErrorCategory.INTERNAL]

        return user_message, exit_code

    def get_stats(self) -> dict:
        """Get error statistics."""
        return {
            "total_errors": self.error_count,
            "by_category": self.errors_by_category.copy(),
            "recent_errors": self.last_errors[-10:],
        }


def describe(error: Optional[BaseException]) -> str:
    """One-line description of an error and its cause, for log output."""
    if error is None:
        return ""
    cause = getattr(error, "original_error", None) or error.__cause__
    if cause is not None and cause is not error:
        return f"{type(error).__name__}: {error} (caused by {type(cause).__name__}: {cause})"
    return f"{type(error).__name__}: {error}"
