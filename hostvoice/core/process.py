"""
Backend process driver.

Starts one backend process per request, writes the encoded text to its
standard input, closes it and waits for the exit. Blocks the calling
thread for the whole synthesis; there is no timeout, retry or
cancellation.
"""

import logging
import subprocess
import sys

from hostvoice.core.backends.base import Backend, ProcessOutcome, SpeechRequest
from hostvoice.core.errors import NonZeroExit, SpawnFailed

logger = logging.getLogger("hostvoice.process")

# Keep cscript from flashing a console window
_CREATION_FLAGS = getattr(subprocess, "CREATE_NO_WINDOW", 0) if sys.platform == "win32" else 0


def speak(backend: Backend, request: SpeechRequest) -> ProcessOutcome:
    """
    Run a backend process for one request and wait until it exits.

    Args:
        backend: Backend to start
        request: Text to speak, already encoded for the backend

    Returns:
        ProcessOutcome of the successful run

    Raises:
        SpawnFailed: If the process could not be started
        NonZeroExit: If the process exited with a failure status
    """
    cmd = backend.command(request.output_path)
    payload = backend.payload(request)

    try:
        backend.prepare()
        process = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            creationflags=_CREATION_FLAGS,
        )
    except OSError as e:
        raise SpawnFailed(backend.name, cmd, e) from e

    logger.debug(f"Started {backend.name} (pid {process.pid}): {' '.join(cmd)}")

    # Pipes are closed on every path out of this block
    with process:
        _, stderr = process.communicate(input=payload)

    outcome = ProcessOutcome(
        returncode=process.returncode,
        stderr=stderr.decode(backend.encoding, errors="replace") if stderr else "",
    )
    logger.debug(f"{backend.name} (pid {process.pid}) exited with status {outcome.returncode}")

    if not outcome.success:
        raise NonZeroExit(backend.name, outcome.returncode, outcome.stderr)

    return outcome
