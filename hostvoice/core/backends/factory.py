"""
Backend detection.

Finds a usable backend among the known ones, in a fixed priority order.
"""

from typing import Optional, Sequence

from hostvoice.core.errors import BackendUnavailable, NoBackendFound
from .base import Backend, logger
from .cscript_backend import CScriptBackend
from .espeak_backend import EspeakBackend
from .say_backend import SayBackend

# espeak first, it is the only one with the same behaviour on every platform.
# Then the systems' own speech: say on Mac, cscript on Windows.
BACKENDS: tuple[Backend, ...] = (
    EspeakBackend(),
    SayBackend(),
    CScriptBackend(),
)


def backend_names(backends: Sequence[Backend] = BACKENDS) -> list[str]:
    return [backend.name for backend in backends]


def find_backend(name: str, backends: Sequence[Backend] = BACKENDS) -> Optional[Backend]:
    """Look up a backend by name, case insensitive."""
    name = name.lower()
    for backend in backends:
        if backend.name == name:
            return backend
    return None


def detect_any(backends: Sequence[Backend] = BACKENDS) -> Backend:
    """
    Pick the first backend present on this host.

    Args:
        backends: Candidates in priority order

    Returns:
        The first backend whose presence check succeeds

    Raises:
        NoBackendFound: If none of the backends is present
    """
    for backend in backends:
        if backend.is_present():
            logger.info(f"Using {backend.name} for speech")
            return backend

    raise NoBackendFound(backend_names(backends))


def detect(name: str, backends: Sequence[Backend] = BACKENDS) -> Backend:
    """
    Select a backend by name.

    Raises:
        BackendUnavailable: If the name is unknown or the backend is not present
    """
    backend = find_backend(name, backends)

    if backend is None:
        raise BackendUnavailable(name, known=False)

    if not backend.is_present():
        raise BackendUnavailable(name)

    logger.info(f"Using {backend.name} for speech")
    return backend
