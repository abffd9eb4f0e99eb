"""
Voice handles.

A VoiceHandle is a detected backend ready to speak. It keeps nothing but
the backend, so one handle can be shared and used repeatedly; every call
starts its own process.
"""

from dataclasses import dataclass
from os import PathLike
from typing import Optional, Union

from hostvoice.core import process
from hostvoice.core.backends import factory
from hostvoice.core.backends.base import Backend


@dataclass(frozen=True)
class VoiceHandle:
    """A backend bound for speaking."""

    backend: Backend

    @property
    def name(self) -> str:
        return self.backend.name

    def say(self, text: str, output_path: Optional[Union[str, PathLike]] = None) -> None:
        """
        Speak text and wait until done.

        Emphasised words can be wrapped in underscores, dots make pauses.

        Args:
            text: Text to speak
            output_path: Write the audio into this file instead of speaking
                out loud

        Raises:
            SpawnFailed: If the backend could not be started
            NonZeroExit: If the backend reported failure
        """
        process.speak(self.backend, self.backend.request(text, output_path))

    def format(self, text: str) -> str:
        """The text as it will be sent to the backend."""
        return self.backend.format(text)


def any_voice() -> VoiceHandle:
    """
    Pick any available voice.

    Prefers espeak if installed, then the system-provided speech.

    Raises:
        NoBackendFound: If no backend is available on this host
    """
    return VoiceHandle(factory.detect_any(factory.BACKENDS))


def voice_named(name: str) -> VoiceHandle:
    """
    Get the voice of one specific backend.

    Raises:
        BackendUnavailable: If the backend is unknown or not available
    """
    return VoiceHandle(factory.detect(name, factory.BACKENDS))
