"""
hostvoice speaks text out loud with whatever speech synthesizer the host
already has: espeak, the say command on macOS, or SAPI through cscript on
Windows.

Example:
    >>> from hostvoice import any_voice
    >>> voice = any_voice()
    >>> voice.say("Oh _my_, the computer is _talking_!")
    >>> voice.say("Isn't that.. _fascinating_?")
"""

from hostvoice.core.errors import (
    BackendUnavailable,
    HostVoiceError,
    InvalidInput,
    NoBackendFound,
    NonZeroExit,
    SpawnFailed,
    SpeechError,
)
from hostvoice.core.voice import VoiceHandle, any_voice, voice_named
from hostvoice.version import __version__

__all__ = [
    "any_voice",
    "voice_named",
    "VoiceHandle",
    "HostVoiceError",
    "InvalidInput",
    "NoBackendFound",
    "BackendUnavailable",
    "SpeechError",
    "SpawnFailed",
    "NonZeroExit",
    "__version__",
]
