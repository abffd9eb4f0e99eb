"""
Speech backend descriptors.

Each backend knows how to find and start one external synthesizer:
espeak (command line), say (macOS), cscript (Windows SAPI).
"""

from .base import Backend, ProcessOutcome, SpeechRequest
from .factory import BACKENDS, detect, detect_any, find_backend

__all__ = [
    "Backend",
    "ProcessOutcome",
    "SpeechRequest",
    "BACKENDS",
    "detect",
    "detect_any",
    "find_backend",
]
