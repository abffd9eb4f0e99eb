"""
Base backend descriptor.

Every backend inherits from Backend and describes how to detect the
synthesizer, how to invoke it, and how to encode text for its input.
Backends hold no state, so one instance is shared by every voice.
"""

import logging
import platform
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from hostvoice.core.markup import Emphasis, Pause, tokenize

logger = logging.getLogger("hostvoice.backends")


@dataclass(frozen=True)
class SpeechRequest:
    """A single say() call: raw text, its encoding and an optional target file."""
    text: str
    encoded: str
    output_path: Optional[Path] = None


@dataclass(frozen=True)
class ProcessOutcome:
    """Exit status and captured standard error of one backend process."""
    returncode: int
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class Backend(ABC):
    """Base class for speech backends."""

    name: str = ""
    executable: str = ""
    # platform.system() values the backend exists on, empty for any
    platforms: Tuple[str, ...] = ()

    supports_emphasis = True
    supports_pauses = True
    supports_file_output = True

    # Encoding of the bytes written to standard input
    encoding = "utf-8"

    def is_present(self) -> bool:
        """
        Check whether this backend can be used on the host.

        Only looks at the platform and the search path, never spawns
        anything.
        """
        if self.platforms and platform.system() not in self.platforms:
            logger.debug(f"{self.name}: not on {'/'.join(self.platforms)}")
            return False

        path = shutil.which(self.executable)
        logger.debug(f"{self.name}: {self.executable} -> {path or 'not found'}")
        return path is not None

    @abstractmethod
    def command(self, output_path: Optional[Path] = None) -> List[str]:
        """
        Build the argument list that starts the backend.

        Args:
            output_path: Write audio to this file instead of the speakers

        Returns:
            Executable followed by its arguments
        """
        pass

    def prepare(self) -> None:
        """Called right before spawning. Override if needed."""
        pass

    def escape(self, text: str) -> str:
        """Neutralise characters with special meaning in the input protocol."""
        return text

    def render_emphasis(self, text: str) -> str:
        return text

    def render_pause(self, pause: Pause) -> str:
        return pause.literal

    def wrap(self, body: str) -> str:
        return body

    def format(self, raw: str) -> str:
        """
        Encode user markup into this backend's inline directives.

        Emphasis and pauses degrade to plain text and literal dots on
        backends that do not support them.
        """
        parts = []
        for token in tokenize(raw):
            if isinstance(token, Pause):
                if self.supports_pauses:
                    parts.append(self.render_pause(token))
                else:
                    parts.append(self.escape(token.literal))
            elif isinstance(token, Emphasis):
                text = self.escape(token.text)
                parts.append(self.render_emphasis(text) if self.supports_emphasis else text)
            else:
                parts.append(self.escape(token.text))

        return self.wrap("".join(parts))

    def request(self, text: str, output_path: Optional[Path] = None) -> SpeechRequest:
        """Create the request for one say() call."""
        if output_path is not None:
            if not self.supports_file_output:
                raise ValueError(f"{self.name} cannot write audio to a file")
            output_path = Path(output_path)

        return SpeechRequest(text=text, encoded=self.format(text), output_path=output_path)

    def payload(self, request: SpeechRequest) -> bytes:
        """Bytes written to the backend's standard input."""
        return request.encoded.encode(self.encoding)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
