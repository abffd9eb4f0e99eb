"""
say backend (macOS dictation command).

Pipes text with embedded ``[[...]]`` speech commands into ``say``.
"""

from pathlib import Path
from typing import List, Optional

from hostvoice.core.markup import Pause
from .base import Backend

# 32 bit little endian float at 22.05 kHz, understood by every output container
FILE_DATA_FORMAT = "LEF32@22050"

_BRACKETS = str.maketrans("[]", "()")


class SayBackend(Backend):
    """The built-in ``say`` command on Mac systems."""

    name = "say"
    executable = "say"
    platforms = ("Darwin",)

    def command(self, output_path: Optional[Path] = None) -> List[str]:
        cmd = [self.executable]
        if output_path is not None:
            cmd += [f"--data-format={FILE_DATA_FORMAT}", "-o", str(output_path)]
        return cmd

    def escape(self, text: str) -> str:
        # No square brackets at all, otherwise text next to a directive could
        # still form "[[" and issue a command
        return text.translate(_BRACKETS)

    def render_emphasis(self, text: str) -> str:
        return f"[[emph +]]{text}[[emph -]]"

    def render_pause(self, pause: Pause) -> str:
        return f"[[slnc {pause.milliseconds}]]"

    def wrap(self, body: str) -> str:
        return body + "\n"
