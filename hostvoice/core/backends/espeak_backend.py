"""
espeak backend (command line synthesizer).

Pipes SSML into ``espeak -m``. Commonly available on Linux and other
Unix-like systems, rather exotic but possible on Windows.
"""

from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

from hostvoice.core.markup import Pause
from .base import Backend


class EspeakBackend(Backend):
    """espeak reading SSML from standard input."""

    name = "espeak"
    executable = "espeak"

    def command(self, output_path: Optional[Path] = None) -> List[str]:
        cmd = [self.executable, "-m"]
        if output_path is not None:
            cmd += ["-w", str(output_path)]
        return cmd

    def escape(self, text: str) -> str:
        return escape(text)

    def render_emphasis(self, text: str) -> str:
        return f"<emphasis>{text}</emphasis>"

    def render_pause(self, pause: Pause) -> str:
        if pause.is_sentence:
            return '<break strength="medium"/>'
        if pause.is_paragraph:
            return '<break strength="x-strong"/>'
        return f'<break time="{pause.seconds}s"/>'

    def wrap(self, body: str) -> str:
        return f"<speak>{body}</speak>\n"
