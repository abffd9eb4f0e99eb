"""
cscript backend (Windows Script Host driving SAPI).

Runs a tiny VBScript with ``cscript`` that speaks every line read from
standard input as SAPI XML. The script ships with the package and is
copied to the temp directory the first time it is needed.

File output uses a small line protocol on standard input: the sentinel
line followed by a path line makes the script write all following speech
into that file. Changing the sentinel breaks every copy of the script
already written to a temp directory, so it is versioned and never edited.
"""

import os
import tempfile
from importlib import resources
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

from hostvoice.core.markup import Pause
from hostvoice.version import __version__
from .base import Backend, SpeechRequest, logger

SENTINEL_PROTOCOL_VERSION = 1
FILE_REDIRECT_SENTINEL = "8f4c2a1e-3b7d-4e59-a6c0-1d2e3f4a5b6c"

SCRIPT_RESOURCE = "say_lines.vbs"
# Prefixed with the package version so different installs do not share a script
SCRIPT_FILENAME = f"{__version__}-say_lines_for_hostvoice.vbs"

LINE_END = "\r\n"


def script_source() -> bytes:
    """Contents of the bundled VBScript."""
    return resources.files(__package__).joinpath("resources").joinpath(SCRIPT_RESOURCE).read_bytes()


def install_script(path: Path) -> Path:
    """
    Write the VBScript to ``path`` unless it already exists.

    The file is written under a temporary name and moved into place, so
    concurrent callers never see a partial script.
    """
    if not path.exists():
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".vbs")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(script_source())
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info(f"Wrote speech script to {path}")

    return path


class CScriptBackend(Backend):
    """SAPI speech through cscript, only on Windows."""

    name = "cscript"
    executable = "cscript"
    platforms = ("Windows",)

    # cscript //U reads UTF-16 from standard input
    encoding = "utf-16-le"

    def __init__(self, script_dir: Optional[Path] = None):
        self.script_dir = script_dir

    @property
    def script_file(self) -> Path:
        return Path(self.script_dir or tempfile.gettempdir()) / SCRIPT_FILENAME

    def prepare(self) -> None:
        install_script(self.script_file)

    def command(self, output_path: Optional[Path] = None) -> List[str]:
        # Output redirection happens over standard input, see payload()
        return [self.executable, "//U", "//Nologo", str(self.script_file)]

    def escape(self, text: str) -> str:
        return escape(text)

    def render_emphasis(self, text: str) -> str:
        return f"<emph>{text}</emph>"

    def render_pause(self, pause: Pause) -> str:
        return f'<silence msec="{pause.milliseconds}" />'

    def format(self, raw: str) -> str:
        """One SAPI XML document per line, the script speaks line by line."""
        documents = [f"<sapi>{super(CScriptBackend, self).format(line)}</sapi>" for line in raw.splitlines()]
        return "".join(document + LINE_END for document in documents)

    def payload(self, request: SpeechRequest) -> bytes:
        text = request.encoded
        if request.output_path is not None:
            target = os.path.abspath(request.output_path)
            text = FILE_REDIRECT_SENTINEL + LINE_END + target + LINE_END + text
        return text.encode(self.encoding)
