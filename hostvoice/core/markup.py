"""
Emphasis and pause markup.

Text passed to a voice may contain two kinds of markup:

- ``_word_`` marks an emphasised span. An underscore without a closing
  partner emphasises the rest of the text.
- a run of dots marks a pause. One dot is a sentence pause, two dots a
  paragraph pause, three dots one second, and every further dot doubles
  the seconds. A pause inside an emphasised span splits the span.

Backends turn the tokens produced here into their own inline directives.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Union

SENTENCE_PAUSE_MS = 350
PARAGRAPH_PAUSE_MS = 700

_TOKEN_RE = re.compile(r"_(?P<emphasis>[^_]*)(?:_|$)|(?P<pause>\.+)")
_PAUSE_RE = re.compile(r"(\.+)")


@dataclass(frozen=True)
class Text:
    """A piece of un-emphasised speech."""
    text: str


@dataclass(frozen=True)
class Emphasis:
    """A piece of emphasised speech."""
    text: str


@dataclass(frozen=True)
class Pause:
    """A pause, made from ``dots`` consecutive dots."""
    dots: int

    @property
    def is_sentence(self) -> bool:
        return self.dots == 1

    @property
    def is_paragraph(self) -> bool:
        return self.dots == 2

    @property
    def seconds(self) -> int:
        """Length in whole seconds, 0 for sentence and paragraph pauses."""
        if self.dots < 3:
            return 0
        return 2 ** (self.dots - 3)

    @property
    def milliseconds(self) -> int:
        if self.is_sentence:
            return SENTENCE_PAUSE_MS
        if self.is_paragraph:
            return PARAGRAPH_PAUSE_MS
        return self.seconds * 1000

    @property
    def literal(self) -> str:
        return "." * self.dots


Token = Union[Text, Emphasis, Pause]


def _emphasised(span: str) -> Iterator[Token]:
    # re.split with a group alternates text and dot runs
    for index, piece in enumerate(_PAUSE_RE.split(span)):
        if index % 2:
            yield Pause(len(piece))
        elif piece:
            yield Emphasis(piece)


def tokenize(source: str) -> Iterator[Token]:
    """
    Split text into plain, emphasised and pause tokens.

    A pause inside an emphasised span is yielded between the emphasised
    pieces around it. Empty spans (``__``) produce no token.

    Example:
        >>> list(tokenize("plain ... _emph_."))
        [Text(text='plain '), Pause(dots=3), Text(text=' '), Emphasis(text='emph'), Pause(dots=1)]
        >>> list(tokenize("_wait... for it_"))
        [Emphasis(text='wait'), Pause(dots=3), Emphasis(text=' for it')]
    """
    position = 0
    for match in _TOKEN_RE.finditer(source):
        if match.start() > position:
            yield Text(source[position:match.start()])
        position = match.end()

        if match.group("pause") is not None:
            yield Pause(len(match.group("pause")))
        elif match.group("emphasis"):
            yield from _emphasised(match.group("emphasis"))

    if position < len(source):
        yield Text(source[position:])

