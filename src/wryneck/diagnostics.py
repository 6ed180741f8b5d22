"""Map byte-offset error spans back to highlighted source excerpts.

Works on raw text and integer ranges only, so it serves every error kind the
lexer and parser produce.  Offsets are UTF-8 byte offsets; before anything is
spliced into the text they are moved forward to the next character boundary,
so a highlight never splits an encoded character.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from prompt_toolkit.utils import get_cwidth

from .errors import ParseError
from .utils import paint


@dataclass(frozen=True)
class Location:
    """1-based position of a byte offset.

    ``column`` counts bytes from the start of the line, ``char_column`` counts
    characters.
    """

    line: int
    column: int
    char_column: int


def is_char_boundary(data: bytes, offset: int) -> bool:
    if offset <= 0 or offset >= len(data):
        return True
    # UTF-8 continuation bytes look like 0b10xxxxxx
    return (data[offset] & 0xC0) != 0x80


def char_boundary(data: bytes, offset: int) -> int:
    """Clamp ``offset`` into ``data`` and advance it to the next character boundary."""
    offset = min(max(offset, 0), len(data))
    while not is_char_boundary(data, offset):
        offset += 1
    return offset


def locate(source: str, offset: int) -> Location:
    data = source.encode("utf-8")
    offset = char_boundary(data, offset)

    line_start = data.rfind(b"\n", 0, offset) + 1
    line = data.count(b"\n", 0, line_start) + 1
    char_column = len(data[line_start:offset].decode("utf-8")) + 1
    return Location(line, offset - line_start + 1, char_column)


def display_column(source: str, offset: int) -> int:
    """1-based terminal column of ``offset``; wide characters such as emoji count twice."""
    data = source.encode("utf-8")
    offset = char_boundary(data, offset)
    line_start = data.rfind(b"\n", 0, offset) + 1
    return get_cwidth(data[line_start:offset].decode("utf-8")) + 1


def highlight(source: str, start: int, end: int, color: Optional[bool] = None) -> str:
    """Return ``source`` with ``[start, end)`` wrapped in red markers."""
    data = source.encode("utf-8")
    start = char_boundary(data, start)
    end = char_boundary(data, max(end, start))

    before = data[:start].decode("utf-8")
    marked = data[start:end].decode("utf-8")
    after = data[end:].decode("utf-8")
    return before + paint(marked, "red", color) + after


def excerpt(source: str, start: int, end: int, color: Optional[bool] = None) -> str:
    """Render the offending line (and the one before it) plus a caret line.

    ::

        1: 🥚 f() {
        2:     let x = ;
        ---------------^
    """
    loc = locate(source, start)
    lines = [line.removesuffix("\r") for line in highlight(source, start, end, color).split("\n")]
    width = len(str(loc.line))

    out: List[str] = []
    if loc.line > 1:
        out.append(f"{loc.line - 1:>{width}}: {lines[loc.line - 2]}")
    out.append(f"{loc.line:>{width}}: {lines[loc.line - 1]}")
    out.append("-" * (display_column(source, start) + width + 1) + "^")
    return "\n".join(out)


def report(error: ParseError, source: str, color: Optional[bool] = None) -> str:
    """Message line(s) for ``error`` followed by its excerpt."""
    start, end = error.span()
    lines = [paint(line, "red", color) for line in error.describe()]
    lines.append(excerpt(source, start, end, color))
    return "\n".join(lines)
