"""Parse error taxonomy and recovery records.

Every error carries UTF-8 byte offsets into the source so the diagnostic
mapper can highlight it without knowing anything about the tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .token_types import Tok


class ErrorKind(str, Enum):
    INVALID_TOKEN = "invalid token"
    UNRECOGNIZED_EOF = "unrecognized eof"
    UNRECOGNIZED_TOKEN = "unrecognized token"
    EXTRA_TOKEN = "extra token"
    USER = "user"


class ParseError(Exception):
    """Base class for every error the lexer or parser can surface."""

    kind: ErrorKind

    def __init__(self, message: str, start: int, end: int) -> None:
        self.message = message
        self.start = start
        self.end = max(end, start)
        super().__init__(message)

    def span(self) -> Tuple[int, int]:
        """Half-open byte range to highlight.

        Location-only errors have an empty range; widen it to one byte so the
        mapper can grow it to the enclosing character.
        """
        if self.end > self.start:
            return self.start, self.end
        return self.start, self.start + 1

    def describe(self) -> List[str]:
        """Human-readable message lines preceding the excerpt."""
        return [self.message]


def _expected_line(expected: Sequence[str]) -> Optional[str]:
    if not expected:
        return None
    return f"Expected: {' or '.join(expected)}"


class InvalidToken(ParseError):
    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, location: int, line: int = 0, column: int = 0) -> None:
        self.location = location
        self.line = line
        self.column = column
        super().__init__(f"Invalid token found at {location}", location, location)


class UnrecognizedEOF(ParseError):
    kind = ErrorKind.UNRECOGNIZED_EOF

    def __init__(self, location: int, expected: Sequence[str]) -> None:
        self.location = location
        self.expected = list(expected)
        super().__init__(f"Unexpected end of input at {location}", location, location)

    def describe(self) -> List[str]:
        lines = [self.message]
        expected = _expected_line(self.expected)
        if expected:
            lines.append(expected)
        return lines


class UnrecognizedToken(ParseError):
    kind = ErrorKind.UNRECOGNIZED_TOKEN

    def __init__(self, token: Tok, expected: Sequence[str]) -> None:
        self.token = token
        self.expected = list(expected)
        super().__init__(
            f"Unrecognized token `{token.value}` found at {token.start}..{token.end}",
            token.start,
            token.end,
        )

    def describe(self) -> List[str]:
        lines = [self.message]
        expected = _expected_line(self.expected)
        if expected:
            lines.append(expected)
        return lines


class ExtraToken(ParseError):
    kind = ErrorKind.EXTRA_TOKEN

    def __init__(self, token: Tok) -> None:
        self.token = token
        super().__init__(
            f"Extra token `{token.value}` found at {token.start}..{token.end}",
            token.start,
            token.end,
        )


class UserError(ParseError):
    kind = ErrorKind.USER


@dataclass
class ErrorRecovery:
    """A parse error the parser patched around, plus the tokens it dropped."""

    error: ParseError
    dropped_tokens: List[Tok] = field(default_factory=list)
