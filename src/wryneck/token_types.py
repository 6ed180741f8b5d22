"""
Token Types for the Wryneck Parser

Shared between lexer, parser and highlighter to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # Keywords
    FN = auto()  # 🥚
    RETURN = auto()  # 🐔
    LET = auto()
    IF = auto()
    ELSE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    ASSIGN = auto()  # =

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LSQB = auto()
    RSQB = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    SEMI = auto()

    # Special
    COMMENT = auto()
    EOF = auto()


# Human-readable terminal names used in "Expected: ..." messages.
TT_DISPLAY = {
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.FN: '"🥚"',
    TT.RETURN: '"🐔"',
    TT.LET: '"let"',
    TT.IF: '"if"',
    TT.ELSE: '"else"',
    TT.PLUS: '"+"',
    TT.MINUS: '"-"',
    TT.STAR: '"*"',
    TT.SLASH: '"/"',
    TT.ASSIGN: '"="',
    TT.LPAR: '"("',
    TT.RPAR: '")"',
    TT.LSQB: '"["',
    TT.RSQB: '"]"',
    TT.LBRACE: '"{"',
    TT.RBRACE: '"}"',
    TT.COMMA: '","',
    TT.SEMI: '";"',
    TT.COMMENT: "comment",
    TT.EOF: "end of input",
}


@dataclass
class Tok:
    """Token with position info.

    ``start``/``end`` are UTF-8 byte offsets into the source, ``line`` and
    ``column`` are 1-based and counted in characters.
    """

    type: TT
    value: Any
    line: int = 0
    column: int = 0
    start: int = 0
    end: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
