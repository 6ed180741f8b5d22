"""Raw syntax tree, as produced by the parser before name resolution.

Statement and expression nodes are shared with the resolved tree; only the
program/top-level shape differs (see ``resolved_ast``).  ``Error`` and
``Comment`` cases are ordinary variants of the same unions so every consumer
handles them in the same exhaustive ``match`` as the normal cases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from typing_extensions import TypeAlias

COMMENT_MARKER = "//"


@dataclass
class Comment:
    """Comment text with the leading marker and surrounding whitespace removed."""

    text: str

    @classmethod
    def from_lexeme(cls, lexeme: str) -> Comment:
        text = lexeme
        if text.startswith(COMMENT_MARKER):
            text = text[len(COMMENT_MARKER):]
        return cls(text.strip())


# function -------------------------------------------------------------------

@dataclass
class Parameter:
    name: str


@dataclass
class FunctionDefinition:
    name: str
    params: List[Parameter] = field(default_factory=list)


@dataclass
class Test:
    """Inline example: ``input = output``.  Documentary only, never evaluated."""

    input: Expression
    output: Expression


@dataclass
class Function:
    definition: FunctionDefinition
    body: Expression
    tests: List[Test] = field(default_factory=list)

    @classmethod
    def recovered(cls, name: str) -> Function:
        """Placeholder for a top-level item the parser could not make sense of."""
        return cls(FunctionDefinition(name), ExprError())


# statements -----------------------------------------------------------------

@dataclass
class Let:
    name: str
    value: Expression


@dataclass
class ExprStmt:
    """An expression evaluated for effect."""

    expr: Expression


@dataclass
class Return:
    expr: Expression


@dataclass
class StmtError:
    """A statement the parser could not recover into a valid shape."""


Statement: TypeAlias = Union[Let, ExprStmt, Return, Comment, StmtError]


# expressions ----------------------------------------------------------------

class Opcode(Enum):
    MUL = "*"
    DIV = "/"
    ADD = "+"
    SUB = "-"

    def __str__(self) -> str:
        return self.value


@dataclass
class Group:
    """Transparent wrapper recording an explicit ``( ... )`` in the source."""

    expr: Expression


@dataclass
class Block:
    stmts: List[Statement] = field(default_factory=list)


@dataclass
class FunctionCall:
    name: str
    args: List[Expression] = field(default_factory=list)


@dataclass
class Variable:
    name: str


@dataclass
class Number:
    value: int


@dataclass
class String:
    """String literal; ``value`` is the lexeme, quotes included."""

    value: str


@dataclass
class If:
    condition: Expression
    body: Expression
    else_body: Optional[Expression] = None


@dataclass
class Op:
    lhs: Expression
    op: Opcode
    rhs: Expression


@dataclass
class ExprComment:
    """An expression with a trailing comment attached to it."""

    expr: Expression
    comment: Comment


@dataclass
class ExprError:
    """Parse-failure placeholder in expression position."""


Expression: TypeAlias = Union[
    Group,
    Block,
    FunctionCall,
    Variable,
    Number,
    String,
    If,
    Op,
    ExprComment,
    ExprError,
]


# program --------------------------------------------------------------------

TopLevel: TypeAlias = Union[Function, Comment]


@dataclass
class Program:
    things: List[TopLevel] = field(default_factory=list)

    def functions(self) -> List[Function]:
        return [thing for thing in self.things if isinstance(thing, Function)]
