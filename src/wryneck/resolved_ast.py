"""Resolved syntax tree.

Same shape as ``base_ast`` except that top-level functions are stored once in
a program-owned ``FunctionTable`` and referenced from ``things`` by a dense,
zero-based ``FunctionId``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterator, List, Tuple, TypeVar, Union

from typing_extensions import TypeAlias

from .base_ast import (
    Block,
    Comment,
    ExprComment,
    ExprError,
    ExprStmt,
    Expression,
    Function,
    FunctionCall,
    FunctionDefinition,
    Group,
    If,
    Let,
    Number,
    Op,
    Opcode,
    Parameter,
    Return,
    Statement,
    StmtError,
    String,
    Test,
    Variable,
)

__all__ = [
    "Block",
    "Comment",
    "ExprComment",
    "ExprError",
    "ExprStmt",
    "Expression",
    "Function",
    "FunctionCall",
    "FunctionDefinition",
    "FunctionId",
    "FunctionTable",
    "Group",
    "If",
    "Let",
    "Number",
    "Op",
    "Opcode",
    "Parameter",
    "Program",
    "Return",
    "Statement",
    "StmtError",
    "String",
    "Test",
    "TopLevel",
    "Variable",
]


@dataclass(frozen=True, order=True)
class FunctionId:
    """Index of a function in its program's ``FunctionTable``."""

    index: int

    def __index__(self) -> int:
        return self.index

    def __repr__(self) -> str:
        return f"FunctionId({self.index})"


T = TypeVar("T")


class FunctionTable(Generic[T]):
    """Append-only arena addressed by ``FunctionId``.

    Identifiers are handed out sequentially by ``push`` and are never reused
    or renumbered.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[T] = []

    def push(self, item: T) -> FunctionId:
        self._items.append(item)
        return FunctionId(len(self._items) - 1)

    def __getitem__(self, fid: FunctionId) -> T:
        if not isinstance(fid, FunctionId):
            raise TypeError(f"function table is indexed by FunctionId, not {type(fid).__name__}")
        return self._items[fid.index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def ids(self) -> Iterator[FunctionId]:
        return (FunctionId(i) for i in range(len(self._items)))

    def items(self) -> Iterator[Tuple[FunctionId, T]]:
        return ((FunctionId(i), item) for i, item in enumerate(self._items))

    def __repr__(self) -> str:
        return f"FunctionTable({self._items!r})"


TopLevel: TypeAlias = Union[FunctionId, Comment]


@dataclass
class Program:
    things: List[TopLevel] = field(default_factory=list)
    functions: FunctionTable[Function] = field(default_factory=FunctionTable)

    def function_ids(self) -> List[FunctionId]:
        """Function identifiers in declaration order."""
        return [thing for thing in self.things if isinstance(thing, FunctionId)]
