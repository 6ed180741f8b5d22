"""Canonical pretty-printer for resolved Wryneck trees.

Rendering is a pure structural recursion: every node kind has exactly one
rendering, ``Op`` is always fully parenthesized, and ``Error`` nodes render as
a visible (red, when color is enabled) marker so the rest of the tree still
formats.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .lexer_rd import ENTRY_POINT
from .resolved_ast import (
    Block,
    Comment,
    ExprComment,
    ExprError,
    ExprStmt,
    Expression,
    Function,
    FunctionCall,
    FunctionDefinition,
    FunctionId,
    FunctionTable,
    Group,
    If,
    Let,
    Number,
    Op,
    Program,
    Return,
    Statement,
    StmtError,
    String,
    Test,
    Variable,
)
from .utils import paint

INDENT_WIDTH = 4

FN_MARKER = "🥚"
ENTRY_POINT_MARKER = "🐣"
RETURN_MARKER = "🐔"

ERROR_TOKEN = "error"
ERROR_STATEMENT = "error!"

Node = Union[
    Program,
    FunctionId,
    Function,
    FunctionDefinition,
    Test,
    Statement,
    Expression,
]


class Formatter:
    """Output buffer plus indentation cursor threaded through the render calls."""

    def __init__(
        self,
        functions: Optional[FunctionTable[Function]] = None,
        color: Optional[bool] = None,
    ) -> None:
        self.indent_level = 0
        self.parts: List[str] = []
        self.functions = functions
        self.color = color

    # ========================================================================
    # Buffer primitives
    # ========================================================================

    def indent(self) -> None:
        self.indent_level += 1

    def unindent(self) -> None:
        if self.indent_level == 0:
            raise ValueError("unindent() below zero")
        self.indent_level -= 1

    def push_indent(self) -> None:
        self.parts.append(" " * (self.indent_level * INDENT_WIDTH))

    def push_str(self, s: str) -> None:
        self.parts.append(s)

    def push_str_indented(self, s: str) -> None:
        self.push_indent()
        self.parts.append(s)

    def getvalue(self) -> str:
        return "".join(self.parts)

    # ========================================================================
    # Nodes
    # ========================================================================

    def format(self, node: Node) -> None:
        match node:
            case Program():
                self.format_program(node)
            case FunctionId():
                if self.functions is None:
                    raise ValueError(f"{node!r} cannot be rendered without its function table")
                self.format_function(self.functions[node])
            case Function():
                self.format_function(node)
            case FunctionDefinition():
                self.format_definition(node)
            case Test():
                self.format_test(node)
            case Comment():
                self.format_comment(node)
            case Let() | ExprStmt() | Return() | StmtError():
                self.format_stmt(node)
            case _:
                self.format_expr(node)

    def format_program(self, program: Program) -> None:
        saved = self.functions
        self.functions = program.functions
        try:
            for thing in program.things:
                match thing:
                    case FunctionId():
                        self.format_function(program.functions[thing])
                    case Comment():
                        self.format_comment(thing)
        finally:
            self.functions = saved

    def format_comment(self, comment: Comment) -> None:
        self.push_str_indented("// ")
        self.push_str(comment.text)
        self.push_str("\n")

    def format_function(self, func: Function) -> None:
        self.format_definition(func.definition)
        self.format_expr(func.body)

        if func.tests:
            self.push_str_indented("[\n")
            self.indent()
            for test in func.tests:
                self.push_str_indented("")
                self.format_test(test)
                self.push_str(",\n")
            self.unindent()
            self.push_str_indented("]")

        self.push_str("\n\n")

    def format_definition(self, definition: FunctionDefinition) -> None:
        if definition.name == ENTRY_POINT:
            self.push_str_indented(f"{FN_MARKER} {ENTRY_POINT_MARKER}(")
        else:
            self.push_str_indented(f"{FN_MARKER} ")
            self.push_str(definition.name)
            self.push_str("(")
        self.push_str(", ".join(param.name for param in definition.params))
        self.push_str(") ")

    def format_test(self, test: Test) -> None:
        self.format_expr(test.input)
        self.push_str(" = ")
        self.format_expr(test.output)

    def format_stmt(self, stmt: Statement) -> None:
        match stmt:
            case Let(name=name, value=value):
                self.push_str_indented("let ")
                self.push_str(name)
                self.push_str(" = ")
                self.format_expr(value)
                self.push_str(";\n")
            case ExprStmt(expr=expr):
                self.push_str_indented("")
                self.format_expr(expr)
                self.push_str(";\n")
            case Return(expr=expr):
                self.push_str_indented(f"{RETURN_MARKER} ")
                self.format_expr(expr)
                self.push_str(";\n")
            case Comment():
                self.format_comment(stmt)
            case StmtError():
                self.push_str_indented(paint(ERROR_STATEMENT, "red", self.color))
                self.push_str("\n")
            case _:
                raise TypeError(f"unexpected statement node {type(stmt).__name__}")

    def format_expr(self, expr: Expression) -> None:
        match expr:
            case Group(expr=inner):
                self.format_expr(inner)
            case Block(stmts=stmts):
                self.push_str("{\n")
                self.indent()
                for stmt in stmts:
                    self.format_stmt(stmt)
                self.unindent()
                self.push_str_indented("}")
            case FunctionCall(name=name, args=args):
                self.push_str(f"{name}(")
                for i, arg in enumerate(args):
                    if i > 0:
                        self.push_str(", ")
                    self.format_expr(arg)
                self.push_str(")")
            case Variable(name=name):
                self.push_str(name)
            case Number(value=value):
                self.push_str(str(value))
            case String(value=value):
                self.push_str(value)
            case If(condition=condition, body=body, else_body=else_body):
                self.push_str("if ")
                if _dangles(condition):
                    # keep the parens or the body would re-parse as its else branch
                    self.push_str("(")
                    self.format_expr(condition)
                    self.push_str(")")
                else:
                    self.format_expr(condition)
                self.push_str(" ")
                self.format_expr(body)
                if else_body is not None:
                    self.format_expr(else_body)
            case Op(lhs=lhs, op=op, rhs=rhs):
                self.push_str("(")
                self.format_expr(lhs)
                self.push_str(f" {op} ")
                self.format_expr(rhs)
                self.push_str(")")
            case ExprComment(expr=inner, comment=comment):
                self.format_expr(inner)
                self.format_comment(comment)
            case ExprError():
                self.push_str(paint(ERROR_TOKEN, "red", self.color))
            case _:
                raise TypeError(f"unexpected expression node {type(expr).__name__}")


def _dangles(expr: Expression) -> bool:
    """True when ``expr`` renders ending in an ``if`` that has no else branch."""
    match expr:
        case Group(expr=inner):
            return _dangles(inner)
        case If(else_body=None):
            return True
        case If(else_body=else_body):
            return _dangles(else_body)
        case _:
            return False


def format_program(program: Program, color: Optional[bool] = None) -> str:
    """Render a resolved program to its canonical text."""
    formatter = Formatter(color=color)
    formatter.format_program(program)
    return formatter.getvalue()


def format_node(
    node: Node,
    functions: Optional[FunctionTable[Function]] = None,
    color: Optional[bool] = None,
) -> str:
    """Render any sub-node in isolation, starting at indentation level zero."""
    formatter = Formatter(functions=functions, color=color)
    formatter.format(node)
    return formatter.getvalue()
