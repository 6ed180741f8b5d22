"""Debug dump of resolved programs as Lark trees.

``to_tree`` mirrors the resolved program node for node; ``dump`` renders it
with ``Tree.pretty()``.
"""
from __future__ import annotations

from typing import List, Optional, Union

from lark import Token, Tree
from typing_extensions import TypeAlias

from .resolved_ast import (
    Block,
    Comment,
    ExprComment,
    ExprError,
    ExprStmt,
    Expression,
    Function,
    FunctionCall,
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

Node: TypeAlias = Union[Tree, Token]


def to_tree(program: Program) -> Tree:
    things: List[Node] = []
    for thing in program.things:
        match thing:
            case FunctionId():
                things.append(Tree("function_ref", [_id_token(thing)]))
            case Comment():
                things.append(comment_tree(thing))

    return Tree("program", [
        Tree("things", things),
        functions_tree(program.functions),
    ])


def functions_tree(functions: FunctionTable[Function]) -> Tree:
    return Tree("functions", [function_tree(func, fid) for fid, func in functions.items()])


def function_tree(func: Function, fid: Optional[FunctionId] = None) -> Tree:
    definition = Tree("definition", [
        Token("IDENT", func.definition.name),
        Tree("params", [Token("IDENT", param.name) for param in func.definition.params]),
    ])
    children: List[Node] = [] if fid is None else [_id_token(fid)]
    children.append(definition)
    children.append(Tree("body", [expr_tree(func.body)]))
    if func.tests:
        children.append(Tree("tests", [tree_for_test(test) for test in func.tests]))
    return Tree("function", children)


def tree_for_test(test: Test) -> Tree:
    return Tree("test", [expr_tree(test.input), expr_tree(test.output)])


def comment_tree(comment: Comment) -> Tree:
    return Tree("comment", [Token("COMMENT", comment.text)])


def stmt_tree(stmt: Statement) -> Tree:
    match stmt:
        case Let(name=name, value=value):
            return Tree("let", [Token("IDENT", name), expr_tree(value)])
        case ExprStmt(expr=expr):
            return Tree("expr_stmt", [expr_tree(expr)])
        case Return(expr=expr):
            return Tree("return", [expr_tree(expr)])
        case Comment():
            return comment_tree(stmt)
        case StmtError():
            return Tree("error_stmt", [])
        case _:
            raise TypeError(f"unexpected statement node {type(stmt).__name__}")


def expr_tree(expr: Expression) -> Tree:
    match expr:
        case Group(expr=inner):
            return Tree("group", [expr_tree(inner)])
        case Block(stmts=stmts):
            return Tree("block", [stmt_tree(stmt) for stmt in stmts])
        case FunctionCall(name=name, args=args):
            return Tree("call", [Token("IDENT", name), *[expr_tree(arg) for arg in args]])
        case Variable(name=name):
            return Tree("variable", [Token("IDENT", name)])
        case Number(value=value):
            return Tree("number", [Token("NUMBER", str(value))])
        case String(value=value):
            return Tree("string", [Token("STRING", value)])
        case If(condition=condition, body=body, else_body=else_body):
            children: List[Node] = [expr_tree(condition), expr_tree(body)]
            if else_body is not None:
                children.append(expr_tree(else_body))
            return Tree("if", children)
        case Op(lhs=lhs, op=op, rhs=rhs):
            return Tree("op", [expr_tree(lhs), Token("OP", op.value), expr_tree(rhs)])
        case ExprComment(expr=inner, comment=comment):
            return Tree("expr_comment", [expr_tree(inner), comment_tree(comment)])
        case ExprError():
            return Tree("error", [])
        case _:
            raise TypeError(f"unexpected expression node {type(expr).__name__}")


def dump(program: Program) -> str:
    return to_tree(program).pretty()


def _id_token(fid: FunctionId) -> Token:
    return Token("ID", str(fid.index))
