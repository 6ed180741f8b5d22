from __future__ import annotations

from . import base_ast as raw
from . import resolved_ast as res


def resolve(program: raw.Program) -> res.Program:
    """Lower a raw program into a resolved one.

    Functions are moved into the program's function table in declaration
    order, so the i-th declared function gets ``FunctionId(i)``.  Comments keep
    their position in ``things``.  Total: performs no validation.
    """
    resolved = res.Program()

    for thing in program.things:
        match thing:
            case raw.Function():
                # lower fully before pushing so no id ever names a partial function
                lowered = _lower_function(thing)
                resolved.things.append(resolved.functions.push(lowered))
            case raw.Comment():
                resolved.things.append(_lower_comment(thing))
            case _:
                raise TypeError(f"unexpected top-level node {type(thing).__name__}")

    return resolved


def _lower_comment(comment: raw.Comment) -> res.Comment:
    return res.Comment(comment.text)


def _lower_function(func: raw.Function) -> res.Function:
    definition = res.FunctionDefinition(
        func.definition.name,
        [res.Parameter(param.name) for param in func.definition.params],
    )
    tests = [
        res.Test(lower_expr(test.input), lower_expr(test.output))
        for test in func.tests
    ]
    return res.Function(definition, lower_expr(func.body), tests)


def lower_stmt(stmt: raw.Statement) -> res.Statement:
    match stmt:
        case raw.Let(name=name, value=value):
            return res.Let(name, lower_expr(value))
        case raw.ExprStmt(expr=expr):
            return res.ExprStmt(lower_expr(expr))
        case raw.Return(expr=expr):
            return res.Return(lower_expr(expr))
        case raw.Comment():
            return _lower_comment(stmt)
        case raw.StmtError():
            return res.StmtError()
        case _:
            raise TypeError(f"unexpected statement node {type(stmt).__name__}")


def lower_expr(expr: raw.Expression) -> res.Expression:
    match expr:
        case raw.Group(expr=inner):
            return res.Group(lower_expr(inner))
        case raw.Block(stmts=stmts):
            return res.Block([lower_stmt(stmt) for stmt in stmts])
        case raw.FunctionCall(name=name, args=args):
            return res.FunctionCall(name, [lower_expr(arg) for arg in args])
        case raw.Variable(name=name):
            return res.Variable(name)
        case raw.Number(value=value):
            return res.Number(value)
        case raw.String(value=value):
            return res.String(value)
        case raw.If(condition=condition, body=body, else_body=else_body):
            return res.If(
                lower_expr(condition),
                lower_expr(body),
                lower_expr(else_body) if else_body is not None else None,
            )
        case raw.Op(lhs=lhs, op=op, rhs=rhs):
            return res.Op(lower_expr(lhs), op, lower_expr(rhs))
        case raw.ExprComment(expr=inner, comment=comment):
            return res.ExprComment(lower_expr(inner), _lower_comment(comment))
        case raw.ExprError():
            return res.ExprError()
        case _:
            raise TypeError(f"unexpected expression node {type(expr).__name__}")
