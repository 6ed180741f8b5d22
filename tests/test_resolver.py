from __future__ import annotations

from textwrap import dedent

import pytest

from wryneck import base_ast as raw
from wryneck import resolved_ast as res
from wryneck.parser_rd import parse_source
from wryneck.resolved_ast import FunctionId, FunctionTable
from wryneck.resolver import lower_expr, resolve

SOURCE = dedent(
    """\
    // one
    🥚 f() { 🐔 1; }
    // two
    🥚 g(x) { 🐔 x; } [ g(1) = 1 ]
    🥚 🐣() { f(); }
    """
)


def test_ids_are_dense_and_in_declaration_order() -> None:
    raw_program, _ = parse_source(SOURCE)
    program = resolve(raw_program)

    assert program.function_ids() == [FunctionId(0), FunctionId(1), FunctionId(2)]
    assert list(program.functions.ids()) == program.function_ids()
    names = [program.functions[fid].definition.name for fid in program.function_ids()]
    assert names == ["f", "g", "hatch"]


def test_comments_keep_their_position() -> None:
    raw_program, _ = parse_source(SOURCE)
    program = resolve(raw_program)

    assert program.things == [
        res.Comment("one"),
        FunctionId(0),
        res.Comment("two"),
        FunctionId(1),
        FunctionId(2),
    ]


def test_functions_are_lowered_not_shared() -> None:
    raw_program, _ = parse_source(SOURCE)
    program = resolve(raw_program)

    for raw_func, func in zip(raw_program.functions(), program.functions):
        assert func == raw_func
        assert func is not raw_func
        assert func.body is not raw_func.body
        assert func.definition is not raw_func.definition


def test_resolution_is_deterministic() -> None:
    first = resolve(parse_source(SOURCE)[0])
    second = resolve(parse_source(SOURCE)[0])
    assert first.things == second.things
    assert list(first.functions) == list(second.functions)


def test_placeholders_get_ids_like_any_function() -> None:
    raw_program, errors = parse_source("}\n🥚 f() {}")
    program = resolve(raw_program)

    assert len(errors) == 1
    assert program.function_ids() == [FunctionId(0), FunctionId(1)]
    assert program.functions[FunctionId(0)].body == res.ExprError()


def test_empty_program_has_empty_table() -> None:
    program = resolve(raw.Program())
    assert program.things == []
    assert len(program.functions) == 0


def test_lower_expr_copies_nested_nodes() -> None:
    tree = raw.If(
        raw.Variable("c"),
        raw.Block([raw.Let("x", raw.ExprComment(raw.Number(1), raw.Comment("n"))), raw.StmtError()]),
        raw.Op(raw.Group(raw.String('"s"')), raw.Opcode.ADD, raw.ExprError()),
    )
    lowered = lower_expr(tree)
    assert lowered == tree
    assert lowered.body is not tree.body
    assert lowered.else_body is not tree.else_body


def test_lower_expr_rejects_unknown_nodes() -> None:
    with pytest.raises(TypeError):
        lower_expr("not a node")  # type: ignore[arg-type]


# ============================================================================
# FunctionTable
# ============================================================================

def test_table_push_hands_out_sequential_ids() -> None:
    table: FunctionTable[str] = FunctionTable()
    assert table.push("a") == FunctionId(0)
    assert table.push("b") == FunctionId(1)
    assert table[FunctionId(1)] == "b"
    assert list(table.items()) == [(FunctionId(0), "a"), (FunctionId(1), "b")]


def test_table_rejects_plain_ints() -> None:
    table: FunctionTable[str] = FunctionTable()
    table.push("a")
    with pytest.raises(TypeError):
        table[0]  # type: ignore[index]


def test_function_id_orders_by_index() -> None:
    assert FunctionId(0) < FunctionId(2)
    assert repr(FunctionId(3)) == "FunctionId(3)"
    assert ["a", "b", "c"][FunctionId(2)] == "c"
