from __future__ import annotations

from dataclasses import dataclass
from textwrap import dedent
from typing import List

import pytest

from tests.support.harness import assert_idempotent, canonical, parse_pipeline, render
from wryneck import resolved_ast as res
from wryneck.formatter import Formatter, format_node, format_program
from wryneck.resolved_ast import FunctionId


@dataclass(frozen=True)
class Case:
    name: str
    source: str
    expected: str


CANONICAL_CASES: List[Case] = [
    Case(
        "entry-point",
        "🥚 🐣() { 🐔 1; }",
        "🥚 🐣() {\n    🐔 1;\n}\n\n",
    ),
    Case(
        "comment-before-function",
        "// does things\n🥚 f() { 🐔 1; }",
        "// does things\n🥚 f() {\n    🐔 1;\n}\n\n",
    ),
    Case(
        "chained-if",
        "🥚 f(x) { if x { 🐔 1; } else if y { 🐔 2; }; }",
        "🥚 f(x) {\n    if x {\n        🐔 1;\n    }if y {\n        🐔 2;\n    };\n}\n\n",
    ),
    Case(
        "if-else-block",
        "🥚 f(x) { 🐔 if x { 1; } else { 2; }; }",
        "🥚 f(x) {\n    🐔 if x {\n        1;\n    }{\n        2;\n    };\n}\n\n",
    ),
    Case(
        "operators-fully-parenthesized",
        "🥚 f(a, b) { 🐔 a + b * 2 - (a - b); }",
        "🥚 f(a, b) {\n    🐔 ((a + (b * 2)) - (a - b));\n}\n\n",
    ),
    Case(
        "redundant-groups-dropped",
        "🥚 f(a) { 🐔 ((a)); }",
        "🥚 f(a) {\n    🐔 a;\n}\n\n",
    ),
    Case(
        "tests-block",
        "🥚 add(a, b) { 🐔 a + b; } [ add(1, 2) = 3, add(0, 0) = 0 ]",
        "🥚 add(a, b) {\n    🐔 (a + b);\n}[\n    add(1, 2) = 3,\n    add(0, 0) = 0,\n]\n\n",
    ),
    Case(
        "empty-tests-dropped",
        "🥚 f() {} []",
        "🥚 f() {\n}\n\n",
    ),
    Case(
        "let-call-string",
        '🥚 greet(name) { let msg = concat("hi ", name); print(msg); 🐔 msg; }',
        '🥚 greet(name) {\n    let msg = concat("hi ", name);\n    print(msg);\n    🐔 msg;\n}\n\n',
    ),
    Case(
        "nested-block",
        "🥚 f() { { let x = 1; }; }",
        "🥚 f() {\n    {\n        let x = 1;\n    };\n}\n\n",
    ),
    Case(
        "statement-comments",
        "🥚 f() {\n  // leading\n  🐔 1; // trailing\n}",
        "🥚 f() {\n    // leading\n    🐔 1;\n    // trailing\n}\n\n",
    ),
    Case(
        "expression-comment",
        "🥚 f() { let x = 5 // five\n; }",
        "🥚 f() {\n    let x = 5    // five\n;\n}\n\n",
    ),
    Case(
        "comment-whitespace-normalized",
        "//    spaced out   \n",
        "// spaced out\n",
    ),
    Case(
        "params-trailing-comma",
        "🥚 f(a,b,) {}",
        "🥚 f(a, b) {\n}\n\n",
    ),
    Case(
        "leading-zeros",
        "🥚 f() { 🐔 007; }",
        "🥚 f() {\n    🐔 7;\n}\n\n",
    ),
    Case(
        "if-condition-ending-in-if-keeps-parens",
        "🥚 f() { if (if a { 1; }) { 2; }; }",
        "🥚 f() {\n    if (if a {\n        1;\n    }) {\n        2;\n    };\n}\n\n",
    ),
    Case(
        "if-condition-with-else-drops-parens",
        "🥚 f() { if (if a { 1; } else { 2; }) { 3; }; }",
        "🥚 f() {\n    if if a {\n        1;\n    }{\n        2;\n    } {\n        3;\n    };\n}\n\n",
    ),
    Case(
        "two-functions",
        "🥚 f() {} 🥚 g() {}",
        "🥚 f() {\n}\n\n🥚 g() {\n}\n\n",
    ),
]


@pytest.mark.parametrize("case", CANONICAL_CASES, ids=lambda case: case.name)
def test_canonical_output(case: Case) -> None:
    assert canonical(case.source) == case.expected


IDEMPOTENCE_SOURCES = [
    pytest.param(case.source, id=case.name) for case in CANONICAL_CASES
] + [
    pytest.param("🥚 f() { 🐔 g(1, // one\n 2); }", id="comment-in-args"),
    pytest.param("🥚 f() {} [ f(1) = 1, // first\n f(2) = 2 ]", id="comment-in-tests"),
    pytest.param("//\n🥚 f() {}", id="empty-comment"),
    pytest.param("🥚 f() { if (if a { 1; } else if b { 2; }) { 3; }; }", id="if-condition-ending-in-else-if"),
    pytest.param("🥚 f() { 🐔 if (if a { 1; }) { 2; } else { 3; }; }", id="if-condition-ending-in-if-with-else"),
    pytest.param(
        dedent(
            """\
            🥚 fib(n) {
                if n - 1 {
                    🐔 fib(n - 1) + fib(n - 2);
                } else {
                    🐔 1;
                };
            } [
                fib(1) = 1,
                fib(5) = 8,
            ]

            🥚 🐣() {
                print(fib(10));
            }
            """
        ),
        id="program",
    ),
]


@pytest.mark.parametrize("source", IDEMPOTENCE_SOURCES)
def test_formatting_is_a_fixed_point(source: str) -> None:
    assert_idempotent(source)


def test_formatting_is_deterministic() -> None:
    program, _ = parse_pipeline("🥚 f(a) { 🐔 a * 2; } [ f(1) = 2 ]")
    assert format_program(program, color=False) == format_program(program, color=False)


# ============================================================================
# Error nodes
# ============================================================================

def test_errors_are_contained_to_their_node() -> None:
    broken, errors = render("🥚 f() { let x = ; 🐔 x; }")
    fixed = canonical("🥚 f() { let x = 0; 🐔 x; }")

    assert len(errors) == 1
    assert broken == fixed.replace("let x = 0;", "let x = error;")


def test_statement_error_renders_on_its_own_line() -> None:
    text, errors = render("🥚 f() { let = 5; 🐔 1; }")
    assert len(errors) == 1
    assert text == "🥚 f() {\n    error!\n    🐔 1;\n}\n\n"


def test_top_level_placeholder() -> None:
    text, _ = render("let x = 1;\n🥚 f() { 🐔 1; }")
    assert text == "🥚 let() error\n\n🥚 f() {\n    🐔 1;\n}\n\n"


def test_error_marker_is_red_when_colored() -> None:
    assert format_node(res.ExprError(), color=True) == "\x1b[31merror\x1b[0m"
    assert format_node(res.StmtError(), color=True) == "\x1b[31merror!\x1b[0m\n"


def test_error_marker_plain_when_color_disabled() -> None:
    assert format_node(res.ExprError(), color=False) == "error"


def test_error_marker_auto_respects_no_color() -> None:
    # NO_COLOR is set for every test by conftest.
    assert format_node(res.ExprError()) == "error"


# ============================================================================
# Sub-node rendering
# ============================================================================

def test_format_node_expression() -> None:
    node = res.Op(res.Number(1), res.Opcode.ADD, res.Op(res.Variable("x"), res.Opcode.DIV, res.Number(2)))
    assert format_node(node) == "(1 + (x / 2))"


def test_format_node_block_starts_at_level_zero() -> None:
    assert format_node(res.Block([res.Return(res.Number(1))])) == "{\n    🐔 1;\n}"


def test_format_node_statement() -> None:
    assert format_node(res.Let("x", res.String('"a"'))) == 'let x = "a";\n'


def test_format_node_function_id_needs_table() -> None:
    program, _ = parse_pipeline("🥚 f() {}")
    with pytest.raises(ValueError):
        format_node(FunctionId(0))
    assert format_node(FunctionId(0), functions=program.functions) == "🥚 f() {\n}\n\n"


def test_unindent_below_zero_is_an_error() -> None:
    formatter = Formatter()
    formatter.indent()
    formatter.unindent()
    with pytest.raises(ValueError):
        formatter.unindent()


def test_indent_unit_is_four_spaces() -> None:
    formatter = Formatter()
    formatter.indent()
    formatter.indent()
    formatter.push_str_indented("x")
    assert formatter.getvalue() == "        x"
