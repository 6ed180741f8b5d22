"""
Recursive Descent Parser for Wryneck

Produces the raw tree (``base_ast``) plus the list of errors it recovered
from.  Recovery is local, in the spirit of an LR grammar's error productions:

- a malformed statement becomes ``StmtError`` after skipping to the next ``;``
  (or up to the enclosing ``}``);
- a token that cannot start a required expression becomes ``ExprError``;
- a malformed top-level item becomes a placeholder ``Function`` after skipping
  to the next ``🥚`` or top-level comment.

Running out of input where more is required is terminal and raises.

Expression precedence (lowest to highest):
1. add (+, -)
2. mul (*, /)
3. atom (literals, identifiers, calls, parens, blocks, if)
"""

from typing import List, Optional, Sequence, Set

from . import base_ast as ast
from .errors import (
    ErrorRecovery,
    ExtraToken,
    ParseError,
    UnrecognizedEOF,
    UnrecognizedToken,
    UserError,
)
from .lexer_rd import tokenize
from .token_types import TT, TT_DISPLAY, Tok

I32_MAX = 2 ** 31 - 1
I32_DIGITS = len(str(I32_MAX))

EXPR_START = (TT.NUMBER, TT.STRING, TT.IDENT, TT.LPAR, TT.LBRACE, TT.IF)
STMT_START = (TT.LET, TT.RETURN, TT.COMMENT) + EXPR_START
TOP_LEVEL_START = (TT.FN, TT.COMMENT)

# Tokens an expression recovery leaves in place for the enclosing rule.
_CLOSERS: Set[TT] = {TT.RPAR, TT.RSQB, TT.RBRACE, TT.SEMI, TT.COMMA, TT.ASSIGN}

_ADD_OPS = {TT.PLUS: ast.Opcode.ADD, TT.MINUS: ast.Opcode.SUB}
_MUL_OPS = {TT.STAR: ast.Opcode.MUL, TT.SLASH: ast.Opcode.DIV}


def _names(types: Sequence[TT]) -> List[str]:
    return [TT_DISPLAY[t] for t in types]


# ============================================================================
# Parser
# ============================================================================

class Parser:
    """Recursive descent parser for Wryneck."""

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None)
        self.errors: List[ErrorRecovery] = []

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current = self.tokens[self.pos]
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, expected: Optional[Sequence[TT]] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            raise self.unexpected(expected or (token_type,))
        return self.advance()

    def unexpected(self, expected: Sequence[TT]) -> ParseError:
        """Build the error for the current token not being one of ``expected``"""
        if self.check(TT.EOF):
            return UnrecognizedEOF(self.current.start, _names(expected))
        return UnrecognizedToken(self.current, _names(expected))

    def nesting_error(self) -> UserError:
        """Terminal error for input nested deeper than the parser can recurse"""
        tok = self.current
        return UserError("Expression nesting is too deep", tok.start, tok.end)

    def recover(self, error: ParseError, dropped: List[Tok]) -> None:
        self.errors.append(ErrorRecovery(error, dropped))

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> ast.Program:
        """Parse entire program"""
        things: List[ast.TopLevel] = []

        while not self.check(TT.EOF):
            if self.check(TT.COMMENT):
                things.append(ast.Comment.from_lexeme(self.advance().value))
                continue

            if self.check(TT.RBRACE, TT.RPAR, TT.RSQB):
                tok = self.advance()
                self.recover(ExtraToken(tok), [tok])
                things.append(ast.Function.recovered(tok.value))
                continue

            start = self.pos
            try:
                if not self.check(TT.FN):
                    raise self.unexpected(TOP_LEVEL_START)
                things.append(self.parse_function())
            except UnrecognizedEOF:
                raise
            except ParseError as exc:
                offending = self.current.value
                self.sync_top_level()
                if self.pos == start:
                    self.advance()
                self.recover(exc, self.tokens[start:self.pos])
                things.append(ast.Function.recovered(offending or ""))

        return ast.Program(things)

    def sync_top_level(self) -> None:
        """Skip to the next function keyword, or a comment outside any braces"""
        depth = 0
        while not self.check(TT.EOF):
            if self.check(TT.FN):
                return
            if self.check(TT.COMMENT) and depth == 0:
                return
            if self.check(TT.LBRACE):
                depth += 1
            elif self.check(TT.RBRACE) and depth > 0:
                depth -= 1
            self.advance()

    def parse_function(self) -> ast.Function:
        self.expect(TT.FN)
        name = self.expect(TT.IDENT).value
        self.expect(TT.LPAR)

        params: List[ast.Parameter] = []
        while not self.check(TT.RPAR):
            params.append(ast.Parameter(self.expect(TT.IDENT, (TT.IDENT, TT.RPAR)).value))
            if not self.match(TT.COMMA):
                break
        self.expect(TT.RPAR, (TT.COMMA, TT.RPAR))

        body = self.parse_block()
        tests = self.parse_tests() if self.check(TT.LSQB) else []

        return ast.Function(ast.FunctionDefinition(name, params), body, tests)

    def parse_tests(self) -> List[ast.Test]:
        self.expect(TT.LSQB)

        tests: List[ast.Test] = []
        while not self.check(TT.RSQB):
            test_input = self.parse_expr()
            self.expect(TT.ASSIGN)
            test = ast.Test(test_input, self.parse_expr())
            tests.append(test)
            if not self.match(TT.COMMA):
                break
            test.output = self.attach_comments(test.output)

        self.expect(TT.RSQB, (TT.COMMA, TT.RSQB))
        return tests

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_block(self) -> ast.Block:
        self.expect(TT.LBRACE)

        stmts: List[ast.Statement] = []
        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise self.unexpected((TT.RBRACE,) + STMT_START)
            stmts.append(self.parse_statement_recovering())

        self.expect(TT.RBRACE)
        return ast.Block(stmts)

    def parse_statement_recovering(self) -> ast.Statement:
        start = self.pos
        try:
            return self.parse_statement()
        except UnrecognizedEOF:
            raise
        except ParseError as exc:
            self.sync_statement()
            self.recover(exc, self.tokens[start:self.pos])
            return ast.StmtError()

    def sync_statement(self) -> None:
        """Skip past the next `;`, or up to the `}` closing the current block"""
        depth = 0
        while not self.check(TT.EOF):
            if self.check(TT.LBRACE):
                depth += 1
            elif self.check(TT.RBRACE):
                if depth == 0:
                    return
                depth -= 1
            elif self.check(TT.SEMI) and depth == 0:
                self.advance()
                return
            self.advance()

    def parse_statement(self) -> ast.Statement:
        if self.check(TT.COMMENT):
            return ast.Comment.from_lexeme(self.advance().value)

        if self.match(TT.LET):
            name = self.expect(TT.IDENT).value
            self.expect(TT.ASSIGN)
            value = self.parse_expr()
            self.expect(TT.SEMI, (TT.SEMI,) + tuple(_ADD_OPS) + tuple(_MUL_OPS))
            return ast.Let(name, value)

        if self.match(TT.RETURN):
            expr = self.parse_expr()
            self.expect(TT.SEMI, (TT.SEMI,) + tuple(_ADD_OPS) + tuple(_MUL_OPS))
            return ast.Return(expr)

        if not self.check(*EXPR_START):
            raise self.unexpected(STMT_START)

        expr = self.parse_expr()
        self.expect(TT.SEMI, (TT.SEMI,) + tuple(_ADD_OPS) + tuple(_MUL_OPS))
        return ast.ExprStmt(expr)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> ast.Expression:
        return self.parse_add_expr()

    def parse_add_expr(self) -> ast.Expression:
        left = self.parse_mul_expr()
        while self.check(*_ADD_OPS):
            op = _ADD_OPS[self.advance().type]
            right = self.parse_mul_expr()
            left = ast.Op(left, op, right)
        return left

    def parse_mul_expr(self) -> ast.Expression:
        left = self.parse_atom()
        while self.check(*_MUL_OPS):
            op = _MUL_OPS[self.advance().type]
            right = self.parse_atom()
            left = ast.Op(left, op, right)
        return left

    def parse_atom(self) -> ast.Expression:
        return self.attach_comments(self.parse_primary_expr())

    def attach_comments(self, expr: ast.Expression) -> ast.Expression:
        """Wrap ``expr`` with every comment that directly follows it"""
        while self.check(TT.COMMENT):
            expr = ast.ExprComment(expr, ast.Comment.from_lexeme(self.advance().value))
        return expr

    def parse_primary_expr(self) -> ast.Expression:
        tok = self.current

        if tok.type == TT.NUMBER:
            self.advance()
            digits = tok.value.lstrip("0") or "0"
            # compare lengths first: int() refuses very long digit runs
            if len(digits) > I32_DIGITS or int(digits) > I32_MAX:
                self.recover(
                    UserError(
                        f"Number literal `{tok.value}` does not fit in a 32-bit signed integer",
                        tok.start,
                        tok.end,
                    ),
                    [],
                )
                return ast.ExprError()
            return ast.Number(int(digits))

        if tok.type == TT.STRING:
            self.advance()
            return ast.String(tok.value)

        if tok.type == TT.IDENT:
            self.advance()
            if self.check(TT.LPAR):
                return ast.FunctionCall(tok.value, self.parse_arg_list())
            return ast.Variable(tok.value)

        if tok.type == TT.LPAR:
            self.advance()
            inner = self.parse_expr()
            self.expect(TT.RPAR, (TT.RPAR,) + tuple(_ADD_OPS) + tuple(_MUL_OPS))
            return ast.Group(inner)

        if tok.type == TT.LBRACE:
            return self.parse_block()

        if tok.type == TT.IF:
            return self.parse_if_expr()

        error = self.unexpected(EXPR_START)
        if isinstance(error, UnrecognizedEOF):
            raise error

        dropped: List[Tok] = []
        if tok.type not in _CLOSERS:
            dropped.append(self.advance())
        self.recover(error, dropped)
        return ast.ExprError()

    def parse_arg_list(self) -> List[ast.Expression]:
        self.expect(TT.LPAR)

        args: List[ast.Expression] = []
        while not self.check(TT.RPAR):
            args.append(self.parse_expr())
            if not self.match(TT.COMMA):
                break
            args[-1] = self.attach_comments(args[-1])

        self.expect(TT.RPAR, (TT.COMMA, TT.RPAR))
        return args

    def parse_if_expr(self) -> ast.If:
        self.expect(TT.IF)
        condition = self.parse_expr()
        body = self.parse_block()

        else_body: Optional[ast.Expression] = None
        if self.match(TT.ELSE):
            if not self.check(TT.IF, TT.LBRACE):
                raise self.unexpected((TT.IF, TT.LBRACE))
        if self.check(TT.IF):
            else_body = self.parse_if_expr()
        elif self.check(TT.LBRACE):
            else_body = self.parse_block()

        return ast.If(condition, body, else_body)


# ============================================================================
# Entry points
# ============================================================================

def parse_source(source: str):
    """
    Parse Wryneck source code to a raw tree.

    Returns ``(program, recovered_errors)``.  Raises ``ParseError`` (an
    ``InvalidToken`` from the lexer, an ``UnrecognizedEOF``, or a ``UserError``
    for nesting too deep to parse) when the input cannot be recovered at all.
    """
    tokens = tokenize(source)
    parser = Parser(tokens)
    try:
        program = parser.parse()
    except RecursionError:
        raise parser.nesting_error() from None
    return program, parser.errors


def parse_expr_fragment(source: str) -> ast.Expression:
    """
    Parse a standalone expression fragment.
    Raises the first recovered error, since a fragment has no tree to patch.
    """
    tokens = tokenize(source)
    parser = Parser(tokens)
    try:
        expr = parser.parse_expr()
    except RecursionError:
        raise parser.nesting_error() from None

    if parser.errors:
        raise parser.errors[0].error
    # Ensure we've consumed the entire fragment
    if not parser.check(TT.EOF):
        raise ExtraToken(parser.current)
    return expr
