"""
Lexer for Wryneck - Recursive Descent Parser

Tokenizes Wryneck source code into a stream of tokens.

Features:
- Single-pass tokenization
- Emoji keywords (🥚 function, 🐣 entry point, 🐔 return)
- Line comments kept as tokens so the formatter can re-emit them
- Position tracking (line, column, UTF-8 byte offsets)
"""

from typing import List

from .errors import InvalidToken
from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

ENTRY_POINT = "hatch"
DIGITS = '0123456789'


class Lexer:
    """Wryneck lexer. Whitespace and newlines are insignificant."""

    # Keyword mapping
    KEYWORDS = {
        'let': TT.LET,
        'if': TT.IF,
        'else': TT.ELSE,
    }

    # Single-character emoji keywords.  🐣 is spelled as the identifier `hatch`.
    EMOJI = {
        '🥚': (TT.FN, '🥚'),
        '🐔': (TT.RETURN, '🐔'),
        '🐣': (TT.IDENT, ENTRY_POINT),
    }

    OPERATORS = [
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.byte_pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

        # Start of the token currently being scanned
        self.tok_line = 1
        self.tok_column = 1
        self.tok_start = 0

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.mark()
        self.emit(TT.EOF, None)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.skip_whitespace():
            return

        self.mark()
        ch = self.peek()

        # Comments
        if ch == '/' and self.peek(1) == '/':
            self.scan_comment()
            return

        if ch == '"':
            self.scan_string()
            return

        if ch in DIGITS:
            self.scan_number()
            return

        if ch in self.EMOJI:
            token_type, value = self.EMOJI[ch]
            self.advance()
            self.emit(token_type, value)
            return

        if ch.isalpha() or ch == '_':
            self.scan_identifier()
            return

        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_comment(self):
        """Scan a line comment, keeping the `//` marker in the lexeme"""
        value = ''
        while self.peek() not in ('\n', '\r', '\0'):
            value += self.advance()
        self.emit(TT.COMMENT, value)

    def scan_string(self):
        """Scan string literal "...", keeping quotes and escapes verbatim"""
        value = self.advance()  # Keep opening quote

        while self.pos < len(self.source) and self.peek() != '"':
            if self.peek() == '\\':
                value += self.advance()
                if self.pos < len(self.source):
                    value += self.advance()
            else:
                value += self.advance()

        if self.pos >= len(self.source):
            raise InvalidToken(self.tok_start, self.tok_line, self.tok_column)

        value += self.advance()  # Closing quote
        self.emit(TT.STRING, value)

    def scan_number(self):
        """Scan a decimal integer literal.  Range checks happen in the parser."""
        value = ''
        while self.peek() in DIGITS:
            value += self.advance()

        # Keep as string so the parser can report overflow with a span
        self.emit(TT.NUMBER, value)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        value = ''

        while self.peek().isalnum() or self.peek() == '_':
            value += self.advance()

        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str)
                return

        raise InvalidToken(self.tok_start, self.tok_line, self.tok_column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = ''
        for _ in range(n):
            if self.pos >= len(self.source):
                break
            ch = self.source[self.pos]
            result += ch
            self.pos += 1
            self.byte_pos += len(ch.encode('utf-8'))
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace including newlines, return True if any skipped"""
        skipped = False
        while self.pos < len(self.source) and self.peek().isspace():
            self.advance()
            skipped = True
        return skipped

    def mark(self):
        """Remember where the next token starts"""
        self.tok_line = self.line
        self.tok_column = self.column
        self.tok_start = self.byte_pos

    def emit(self, token_type: TT, value):
        """Emit a token spanning from the last mark to the current position"""
        tok = Tok(
            type=token_type,
            value=value,
            line=self.tok_line,
            column=self.tok_column,
            start=self.tok_start,
            end=self.byte_pos,
        )
        self.tokens.append(tok)


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
