"""prompt_toolkit lexer for Wryneck syntax highlighting."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import FormattedText, StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .errors import ParseError
from .lexer_rd import Lexer as WryLexer
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "function": "bold ansiyellow",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
}

_TT_GROUP = {
    TT.FN: "function",
    TT.RETURN: "keyword",
    TT.LET: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.ASSIGN: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LSQB: "punctuation",
    TT.RSQB: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
    TT.COMMENT: "comment",
}


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = WryLexer(text).tokenize()
    except ParseError:
        return [("", text)]

    data = text.encode("utf-8")
    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.type == TT.EOF:
            continue

        # Unstyled gap before token.
        if tok.start > pos:
            result.append(("", data[pos:tok.start].decode("utf-8")))

        # Slice the source rather than use tok.value: 🐣 lexes as `hatch`.
        group = _TT_GROUP.get(tok.type, "")
        result.append((GROUP_STYLE.get(group, ""), data[tok.start:tok.end].decode("utf-8")))
        pos = tok.end

    # Trailing unstyled text.
    if pos < len(data):
        result.append(("", data[pos:].decode("utf-8")))

    return result if result else [("", text)]


class WryneckLexer(Lexer):
    """prompt_toolkit Lexer that highlights Wryneck source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights lazily, one line at a time.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line


def highlight_text(text: str) -> FormattedText:
    """Style a whole document through ``WryneckLexer``, keeping its line breaks."""
    document = Document(text)
    get_line = WryneckLexer().lex_document(document)

    fragments: StyleAndTextTuples = []
    for lineno in range(document.line_count):
        if lineno > 0:
            fragments.append(("", "\n"))
        fragments.extend(frag for frag in get_line(lineno) if frag[1])
    return FormattedText(fragments)
