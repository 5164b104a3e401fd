"""prompt_toolkit lexer for live BASIC syntax highlighting in the REPL."""

from __future__ import annotations

import re
from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import Lexer as BasicSourceLexer, LexError
from .token_types import KEYWORDS, TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "line_number": "ansiyellow",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
}

_TT_GROUP = {tt: "keyword" for tt in KEYWORDS}
_TT_GROUP.update({
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.VARIABLE: "identifier",
    TT.COMMENT: "comment",
    TT.EQ: "operator",
    TT.NEQ: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.LTE: "operator",
    TT.GTE: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.UMINUS: "operator",
    TT.BANG: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
})

_REM_RE = re.compile(r"(?P<lead>[ \t]*(?:\d+[ \t]*)?)(?P<kw>REM)(?![A-Za-z0-9_])(?P<rest>.*)", re.S)
_LINE_NUMBER_RE = re.compile(r"[ \t]*\d+")


def _token_text(tok: Tok) -> str:
    if tok.type is TT.STRING:
        return f'"{tok.value}"'
    return str(tok.value)


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    result: StyleAndTextTuples = []
    rem = _REM_RE.match(text)
    if rem is not None:
        lead = rem.group("lead")
        if lead:
            result.append((GROUP_STYLE["line_number"], lead))
        result.append((GROUP_STYLE["keyword"], rem.group("kw")))
        if rem.group("rest"):
            result.append((GROUP_STYLE["comment"], rem.group("rest")))
        return result

    try:
        tokens = list(BasicSourceLexer(text).scan(text, 1))
    except LexError:
        return [("", text)]

    head = _LINE_NUMBER_RE.match(text)
    numbered = head is not None and bool(tokens) and tokens[0].type is TT.NUMBER
    pos = 0

    for i, tok in enumerate(tokens):
        tok_text = _token_text(tok)
        if not tok_text:
            continue

        idx = text.find(tok_text, pos)
        if idx < 0:
            continue

        # Unstyled gap before token.
        if idx > pos:
            result.append(("", text[pos:idx]))

        group = "line_number" if numbered and i == 0 else _TT_GROUP.get(tok.type, "")
        result.append((GROUP_STYLE.get(group, ""), tok_text))
        pos = idx + len(tok_text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class BasicLexer(Lexer):
    """prompt_toolkit Lexer that highlights BASIC source using the project lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
