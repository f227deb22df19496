"""Lexer for attpl templates.

Splits template source into literal DATA runs and directive markers:

    @word[arg]      DIRECTIVE  (include, extend, block, forEach, for, if, else)
    @end[arg]       END
    {{name}}        VARIABLE
    @{name}         LEGACY_VARIABLE (deprecated interpolation form)

The lexer does no semantic validation. Unknown directive words, unbalanced
``@end`` markers and the ``(expr)`` marker after ``@if`` are all the parser's
business. Literal text is preserved byte-for-byte, so joining the ``value``
of every token reproduces the source exactly.

Complexity: O(n) single forward scan driven by one compiled regex.

"""

from __future__ import annotations

import re

from attpl._types import Token, TokenType

# Directive arguments and interpolation names never span lines. Braces with
# no name inside ("{{}}") are not an interpolation and stay literal text.
_TOKEN_RE = re.compile(
    r"""
    @(?P<word>[a-zA-Z]+)\[(?P<arg>[^\]\n]*)\]
    | \{\{[ \t]*(?P<var>[^\s{}][^\n{}]*?)[ \t]*\}\}
    | @\{(?P<legacy>[ \t]*[\w.-]+[ \t]*)\}
    """,
    re.VERBOSE,
)


class Lexer:
    """Template tokenizer.

    Example:
        >>> [t.type.name for t in Lexer("Hi {{name}}!").tokenize()]
        ['DATA', 'VARIABLE', 'DATA', 'EOF']

    Thread-Safety:
        Instances hold only the source string; the compiled pattern is
        module-level and immutable.
    """

    __slots__ = ("_source",)

    def __init__(self, source: str):
        self._source = source

    def tokenize(self) -> list[Token]:
        source = self._source
        tokens: list[Token] = []
        pos = 0
        lineno = 1
        line_start = 0

        def advance_lines(text: str, start: int) -> None:
            nonlocal lineno, line_start
            count = text.count("\n")
            if count:
                lineno += count
                line_start = start + text.rindex("\n") + 1

        for match in _TOKEN_RE.finditer(source):
            start, end = match.span()
            if start > pos:
                text = source[pos:start]
                tokens.append(Token(TokenType.DATA, text, lineno, pos - line_start))
                advance_lines(text, pos)

            col = start - line_start
            raw = match.group(0)
            word = match.group("word")
            if word is not None:
                arg = match.group("arg").strip()
                kind = TokenType.END if word == "end" else TokenType.DIRECTIVE
                tokens.append(Token(kind, raw, lineno, col, word=word, arg=arg))
            elif match.group("var") is not None:
                tokens.append(
                    Token(TokenType.VARIABLE, raw, lineno, col, arg=match.group("var").strip())
                )
            else:
                tokens.append(
                    Token(
                        TokenType.LEGACY_VARIABLE,
                        raw,
                        lineno,
                        col,
                        arg=match.group("legacy").strip(),
                    )
                )
            pos = end

        if pos < len(source):
            tokens.append(Token(TokenType.DATA, source[pos:], lineno, pos - line_start))
            advance_lines(source[pos:], pos)

        tokens.append(Token(TokenType.EOF, "", lineno, len(source) - line_start))
        return tokens


def tokenize(source: str) -> list[Token]:
    """Tokenize template source. Convenience wrapper around ``Lexer``."""
    return Lexer(source).tokenize()
