"""Token navigation and open-directive tracking for the attpl parser.

Directives close by identifier (``@end[id]``), not by position alone, so the
parser keeps an explicit stack of open directives. That stack is what turns
``@end[a]`` into a precise diagnostic: it either closes the innermost open
directive, crosses an inner one that is still open, or matches nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from attpl._types import Token, TokenType
from attpl.environment.exceptions import ErrorCode, TemplateSyntaxError


@dataclass(frozen=True, slots=True)
class OpenDirective:
    """A directive waiting for its ``@end``."""

    word: str
    identifier: str
    token: Token

    def describe(self) -> str:
        return f"@{self.word}[{self.identifier}]"


class TokenNavigationMixin:
    """Cursor over the token list.

    Required Host Attributes:
        - _tokens: list[Token]
        - _pos: int
        - _name: str | None
        - _source: str
    """

    if TYPE_CHECKING:
        _tokens: list[Token]
        _pos: int
        _name: str | None
        _source: str

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type != TokenType.EOF:
            self._pos += 1
        return token

    def _replace_current(self, token: Token) -> None:
        """Swap the current token, used to split a marker off a DATA run."""
        self._tokens[self._pos] = token

    def _error(
        self,
        message: str,
        token: Token | None = None,
        code: ErrorCode = ErrorCode.UNEXPECTED_DIRECTIVE,
    ) -> TemplateSyntaxError:
        token = token or self._current
        return TemplateSyntaxError(
            message,
            lineno=token.lineno,
            name=self._name,
            source=self._source,
            col_offset=token.col_offset,
            code=code,
        )


class BlockStackMixin(TokenNavigationMixin):
    """Stack of open directives for identifier-matched ``@end`` handling.

    Required Host Attributes:
        - _block_stack: list[OpenDirective]
    """

    if TYPE_CHECKING:
        _block_stack: list[OpenDirective]

    def _push_block(self, word: str, token: Token) -> OpenDirective:
        if not token.arg:
            raise self._error(f"@{word}[] requires an identifier", token)
        entry = OpenDirective(word, token.arg, token)
        self._block_stack.append(entry)
        return entry

    def _consume_end_tag(self, entry: OpenDirective) -> None:
        """Consume ``@end[identifier]`` for the innermost open directive.

        Raises:
            TemplateSyntaxError: On EOF, on an ``@end`` that belongs to an
                outer directive, or on an ``@end`` nothing opened
        """
        token = self._current
        if token.type == TokenType.EOF:
            raise self._error(
                f"Unclosed {entry.describe()} (expected @end[{entry.identifier}])",
                entry.token,
                code=ErrorCode.UNCLOSED_DIRECTIVE,
            )
        if token.type == TokenType.DIRECTIVE and token.word == "else":
            raise self._error(
                f"@else[{token.arg}] does not belong to {entry.describe()}",
                token,
            )
        if token.arg != entry.identifier:
            raise self._unmatched_end(token)
        self._advance()
        self._block_stack.pop()

    def _unmatched_end(self, token: Token) -> TemplateSyntaxError:
        """Build the error for an ``@end`` that does not close the innermost directive."""
        if not self._block_stack:
            return self._error(
                f"Unmatched @end[{token.arg}]: no open directive with that identifier",
                token,
                code=ErrorCode.UNMATCHED_END,
            )
        innermost = self._block_stack[-1]
        for entry in reversed(self._block_stack[:-1]):
            if entry.identifier == token.arg:
                return self._error(
                    f"@end[{token.arg}] closes {entry.describe()} while "
                    f"{innermost.describe()} is still open "
                    "(interleaved directives are not supported)",
                    token,
                    code=ErrorCode.UNMATCHED_END,
                )
        return self._error(
            f"Unmatched @end[{token.arg}]: innermost open directive is "
            f"{innermost.describe()}",
            token,
            code=ErrorCode.UNMATCHED_END,
        )
