"""Control flow block parsing for the attpl parser.

Provides mixin for parsing loops (@forEach, @for) and conditionals (@if/@else).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from attpl._types import Token, TokenType
from attpl.nodes import Conditional, Loop, LoopKind, Node
from attpl.parser.blocks.core import BlockStackMixin

# Fixed marker that must follow @if[id]. It is not an expression: the value
# always comes from the host's pre-computed boolean.
IF_MARKER = "(expr)"


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing control flow blocks.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body: method
    """

    if TYPE_CHECKING:

        def _parse_body(self) -> list[Node]: ...

    def _parse_loop(self, kind: LoopKind) -> Loop:
        start = self._advance()
        entry = self._push_block(kind.value, start)
        body = self._parse_body()
        self._consume_end_tag(entry)
        return Loop(
            lineno=start.lineno,
            col_offset=start.col_offset,
            kind=kind,
            identifier=entry.identifier,
            body=tuple(body),
        )

    def _parse_for_each(self) -> Loop:
        """Parse @forEach[id]...@end[id]."""
        return self._parse_loop(LoopKind.FOR_EACH)

    def _parse_for(self) -> Loop:
        """Parse @for[id]...@end[id]."""
        return self._parse_loop(LoopKind.FOR)

    def _parse_if(self) -> Conditional:
        """Parse @if[id](expr)...[@else[id]...]@end[id]."""
        start = self._advance()
        entry = self._push_block("if", start)
        self._consume_if_marker(start)

        body = self._parse_body()

        else_: tuple[Node, ...] | None = None
        current = self._current
        if current.type == TokenType.DIRECTIVE and current.word == "else":
            if current.arg != entry.identifier:
                raise self._error(
                    f"@else[{current.arg}] does not belong to {entry.describe()}",
                    current,
                )
            self._advance()
            else_ = tuple(self._parse_body())

        self._consume_end_tag(entry)
        return Conditional(
            lineno=start.lineno,
            col_offset=start.col_offset,
            identifier=entry.identifier,
            body=tuple(body),
            else_=else_,
        )

    def _consume_if_marker(self, start: Token) -> None:
        """Strip the literal ``(expr)`` that must directly follow ``@if[id]``."""
        current = self._current
        if current.type != TokenType.DATA or not current.value.startswith(IF_MARKER):
            raise self._error(
                f"Expected '{IF_MARKER}' immediately after @if[{start.arg}]",
                current if current.type != TokenType.EOF else start,
            )
        remainder = current.value[len(IF_MARKER) :]
        if remainder:
            self._replace_current(
                Token(
                    TokenType.DATA,
                    remainder,
                    current.lineno,
                    current.col_offset + len(IF_MARKER),
                )
            )
        else:
            self._advance()
