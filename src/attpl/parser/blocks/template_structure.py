"""Template structure block parsing for the attpl parser.

Provides mixin for parsing template structure directives (block, extend, include).
Includes are expanded here, at parse time: the included template is loaded,
lexed and parsed in place, so its loops, conditionals and nested includes are
part of the surrounding tree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from attpl.environment.exceptions import ErrorCode, TemplateNotFoundError
from attpl.nodes import BlockDef, BlockSlot, Data, Extends, Include, Node
from attpl.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from attpl.parse_context import ParseContext

# Text substituted for an include whose source cannot be found.
MISSING_INCLUDE_PLACEHOLDER = "<!-- Warning: Include file not found -->"


class TemplateStructureBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing template structure blocks.

    Required Host Attributes:
        - All from BlockStackMixin
        - _context: ParseContext
        - _load_source: Callable[[str], tuple[str, str | None]]
        - _logger: logging.Logger
        - _is_child: bool (template being parsed has an @extend)
        - _allow_extend: bool
        - _parse_body: method
        - _parse_nested: method
    """

    if TYPE_CHECKING:
        _context: ParseContext
        _load_source: Callable[[str], tuple[str, str | None]]
        _logger: logging.Logger
        _is_child: bool
        _allow_extend: bool

        def _parse_body(self) -> list[Node]: ...

        def _parse_nested(self, source: str, name: str) -> list[Node]: ...

    def _parse_block_tag(self) -> BlockSlot | BlockDef:
        """Parse @block[name]...@end[name].

        A top-level block in a child template is an override (BlockDef);
        anywhere else it is a slot carrying its default content.
        """
        start = self._advance()
        top_level = not self._block_stack
        entry = self._push_block("block", start)
        body = self._parse_body()
        self._consume_end_tag(entry)

        node_type = BlockDef if (self._is_child and top_level) else BlockSlot
        return node_type(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=entry.identifier,
            body=tuple(body),
        )

    def _parse_extend(self) -> Extends:
        """Parse @extend[base].

        Only valid at the top level of the template being loaded. Bases and
        included templates may not extend (single-level inheritance).
        """
        start = self._advance()
        if not self._allow_extend:
            raise self._error(
                f"@extend[{start.arg}] is not supported here: only the loaded "
                "template may extend a base (no inheritance chains)",
                start,
                code=ErrorCode.INVALID_INHERITANCE,
            )
        if self._block_stack:
            raise self._error(
                f"@extend[{start.arg}] must appear at the top level, not inside "
                f"{self._block_stack[-1].describe()}",
                start,
                code=ErrorCode.INVALID_INHERITANCE,
            )
        if not start.arg:
            raise self._error("@extend[] requires a base template name", start)
        return Extends(lineno=start.lineno, col_offset=start.col_offset, template=start.arg)

    def _parse_include(self) -> Include:
        """Parse @include[name] and expand it in place."""
        start = self._advance()
        name = start.arg
        if not name:
            raise self._error("@include[] requires a template name", start)

        self._context.count_include(name)

        try:
            source, _filename = self._load_source(name)
        except TemplateNotFoundError:
            message = f"Include file '{name}' not found."
            self._logger.warning(message)
            self._context.warn(message)
            return Include(
                lineno=start.lineno,
                col_offset=start.col_offset,
                template=name,
                body=(Data(start.lineno, start.col_offset, MISSING_INCLUDE_PLACEHOLDER),),
                missing=True,
            )

        with self._context.entering(name):
            body = self._parse_nested(source, name)

        return Include(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=name,
            body=tuple(body),
        )
