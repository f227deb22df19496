"""attpl parser core: token stream → immutable node tree.

The parser runs inheritance resolution before anything else. When the
template extends a base (``@extend[base]`` in the source, or ``extends=``
from the host), the base is loaded and parsed first, into a tree whose
``@block`` regions are ``BlockSlot`` nodes. The child is then parsed, its
top-level ``@block`` regions are collected as overrides, and each override
is spliced into the slot of the same name. Child content outside blocks is
appended after the base content.

Includes, loops and conditionals are parsed in the same single pass; see
the block mixins for each directive.

Dispatch:
    Directive words map to handler method names in ``_DIRECTIVE_PARSERS``
    (O(1) lookup). ``@else`` is a continuation and ``@end`` a terminator;
    both end the current body and are consumed by the directive that owns it.

"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace

from attpl._types import Token, TokenType
from attpl.environment.exceptions import ErrorCode, TemplateNotFoundError
from attpl.lexer import tokenize
from attpl.nodes import (
    BlockDef,
    BlockSlot,
    Conditional,
    Data,
    Extends,
    Include,
    Loop,
    Node,
    Output,
    Template,
)
from attpl.parse_context import ParseContext
from attpl.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from attpl.parser.blocks.core import OpenDirective
from attpl.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

_logger = logging.getLogger(__name__)

_DIRECTIVE_PARSERS: dict[str, str] = {
    "include": "_parse_include",
    "extend": "_parse_extend",
    "block": "_parse_block_tag",
    "forEach": "_parse_for_each",
    "for": "_parse_for",
    "if": "_parse_if",
}
_CONTINUATION_WORDS = frozenset({"else"})
_VALID_WORDS = frozenset(_DIRECTIVE_PARSERS) | _CONTINUATION_WORDS | {"end"}

SourceFunc = Callable[[str], tuple[str, str | None]]


class Parser(TemplateStructureBlockParsingMixin, ControlFlowBlockParsingMixin):
    """Recursive-descent parser for attpl directives.

    Example:
        >>> from attpl.lexer import tokenize
        >>> source = "@for[n]{{value}},@end[n]"
        >>> parser = Parser(tokenize(source), "inline", source, load_source=loader.get_source)
        >>> parser.parse().body[0].identifier
        'n'

    Attributes:
        block_defs: Child block overrides collected during ``parse()``
            (host-defined blocks included), keyed by block name.
    """

    __slots__ = (
        "_allow_extend",
        "_block_stack",
        "_context",
        "_is_child",
        "_load_source",
        "_logger",
        "_name",
        "_pos",
        "_source",
        "_tokens",
        "block_defs",
    )

    def __init__(
        self,
        tokens: Sequence[Token],
        name: str | None,
        source: str,
        *,
        load_source: SourceFunc,
        context: ParseContext | None = None,
        logger: logging.Logger | None = None,
        allow_extend: bool = True,
    ):
        self._tokens = list(tokens)
        self._pos = 0
        self._name = name
        self._source = source
        self._load_source = load_source
        self._context = context if context is not None else ParseContext()
        self._logger = logger if logger is not None else _logger
        self._allow_extend = allow_extend
        self._block_stack: list[OpenDirective] = []
        self._is_child = False
        self.block_defs: dict[str, BlockDef] = {}

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(
        self,
        extends: str | None = None,
        blocks: Mapping[str, str] | None = None,
    ) -> Template:
        """Parse a loadable template, resolving inheritance.

        Args:
            extends: Host-supplied base name; takes precedence over an
                ``@extend`` directive in the source.
            blocks: Host-supplied block overrides (template source per
                block name); they win over same-named child blocks.
        """
        extend_token = self._find_extend()
        base_name = extends or (extend_token.arg if extend_token else None) or None
        self._is_child = base_name is not None

        base_nodes: list[Node] = []
        if base_name is not None:
            base_nodes = self._parse_base(base_name)

        body = self._parse_root_body()

        extends_node: Extends | None = None
        remainder: list[Node] = []
        defs: dict[str, BlockDef] = {}
        for node in body:
            if isinstance(node, Extends):
                extends_node = node
            elif isinstance(node, BlockDef):
                if node.name in defs:
                    raise self._error(
                        f"Duplicate @block[{node.name}] in child template",
                        self._token_at(node),
                    )
                defs[node.name] = node
            else:
                remainder.append(node)

        for block_name, content in (blocks or {}).items():
            block_body = self._parse_nested(content, f"{self._name or '<template>'}#{block_name}")
            defs[block_name] = BlockDef(
                lineno=1, col_offset=0, name=block_name, body=tuple(block_body)
            )
        self.block_defs = defs

        used: set[str] = set()
        if base_name is not None:
            if extends_node is None or extends_node.template != base_name:
                extends_node = Extends(lineno=1, col_offset=0, template=base_name)
            tree = [*_splice_blocks(base_nodes, defs, used), *remainder]
        else:
            tree = list(_splice_blocks(remainder, defs, used))
        for dropped in sorted(defs.keys() - used):
            self._logger.debug(
                f"Block '{dropped}' of '{self._name}' dropped: "
                f"no @block[{dropped}] slot to fill"
            )

        return Template(lineno=1, col_offset=0, body=tuple(tree), extends=extends_node)

    def parse_fragment(self) -> list[Node]:
        """Parse a base, include, or block body (no inheritance resolution)."""
        return self._parse_root_body()

    # ------------------------------------------------------------------
    # Body parsing
    # ------------------------------------------------------------------

    def _parse_root_body(self) -> list[Node]:
        body = self._parse_body()
        current = self._current
        if current.type == TokenType.END:
            raise self._unmatched_end(current)
        if current.type == TokenType.DIRECTIVE:
            raise self._error(
                f"@{current.word}[{current.arg}] without a matching @if[{current.arg}]",
                current,
            )
        return body

    def _parse_body(self) -> list[Node]:
        """Parse nodes until EOF, an ``@end``, or an ``@else``."""
        nodes: list[Node] = []
        while True:
            token = self._current
            token_type = token.type
            if token_type == TokenType.EOF or token_type == TokenType.END:
                return nodes
            if token_type == TokenType.DATA:
                self._advance()
                nodes.append(Data(token.lineno, token.col_offset, token.value))
            elif token_type == TokenType.VARIABLE:
                nodes.append(self._parse_output(token))
            elif token_type == TokenType.LEGACY_VARIABLE:
                warnings.warn(
                    f"'@{{{token.arg}}}' interpolation is deprecated; "
                    f"use '{{{{{token.arg}}}}}' ({self._name or '<template>'}:{token.lineno})",
                    DeprecationWarning,
                    stacklevel=2,
                )
                nodes.append(self._parse_output(token, legacy=True))
            else:
                if token.word in _CONTINUATION_WORDS:
                    return nodes
                method_name = _DIRECTIVE_PARSERS.get(token.word)
                if method_name is None:
                    raise self._error(
                        f"Unknown directive '@{token.word}[...]'",
                        token,
                        code=ErrorCode.UNKNOWN_DIRECTIVE,
                    )
                nodes.append(getattr(self, method_name)())

    def _parse_output(self, token: Token, legacy: bool = False) -> Output:
        self._advance()
        return Output(token.lineno, token.col_offset, token.arg, legacy=legacy)

    def _parse_nested(self, source: str, name: str) -> list[Node]:
        """Lex and parse another template's source with the shared context."""
        parser = Parser(
            tokenize(source),
            name,
            source,
            load_source=self._load_source,
            context=self._context,
            logger=self._logger,
            allow_extend=False,
        )
        return parser.parse_fragment()

    # ------------------------------------------------------------------
    # Inheritance helpers
    # ------------------------------------------------------------------

    def _find_extend(self) -> Token | None:
        found: Token | None = None
        for token in self._tokens:
            if token.type == TokenType.DIRECTIVE and token.word == "extend":
                if found is not None:
                    raise self._error(
                        f"Multiple @extend directives (already extending '{found.arg}')",
                        token,
                        code=ErrorCode.INVALID_INHERITANCE,
                    )
                found = token
        return found

    def _parse_base(self, base_name: str) -> list[Node]:
        try:
            source, _filename = self._load_source(base_name)
        except TemplateNotFoundError as e:
            raise TemplateNotFoundError(
                f"Base template '{base_name}' extended by "
                f"'{self._name or '<template>'}' not found: {e}"
            ) from e
        with self._context.entering(base_name):
            return self._parse_nested(source, base_name)

    def _token_at(self, node: Node) -> Token:
        return Token(TokenType.DIRECTIVE, "", node.lineno, node.col_offset)


def _splice_blocks(
    nodes: Sequence[Node],
    defs: Mapping[str, BlockDef],
    used: set[str],
) -> tuple[Node, ...]:
    """Return ``nodes`` with every overridden BlockSlot's body replaced."""
    if not defs:
        return tuple(nodes)
    result: list[Node] = []
    for node in nodes:
        if isinstance(node, BlockSlot):
            override = defs.get(node.name)
            if override is not None:
                used.add(node.name)
                node = replace(node, body=tuple(override.body))
            else:
                node = replace(node, body=_splice_blocks(node.body, defs, used))
        elif isinstance(node, (Loop, Include)):
            node = replace(node, body=_splice_blocks(node.body, defs, used))
        elif isinstance(node, Conditional):
            node = replace(
                node,
                body=_splice_blocks(node.body, defs, used),
                else_=None if node.else_ is None else _splice_blocks(node.else_, defs, used),
            )
        result.append(node)
    return tuple(result)
