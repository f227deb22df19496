"""Collect the bindings and dependencies a template uses.

Walks the resolved tree once. Interpolations outside loops are reported as
params; inside a loop they may be record fields, so they are reported per
loop identifier instead (a name used there can still fall back to a param
at render time).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from attpl.analysis.metadata import TemplateMetadata
from attpl.analysis.visitor import visit_children
from attpl.nodes import BlockSlot, Conditional, Include, Loop, Node, Output

if TYPE_CHECKING:
    from attpl.nodes import Template


class BindingCollector:
    """Single-use walker that accumulates names while visiting nodes.

    Example:
        >>> meta = BindingCollector().analyze(template.ast, name="page")
        >>> sorted(meta.params)
        ['title']
    """

    def __init__(self) -> None:
        self._params: set[str] = set()
        self._loops: dict[str, set[str]] = {}
        self._conditionals: dict[str, None] = {}
        self._includes: list[str] = []
        self._missing: list[str] = []
        self._blocks: dict[str, None] = {}
        self._loop_stack: list[str] = []

    def analyze(self, ast: Template, name: str | None = None) -> TemplateMetadata:
        for node in ast.body:
            self._visit(node)
        return TemplateMetadata(
            name=name,
            extends=ast.extends.template if ast.extends else None,
            params=frozenset(self._params),
            loops=tuple(self._loops),
            loop_fields={key: frozenset(names) for key, names in self._loops.items()},
            conditionals=tuple(self._conditionals),
            includes=tuple(self._includes),
            missing_includes=tuple(self._missing),
            blocks=tuple(self._blocks),
        )

    def _visit(self, node: Node) -> None:
        if isinstance(node, Output):
            if self._loop_stack:
                self._loops[self._loop_stack[-1]].add(node.name)
            else:
                self._params.add(node.name)
            return
        if isinstance(node, Loop):
            self._loops.setdefault(node.identifier, set())
            self._loop_stack.append(node.identifier)
            try:
                visit_children(node, self._visit)
            finally:
                self._loop_stack.pop()
            return
        if isinstance(node, Conditional):
            self._conditionals.setdefault(node.identifier, None)
        elif isinstance(node, Include):
            self._includes.append(node.template)
            if node.missing:
                self._missing.append(node.template)
        elif isinstance(node, BlockSlot):
            self._blocks.setdefault(node.name, None)
        visit_children(node, self._visit)
