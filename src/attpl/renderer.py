"""Renderer: walk a compiled tree against a Context and emit text.

StringBuilder Pattern:
Every node appends to one local list that is joined once at the end:
    ```python
    buf = []
    _append = buf.append
    ...
    return "".join(buf)
    ```
This is O(n) vs O(n²) for repeated string concatenation.

Scoping:
``{{name}}`` resolves against a chain of bindings, innermost first: the
fields of the current record of each enclosing loop (innermost loop first),
then the Context's params. An unbound name renders as nothing.

Leniency:
Missing params, loop datasets and conditional flags are not errors; they
render as empty output. Structural problems are caught at load time, so a
render never raises for a well-formed tree.

Thread-Safety:
The tree is never mutated and all render state (buffer, scope chain) is
local to one ``render()`` call, so one Template may render concurrently on
many threads as long as each call gets its own Context.

"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Callable, Mapping, Sequence

from attpl.context import Context, RecordDataset, ScalarDataset
from attpl.nodes import (
    BlockSlot,
    Conditional,
    Data,
    Include,
    Loop,
    LoopKind,
    Node,
    Output,
)
from attpl.utils.html import html_escape, strip_comments

# Field name bound to each element of a scalar @for loop.
FOR_VALUE_FIELD = "value"


class Renderer:
    """Render one node tree against one Context.

    Example:
        >>> renderer = Renderer(template_node.body, ctx)
        >>> renderer.render()
        '<h1>Users</h1>'
    """

    __slots__ = ("_append", "_body", "_context", "_dispatch")

    def __init__(self, body: Sequence[Node], context: Context):
        self._body = body
        self._context = context
        self._append: Callable[[str], None] = lambda _text: None
        # Node type → handler; O(1) dispatch instead of an isinstance chain.
        self._dispatch: dict[type[Node], Callable[[Node, ChainMap[str, str]], None]] = {
            Data: self._render_data,
            Output: self._render_output,
            Loop: self._render_loop,
            Conditional: self._render_conditional,
            Include: self._render_container,
            BlockSlot: self._render_container,
        }

    def render(self, keep_comments: bool = True) -> str:
        buf: list[str] = []
        self._append = buf.append
        self._render_nodes(self._body, ChainMap(self._context.params))
        result = "".join(buf)
        if not keep_comments:
            result = strip_comments(result)
        return result

    def _render_nodes(self, nodes: Sequence[Node], scope: ChainMap[str, str]) -> None:
        dispatch = self._dispatch
        for node in nodes:
            dispatch[type(node)](node, scope)

    def _render_data(self, node: Data, scope: ChainMap[str, str]) -> None:
        self._append(node.value)

    def _render_output(self, node: Output, scope: ChainMap[str, str]) -> None:
        value = scope.get(node.name)
        if value is not None:
            self._append(html_escape(value))

    def _render_container(self, node: Include | BlockSlot, scope: ChainMap[str, str]) -> None:
        self._render_nodes(node.body, scope)

    def _render_loop(self, node: Loop, scope: ChainMap[str, str]) -> None:
        dataset = self._context.loops.get(node.identifier)
        if dataset is None:
            return
        for fields in _iteration_fields(node, dataset):
            self._render_nodes(node.body, scope.new_child(fields))

    def _render_conditional(self, node: Conditional, scope: ChainMap[str, str]) -> None:
        flag = self._context.conditionals.get(node.identifier)
        if flag is True:
            self._render_nodes(node.body, scope)
        elif flag is False and node.else_ is not None:
            self._render_nodes(node.else_, scope)


def _iteration_fields(
    node: Loop, dataset: ScalarDataset | RecordDataset
) -> list[Mapping[str, str]]:
    """Bindings for each iteration of a loop, in dataset order.

    Records expose their own fields in both loop kinds. A scalar element
    binds under ``value`` in ``@for`` and under the loop identifier in
    ``@forEach``.
    """
    if isinstance(dataset, RecordDataset):
        return list(dataset.records)
    field_name = FOR_VALUE_FIELD if node.kind is LoopKind.FOR else node.identifier
    return [{field_name: item} for item in dataset.items]


def render_nodes(
    body: Sequence[Node],
    context: Context | None = None,
    keep_comments: bool = True,
) -> str:
    """Render a node sequence. Convenience wrapper around ``Renderer``."""
    return Renderer(body, context if context is not None else Context()).render(keep_comments)
