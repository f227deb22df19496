"""Control flow nodes for the attpl tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from attpl.nodes.base import Node


class LoopKind(Enum):
    """Which loop directive produced a Loop node."""

    FOR_EACH = "forEach"
    FOR = "for"


@dataclass(frozen=True, slots=True)
class Loop(Node):
    """Loop: @forEach[id]...@end[id] or @for[id]...@end[id]"""

    kind: LoopKind
    identifier: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Conditional(Node):
    """Conditional: @if[id](expr)...@else[id]...@end[id]

    ``else_`` is None when the directive has no @else branch, which is
    distinct from an empty else branch.
    """

    identifier: str
    body: Sequence[Node]
    else_: Sequence[Node] | None = None
