"""Template structure nodes for the attpl tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from attpl.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Extends(Node):
    """Template inheritance: @extend[base]"""

    template: str


@dataclass(frozen=True, slots=True)
class BlockSlot(Node):
    """Overridable region of a base template: @block[name]...@end[name]

    ``body`` holds the base's default content, rendered when no child
    block overrides the slot.
    """

    name: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class BlockDef(Node):
    """Child-side block override collected during inheritance resolution.

    Never present in a finished tree: its body is spliced into the base's
    matching BlockSlot, or dropped when the base has no such slot.
    """

    name: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Include expanded at parse time: @include[name]

    ``body`` is the fully parsed content of the included template, or the
    warning placeholder when ``missing`` is set.
    """

    template: str
    body: Sequence[Node]
    missing: bool = False


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node representing a complete template."""

    body: Sequence[Node]
    extends: Extends | None = None
