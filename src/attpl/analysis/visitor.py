"""Shared visitor patterns for attpl tree analysis.

Provides CONTAINER_ATTRS and visit_children for generic tree traversal.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from attpl.nodes import Node

# Attributes holding child node sequences. ``else_`` may be None.
CONTAINER_ATTRS = ("body", "else_")


def visit_children(node: Node, visit: Callable[[Node], None]) -> None:
    """Visit all child nodes of a tree node, in source order."""
    for attr in CONTAINER_ATTRS:
        children = getattr(node, attr, None)
        if children:
            for child in children:
                visit(child)
