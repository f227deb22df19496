"""Output nodes for the attpl tree."""

from __future__ import annotations

from dataclasses import dataclass

from attpl.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text between directives."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Interpolation: {{name}} (or the deprecated @{name})"""

    name: str
    legacy: bool = False
