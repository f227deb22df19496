"""Template metadata produced by static analysis."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class TemplateMetadata:
    """Names a compiled template consumes and pulls in.

    Attributes:
        name: Template identifier
        extends: Base template name, if the template extends one
        params: ``{{name}}`` references outside any loop
        loops: Loop identifiers, in first-use order
        loop_fields: Names referenced inside each loop body, by identifier
        conditionals: Conditional identifiers, in first-use order
        includes: Included template names (found or missing), in order
        missing_includes: Included names whose source was not found
        blocks: Block slot names present in the resolved tree
    """

    name: str | None
    extends: str | None
    params: frozenset[str] = frozenset()
    loops: tuple[str, ...] = ()
    loop_fields: dict[str, frozenset[str]] = field(default_factory=dict)
    conditionals: tuple[str, ...] = ()
    includes: tuple[str, ...] = ()
    missing_includes: tuple[str, ...] = ()
    blocks: tuple[str, ...] = ()

    def all_bindings(self) -> frozenset[str]:
        """Every identifier a host might bind for this template."""
        return self.params | frozenset(self.loops) | frozenset(self.conditionals)
