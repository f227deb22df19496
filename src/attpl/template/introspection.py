"""Template introspection mixin.

Adds static analysis and metadata methods to the Template class
via mixin inheritance.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from attpl.analysis import TemplateMetadata
    from attpl.nodes import Template as TemplateNode


class TemplateIntrospectionMixin:
    """Mixin adding static analysis and introspection to Template.

    Requires the host class to define the following slots:
        _ast: TemplateNode
        _metadata_cache: TemplateMetadata | None
        _name: str | None

    """

    __slots__ = ()

    if TYPE_CHECKING:
        _ast: TemplateNode
        _metadata_cache: TemplateMetadata | None
        _name: str | None

    def metadata(self) -> TemplateMetadata:
        """Get the names this template consumes and pulls in.

        Results are cached after first call.

        Example:
            >>> meta = template.metadata()
            >>> meta.extends
            'layout'
            >>> meta.loops
            ('users',)
        """
        if self._metadata_cache is None:
            from attpl.analysis import BindingCollector

            self._metadata_cache = BindingCollector().analyze(self._ast, name=self._name)
        return self._metadata_cache

    def block_names(self) -> tuple[str, ...]:
        """Names of the block slots in the resolved tree."""
        return self.metadata().blocks

    def required_bindings(self) -> frozenset[str]:
        """Identifiers the host may bind: params, loops and conditionals."""
        return self.metadata().all_bindings()
