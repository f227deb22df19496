"""attpl Template: compiled template ready for rendering.

The Template wraps an immutable node tree produced by the parser and exposes
the ``render()`` API. Inheritance and includes are already resolved, so a
render is a single tree walk.

Architecture:
    ```
    Template
    ├── _ast: nodes.Template          # Resolved tree (frozen dataclasses)
    ├── _block_defs: MappingProxy     # Child/host block overrides by name
    ├── _warnings: tuple[str, ...]    # Non-fatal load messages
    └── _name, _filename, _source     # For diagnostics
    ```

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state
- Multiple threads can call ``render()`` concurrently, each with its own
  Context

"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from attpl.renderer import render_nodes
from attpl.template.introspection import TemplateIntrospectionMixin

if TYPE_CHECKING:
    from attpl.analysis import TemplateMetadata
    from attpl.context import Context
    from attpl.nodes import BlockDef
    from attpl.nodes import Template as TemplateNode


class Template(TemplateIntrospectionMixin):
    """Compiled template ready for rendering.

    Attributes:
        name: Template identifier
        filename: Source file path, when file-backed
        block_defs: Block overrides applied during inheritance resolution
        warnings: Non-fatal messages raised while loading (missing includes)

    Example:
            >>> from attpl import Context, Environment
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{name}}!")
            >>> t.render(Context().set_param("name", "<World>"))
            'Hello, &lt;World&gt;!'

    """

    __slots__ = (
        "_ast",
        "_block_defs",
        "_dependencies",
        "_filename",
        "_metadata_cache",
        "_name",
        "_source",
        "_warnings",
    )

    def __init__(
        self,
        ast: TemplateNode,
        name: str | None,
        filename: str | None = None,
        source: str | None = None,
        block_defs: Mapping[str, BlockDef] | None = None,
        warnings: tuple[str, ...] = (),
        dependencies: tuple[str, ...] = (),
    ):
        self._ast = ast
        self._name = name
        self._filename = filename
        self._source = source
        self._block_defs = MappingProxyType(dict(block_defs or {}))
        self._warnings = warnings
        self._dependencies = dependencies
        self._metadata_cache: TemplateMetadata | None = None

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Source filename."""
        return self._filename

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def ast(self) -> TemplateNode:
        """The resolved node tree."""
        return self._ast

    @property
    def block_defs(self) -> Mapping[str, BlockDef]:
        return self._block_defs

    @property
    def warnings(self) -> tuple[str, ...]:
        """Non-fatal load messages, e.g. missing includes."""
        return self._warnings

    @property
    def dependencies(self) -> tuple[str, ...]:
        """Names of every base and include pulled in while loading."""
        return self._dependencies

    def render(self, context: Context | None = None, *, keep_comments: bool = True) -> str:
        """Render the template against a Context.

        Missing bindings render as empty output; this never raises for them.

        Args:
            context: Host bindings (an empty Context when omitted)
            keep_comments: When False, strip ``<!-- ... -->`` regions from
                the final output, including placeholders directives produced

        Returns:
            Rendered template as string
        """
        return render_nodes(self._ast.body, context, keep_comments)

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'!r}>"
