"""View: stateful host facade over one named template.

Some hosts prefer building a page step by step on one object:

    >>> view = env.view("profile")
    >>> view.extend("layout")
    >>> view.define_block("title", "Profile of {{name}}")
    >>> view.set_param("name", "Ada")
    >>> view.set_conditional("admin", False)
    >>> html = view.render(keep_comments=False)

Underneath, a View is a thin shell: inheritance settings feed
``Environment.load(extends=..., blocks=...)`` and bindings feed a
``Context``. The compiled Template is built lazily on the first render and
rebuilt only when ``extend``/``define_block`` change it, so rendering the
same View again with new bindings reuses the compiled tree.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from attpl.context import Context
from attpl.environment.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from attpl.environment.core import Environment
    from attpl.template import Template


class View:
    """One template plus the bindings and block overrides for it."""

    __slots__ = ("_base", "_blocks", "_context", "_env", "_name", "_template")

    def __init__(self, env: Environment, name: str):
        self._env = env
        self._name = name
        self._base: str | None = None
        self._blocks: dict[str, str] = {}
        self._context = Context()
        self._template: Template | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def context(self) -> Context:
        return self._context

    # Inheritance (host-side equivalents of @extend / @block)

    def extend(self, base_name: str) -> View:
        if not isinstance(base_name, str):
            raise InvalidArgumentError(
                f"Base template name must be a string, got {type(base_name).__name__}"
            )
        self._base = base_name
        self._template = None
        return self

    def define_block(self, name: str, content: str) -> View:
        """Override ``@block[name]`` with template source ``content``."""
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Block name must be a string, got {type(name).__name__}")
        if not isinstance(content, str):
            raise InvalidArgumentError(
                f"Block content must be a string, got {type(content).__name__}"
            )
        self._blocks[name] = content
        self._template = None
        return self

    # Bindings

    def set_param(self, name: str, value: Any) -> View:
        self._context.set_param(name, value)
        return self

    def set_loop(self, identifier: str, data: Any) -> View:
        self._context.set_loop(identifier, data)
        return self

    def set_for_each(self, identifier: str, data: Any) -> View:
        self._context.set_for_each(identifier, data)
        return self

    def set_for(self, identifier: str, data: Any) -> View:
        self._context.set_for(identifier, data)
        return self

    def set_conditional(self, identifier: str, flag: bool) -> View:
        self._context.set_conditional(identifier, flag)
        return self

    def reset(self) -> View:
        """Discard all bindings, keeping the compiled template."""
        self._context = Context()
        return self

    # Output

    @property
    def template(self) -> Template:
        """The compiled template, built on first access."""
        if self._template is None:
            self._template = self._env.load(
                self._name,
                extends=self._base,
                blocks=dict(self._blocks) or None,
            )
        return self._template

    def render(self, keep_comments: bool = True) -> str:
        return self.template.render(self._context, keep_comments=keep_comments)
