"""Parse-time state shared across one template load.

A single ``ParseContext`` travels through the root template, its base (for
``@extend``), every include, and host-defined blocks. It bounds include
expansion, which is the only guard against runaway or cyclic work:

- ``include_count`` spans the whole load and may not exceed ``max_includes``
- ``include_stack`` is the active include path; re-entering a name on it is
  a cycle, reported before the counter could be exhausted
- the stack length may not exceed ``max_include_depth``

It also collects non-fatal warnings (missing includes) and the names of
every template pulled in, for introspection.

Thread-Safety:
    One ParseContext per ``Environment.load()`` call; never shared.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from attpl.environment.exceptions import CyclicIncludeError, IncludeLimitError

DEFAULT_MAX_INCLUDES = 5
DEFAULT_MAX_INCLUDE_DEPTH = 10


@dataclass
class ParseContext:
    """Per-load include bookkeeping.

    Attributes:
        max_includes: Ceiling on ``@include`` directives in one load
        max_include_depth: Ceiling on nested include depth
        include_count: Includes seen so far (found or missing)
        include_stack: Template names currently being expanded
        warnings: Non-fatal messages, in the order they occurred
        dependencies: Every base/include name loaded, in first-seen order
    """

    max_includes: int = DEFAULT_MAX_INCLUDES
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH
    include_count: int = 0
    include_stack: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)

    def _check_cycle(self, template_name: str) -> None:
        if template_name in self.include_stack:
            raise CyclicIncludeError((*self.include_stack, template_name))

    def count_include(self, template_name: str) -> None:
        """Register one ``@include`` directive.

        Raises:
            CyclicIncludeError: If the name is already being expanded
            IncludeLimitError: If the include count passes ``max_includes``
        """
        self._check_cycle(template_name)
        self.include_count += 1
        if self.include_count > self.max_includes:
            raise IncludeLimitError(
                f"Exceeded max template includes ({self.max_includes}) "
                f"when including '{template_name}'",
                limit=self.max_includes,
                template_name=template_name,
            )

    @contextmanager
    def entering(self, template_name: str) -> Iterator[None]:
        """Push a template onto the active path while it is being parsed.

        Raises:
            CyclicIncludeError: If the name is already on the path
            IncludeLimitError: If nesting passes ``max_include_depth``
        """
        self._check_cycle(template_name)
        if len(self.include_stack) > self.max_include_depth:
            raise IncludeLimitError(
                f"Maximum include depth exceeded ({self.max_include_depth}) "
                f"when including '{template_name}'",
                limit=self.max_include_depth,
                template_name=template_name,
            )
        if template_name not in self.dependencies and self.include_stack:
            self.dependencies.append(template_name)
        self.include_stack.append(template_name)
        try:
            yield
        finally:
            self.include_stack.pop()

    def warn(self, message: str) -> None:
        self.warnings.append(message)
