"""attpl Environment: configuration, source loading and template compilation.

The Environment is the host's entry point. It owns the loader (where
template text comes from), the optional source cache, the include limits,
and a cache of compiled templates.

Pipeline:
    load(name)
      → source cache / loader        (text)
      → Lexer                        (tokens)
      → Parser                       (tree, inheritance + includes resolved)
      → Template                     (render-ready, immutable)

Configuration is applied before ``load()``. Every setter clears the
compiled-template cache so the next load sees the new settings.

Error channel:
Fatal load errors (not found, include limits, cycles, malformed directives)
are logged at error level through the Environment's logger and re-raised.
Missing includes are logged as warnings and recorded on
``Template.warnings``; the load continues.

Thread-Safety:
Loading uses only local parse state. The compiled-template cache relies on
atomic dict get/set; two threads racing to load the same name both compile
and the last one stored wins, which is harmless because compilation is
deterministic.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from attpl.environment.cache import DEFAULT_MAX_AGE_HOURS, FileSourceCache, SourceCache
from attpl.environment.exceptions import InvalidArgumentError, TemplateError
from attpl.environment.loaders import DEFAULT_FOLDER, DEFAULT_SUFFIX, FileSystemLoader
from attpl.lexer import tokenize
from attpl.parse_context import DEFAULT_MAX_INCLUDE_DEPTH, DEFAULT_MAX_INCLUDES, ParseContext
from attpl.parser import Parser
from attpl.template import Template

if TYPE_CHECKING:
    from attpl.context import Context
    from attpl.view import View

_logger = logging.getLogger("attpl")


def _check_limit(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative integer, got {value!r}")
    return value


class Environment:
    """Template configuration and loading.

    Args:
        loader: Where template text comes from. Defaults to a
            ``FileSystemLoader`` over ``folder`` with ``suffix``.
        folder: Template folder for the default loader
        suffix: File suffix for the default loader
        max_includes: Ceiling on ``@include`` directives per load
        max_include_depth: Ceiling on nested include depth
        caching: Enable the source cache
        max_cache_age_hours: Age after which cached source reads as a miss
        source_cache: Cache backend (default: ``FileSourceCache`` in the
            system temp directory, created when caching is enabled)
        logger: Diagnostics sink for warnings and errors

    Example:
        >>> env = Environment(folder="templates/")
        >>> env.enable_caching(True, max_age_hours=12)
        >>> page = env.load("home")
        >>> page.render(Context().set_param("title", "Home"))

    """

    def __init__(
        self,
        loader: Any = None,
        *,
        folder: str | Path = DEFAULT_FOLDER,
        suffix: str = DEFAULT_SUFFIX,
        max_includes: int = DEFAULT_MAX_INCLUDES,
        max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
        caching: bool = False,
        max_cache_age_hours: float = DEFAULT_MAX_AGE_HOURS,
        source_cache: SourceCache | None = None,
        logger: logging.Logger | None = None,
    ):
        self._suffix = suffix
        self.loader = loader if loader is not None else FileSystemLoader(folder, suffix=suffix)
        self._max_includes = _check_limit("max_includes", max_includes)
        self._max_include_depth = _check_limit("max_include_depth", max_include_depth)
        self._caching = False
        self._max_cache_age_hours = DEFAULT_MAX_AGE_HOURS
        self._source_cache = source_cache
        self.logger = logger if logger is not None else _logger
        self._cache: dict[str, Template] = {}
        if caching:
            self.enable_caching(True, max_cache_age_hours)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def max_includes(self) -> int:
        return self._max_includes

    @property
    def max_include_depth(self) -> int:
        return self._max_include_depth

    @property
    def caching(self) -> bool:
        return self._caching

    @property
    def max_cache_age_hours(self) -> float:
        return self._max_cache_age_hours

    @property
    def source_cache(self) -> SourceCache | None:
        return self._source_cache

    def set_folder(self, path: str | Path) -> None:
        """Load templates from ``<path>/<name><suffix>`` from now on."""
        self.loader = FileSystemLoader(path, suffix=self._suffix)
        self.clear_cache()

    def set_max_includes(self, max_includes: int) -> None:
        self._max_includes = _check_limit("max_includes", max_includes)
        self.clear_cache()

    def set_max_include_depth(self, max_include_depth: int) -> None:
        self._max_include_depth = _check_limit("max_include_depth", max_include_depth)
        self.clear_cache()

    def enable_caching(self, allow: bool, max_age_hours: float = DEFAULT_MAX_AGE_HOURS) -> None:
        """Turn the source cache on or off.

        Args:
            allow: Whether source text may be served from the cache
            max_age_hours: Entries older than this read as a miss
        """
        if not isinstance(allow, bool):
            raise InvalidArgumentError(f"allow must be a boolean, got {type(allow).__name__}")
        if isinstance(max_age_hours, bool) or not isinstance(max_age_hours, (int, float)):
            raise InvalidArgumentError(f"max_age_hours must be a number, got {max_age_hours!r}")
        self._caching = allow
        self._max_cache_age_hours = float(max_age_hours)
        if allow and self._source_cache is None:
            self._source_cache = FileSourceCache()
        self.clear_cache()

    def clear_cache(self) -> None:
        """Drop all compiled templates."""
        self._cache.clear()

    # ------------------------------------------------------------------
    # Source loading
    # ------------------------------------------------------------------

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Return ``(source, filename)`` for a template name.

        Consults the source cache first when caching is enabled; on a miss
        the loader is asked and the result stored. Entries are keyed by the
        loader's ``resolve(name)``; a loader without ``resolve`` bypasses
        the cache, since a bare name does not identify the text.

        Raises:
            TemplateNotFoundError: If the loader cannot find the template
        """
        loader = self.loader
        cache = self._source_cache if self._caching else None
        if cache is None or not hasattr(loader, "resolve"):
            return loader.get_source(name)

        path = loader.resolve(name)
        cached = cache.get(path, self._max_cache_age_hours)
        if cached is not None:
            self.logger.debug(f"Source cache hit for '{name}' ({path})")
            return cached, path if Path(path).is_file() else None
        self.logger.debug(f"Source cache miss for '{name}' ({path})")

        source, filename = loader.get_source(name)
        cache.put(path, source)
        return source, filename

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def load(
        self,
        name: str,
        *,
        extends: str | None = None,
        blocks: Mapping[str, str] | None = None,
    ) -> Template:
        """Load and compile a template by name.

        Plain loads are cached for the lifetime of the Environment (until a
        setter or ``clear_cache()`` runs). Loads with host-side inheritance
        (``extends``/``blocks``) are compiled fresh each time.

        Args:
            name: Template name, resolved by the loader
            extends: Base template to extend, as if the source began with
                ``@extend[extends]``
            blocks: Block overrides as template source, keyed by block name

        Raises:
            TemplateNotFoundError: Template or base not found
            TemplateSyntaxError: Malformed directives
            IncludeLimitError: Too many or too deeply nested includes
            CyclicIncludeError: A template includes itself
        """
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Template name must be a string, got {type(name).__name__}")

        plain = extends is None and not blocks
        if plain:
            cached = self._cache.get(name)
            if cached is not None:
                return cached

        try:
            source, filename = self.get_source(name)
            template = self._compile(source, name, filename, extends, blocks)
        except TemplateError as e:
            self.logger.error(f"Failed to load template '{name}': {e}")
            raise

        if plain:
            self._cache[name] = template
        return template

    get_template = load

    def from_string(
        self,
        source: str,
        name: str | None = None,
        *,
        extends: str | None = None,
        blocks: Mapping[str, str] | None = None,
    ) -> Template:
        """Compile a template from source text (not cached).

        Bases and includes it references are still resolved through the
        loader.
        """
        try:
            return self._compile(source, name, None, extends, blocks)
        except TemplateError as e:
            self.logger.error(f"Failed to compile template '{name or '<string>'}': {e}")
            raise

    def render(
        self,
        name: str,
        context: Context | None = None,
        *,
        keep_comments: bool = True,
    ) -> str:
        """Load ``name`` and render it in one call."""
        return self.load(name).render(context, keep_comments=keep_comments)

    def view(self, name: str) -> View:
        """Stateful facade over one template (see ``attpl.view.View``)."""
        from attpl.view import View

        return View(self, name)

    def _compile(
        self,
        source: str,
        name: str | None,
        filename: str | None,
        extends: str | None,
        blocks: Mapping[str, str] | None,
    ) -> Template:
        context = ParseContext(
            max_includes=self._max_includes,
            max_include_depth=self._max_include_depth,
        )
        with context.entering(name or "<template>"):
            parser = Parser(
                tokenize(source),
                name,
                source,
                load_source=self.get_source,
                context=context,
                logger=self.logger,
            )
            ast = parser.parse(extends=extends, blocks=blocks)

        return Template(
            ast,
            name,
            filename=filename,
            source=source,
            block_defs=parser.block_defs,
            warnings=tuple(context.warnings),
            dependencies=tuple(context.dependencies),
        )
