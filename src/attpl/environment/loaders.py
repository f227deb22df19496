"""Template loaders for the attpl environment.

Loaders locate template source by name. They implement
`get_source(name)` returning `(source, filename)` and raise
`TemplateNotFoundError` when the name cannot be resolved.

Built-in Loaders:
- `FileSystemLoader`: ``<folder>/<name>.tpl`` files on disk
- `DictLoader`: In-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order (theme fallback)
- `FunctionLoader`: Wrap a callable as a loader (quick one-offs)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM templates WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return row.source, f"db://{name}"

        def resolve(self, name: str) -> str:
            return f"db://{name}"
    ```

``resolve(name)`` is optional. When present, its result is what the source
cache hashes, so moving a template folder does not serve stale entries
recorded for the old location. A loader without ``resolve`` is never served
from the source cache. The in-memory loaders resolve names under a random
per-instance prefix, so two of them never share cache entries, even through
the temp-directory cache that all processes see.

Thread-Safety:
All built-in loaders are safe for concurrent `get_source()` calls.

"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from pathlib import Path
from typing import Any

from attpl.environment.exceptions import InvalidArgumentError, TemplateNotFoundError

DEFAULT_FOLDER = "tmpl"
DEFAULT_SUFFIX = ".tpl"


def _memory_prefix(kind: str) -> str:
    return f"{kind}://{uuid.uuid4().hex}/"


def _holds(loader: Any, name: str) -> bool:
    """Whether ``loader`` can supply ``name``, without reading it when avoidable."""
    if hasattr(loader, "__contains__"):
        return name in loader
    try:
        loader.get_source(name)
    except TemplateNotFoundError:
        return False
    return True


class FileSystemLoader:
    """Load templates from filesystem directories.

    A template name maps to ``<folder>/<name><suffix>``; with the defaults,
    ``load("pages/home")`` reads ``tmpl/pages/home.tpl``. When several
    folders are given, the first one holding the file wins.

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> source, filename = loader.get_source("header")
            >>> print(filename)
            'templates/header.tpl'

    Raises:
        TemplateNotFoundError: If template not found in any search path

    """

    __slots__ = ("_encoding", "_paths", "_suffix")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        suffix: str = DEFAULT_SUFFIX,
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._suffix = suffix
        self._encoding = encoding

    def _candidates(self, name: str) -> list[Path]:
        return [base / f"{name}{self._suffix}" for base in self._paths]

    def __contains__(self, name: str) -> bool:
        return any(path.is_file() for path in self._candidates(name))

    def resolve(self, name: str) -> str:
        """Return the path the name resolves to (first existing, else first candidate)."""
        candidates = self._candidates(name)
        for path in candidates:
            if path.is_file():
                return str(path.resolve())
        return str(candidates[0].resolve())

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from filesystem."""
        for path in self._candidates(name):
            if path.is_file():
                return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}"
        )

    def list_templates(self) -> list[str]:
        """List all template names (without suffix) in search paths."""
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob(f"*{self._suffix}"):
                    relative = path.relative_to(base).as_posix()
                    templates.add(relative[: -len(self._suffix)] if self._suffix else relative)
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Example:
            >>> loader = DictLoader({
            ...     "base": "<title>@block[title]Site@end[title]</title>",
            ...     "page": "@extend[base]@block[title]Home@end[title]",
            ... })
            >>> env = Environment(loader=loader)
            >>> env.load("page").render()
            '<title>Home</title>'

    Raises:
        TemplateNotFoundError: If template name not in mapping

    """

    __slots__ = ("_mapping", "_prefix")

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping
        self._prefix = _memory_prefix("dict")

    def __contains__(self, name: str) -> bool:
        return name in self._mapping

    def resolve(self, name: str) -> str:
        return self._prefix + name

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            raise TemplateNotFoundError(msg)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())




class ChoiceLoader:
    """Layered lookup: the first layer that holds a name supplies it.

    Typical use is a site theme stacked over a stock template set:

            >>> theme = DictLoader({"nav": "<nav>Theme</nav>"})
            >>> stock = DictLoader({"nav": "<nav>Stock</nav>", "footer": "<footer/>"})
            >>> env = Environment(loader=ChoiceLoader([theme, stock]))
            >>> env.load("nav").render()
            '<nav>Theme</nav>'

    ``resolve()`` answers with the owning layer's own resolution, so a file
    layer shares source cache entries with a plain ``FileSystemLoader`` over
    the same folder.
    """

    __slots__ = ("_layers", "_prefix")

    def __init__(self, loaders: list[Any]):
        if not loaders:
            raise InvalidArgumentError("ChoiceLoader needs at least one loader")
        self._layers = tuple(loaders)
        self._prefix = _memory_prefix("choice")

    def _owner(self, name: str) -> Any:
        for layer in self._layers:
            if _holds(layer, name):
                return layer
        return None

    def __contains__(self, name: str) -> bool:
        return self._owner(name) is not None

    def resolve(self, name: str) -> str:
        owner = self._owner(name)
        if owner is not None and hasattr(owner, "resolve"):
            return owner.resolve(name)
        return self._prefix + name

    def get_source(self, name: str) -> tuple[str, str | None]:
        owner = self._owner(name)
        if owner is None:
            raise TemplateNotFoundError(
                f"Template '{name}' not found in any of {len(self._layers)} layers"
            )
        return owner.get_source(name)

    def list_templates(self) -> list[str]:
        names: set[str] = set()
        for layer in self._layers:
            names.update(getattr(layer, "list_templates", list)())
        return sorted(names)


class FunctionLoader:
    """Template source from a host callable.

    The callable gets the template name and returns the source text, a
    ``(source, filename)`` pair, or ``None`` when there is no such template.
    Nothing is memoized here; enable the Environment's source cache for that.

            >>> pages = {"greeting": "Hello, {{name}}!"}
            >>> env = Environment(loader=FunctionLoader(pages.get))
    """

    __slots__ = ("_fetch", "_prefix")

    def __init__(self, fetch: Callable[[str], str | tuple[str, str | None] | None]):
        if not callable(fetch):
            raise InvalidArgumentError(
                f"FunctionLoader needs a callable, got {type(fetch).__name__}"
            )
        self._fetch = fetch
        self._prefix = _memory_prefix("function")

    def resolve(self, name: str) -> str:
        return self._prefix + name

    def get_source(self, name: str) -> tuple[str, str | None]:
        found = self._fetch(name)
        if found is None:
            raise TemplateNotFoundError(f"Template '{name}' not found")
        if isinstance(found, str):
            return found, None
        if isinstance(found, tuple) and len(found) == 2 and isinstance(found[0], str):
            return found
        raise InvalidArgumentError(
            f"Loader function returned {type(found).__name__} for '{name}'; "
            "expected str, (source, filename) or None"
        )
