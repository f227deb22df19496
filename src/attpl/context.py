"""Render context: the host-supplied bindings for one render.

A Context holds three independent namespaces:

- ``params``: scalar parameters for ``{{name}}``
- ``loops``: datasets for ``@forEach[id]`` / ``@for[id]``
- ``conditionals``: booleans for ``@if[id](expr)``

Datasets are tagged when the host registers them, not re-inspected per
element at render time:

- ``ScalarDataset``: ordered scalars (``[1, 2, 3]``)
- ``RecordDataset``: ordered records, each a ``dict[str, str]``

A single mapping (or object) passed as loop data becomes a one-record
dataset.

Identifiers must be strings. Loop and conditional identifiers must be unique
within one Context: registering one twice is rejected rather than silently
replacing the first binding. Parameters may be overwritten.

Example:
    >>> ctx = Context()
    >>> ctx.set_param("title", "Users")
    >>> ctx.set_loop("users", [{"name": "Ada"}, {"name": "Linus"}])
    >>> ctx.set_conditional("logged_in", True)

"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any

from attpl.environment.exceptions import InvalidArgumentError
from attpl.utils.html import to_text


@dataclass(frozen=True, slots=True)
class ScalarDataset:
    """Loop data made of plain values."""

    items: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RecordDataset:
    """Loop data made of records exposing named fields."""

    records: tuple[dict[str, str], ...]


Dataset = ScalarDataset | RecordDataset


def _is_record(value: Any) -> bool:
    """Mappings, dataclass instances and plain objects are records; enum members are not."""
    if isinstance(value, Mapping):
        return True
    if isinstance(value, (str, bytes, type, Enum)):
        return False
    return is_dataclass(value) or hasattr(value, "__dict__")


def _record_fields(value: Any) -> dict[str, str]:
    if isinstance(value, Mapping):
        items = value.items()
    elif is_dataclass(value):
        items = ((f.name, getattr(value, f.name)) for f in fields(value))
    else:
        items = vars(value).items()
    return {str(key): to_text(field_value) for key, field_value in items}


def make_dataset(identifier: str, data: Any) -> Dataset:
    """Classify loop data once, at registration time.

    Raises:
        InvalidArgumentError: If the data is not iterable, or mixes records
            and scalars
    """
    if _is_record(data):
        return RecordDataset((_record_fields(data),))
    if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
        raise InvalidArgumentError(
            f"Data for loop '{identifier}' must be a sequence or a mapping, "
            f"got {type(data).__name__}"
        )

    elements = list(data)
    record_flags = {_is_record(element) for element in elements}
    if record_flags == {True}:
        return RecordDataset(tuple(_record_fields(element) for element in elements))
    if record_flags == {True, False}:
        raise InvalidArgumentError(
            f"Data for loop '{identifier}' mixes records and scalar values"
        )
    return ScalarDataset(tuple(to_text(element) for element in elements))


def _check_identifier(kind: str, identifier: Any) -> None:
    if not isinstance(identifier, str):
        raise InvalidArgumentError(
            f"{kind} must be a string, got {type(identifier).__name__}"
        )


@dataclass
class Context:
    """Per-render bindings, populated through the setter methods.

    The Context is read-only during rendering; the same compiled Template
    can render any number of Contexts, one per call.
    """

    params: dict[str, str] = field(default_factory=dict)
    loops: dict[str, Dataset] = field(default_factory=dict)
    conditionals: dict[str, bool] = field(default_factory=dict)

    def set_param(self, name: str, value: Any) -> Context:
        """Bind ``{{name}}``. Later calls replace earlier ones."""
        _check_identifier("Parameter name", name)
        self.params[name] = to_text(value)
        return self

    def set_loop(self, identifier: str, data: Any) -> Context:
        """Bind the dataset for ``@forEach[identifier]`` / ``@for[identifier]``."""
        _check_identifier("Loop identifier", identifier)
        if identifier in self.loops:
            raise InvalidArgumentError(
                f"Loop identifier '{identifier}' is already bound in this context"
            )
        self.loops[identifier] = make_dataset(identifier, data)
        return self

    def set_for_each(self, identifier: str, data: Any) -> Context:
        """Alias of ``set_loop`` named after the ``@forEach`` directive."""
        return self.set_loop(identifier, data)

    def set_for(self, identifier: str, data: Any) -> Context:
        """Bind a scalar sequence for ``@for[identifier]``.

        Raises:
            InvalidArgumentError: If ``data`` is not a sequence of scalars
        """
        _check_identifier("Array identifier", identifier)
        if _is_record(data):
            raise InvalidArgumentError(f"Data for loop '{identifier}' must be a sequence")
        return self.set_loop(identifier, data)

    def set_conditional(self, identifier: str, flag: bool) -> Context:
        """Bind the pre-computed boolean for ``@if[identifier](expr)``."""
        _check_identifier("Conditional identifier", identifier)
        if not isinstance(flag, bool):
            raise InvalidArgumentError(
                f"Conditional '{identifier}' must be a boolean, got {type(flag).__name__}"
            )
        if identifier in self.conditionals:
            raise InvalidArgumentError(
                f"Conditional identifier '{identifier}' is already bound in this context"
            )
        self.conditionals[identifier] = flag
        return self

    @classmethod
    def from_mapping(
        cls,
        params: Mapping[str, Any] | None = None,
        loops: Mapping[str, Any] | None = None,
        conditionals: Mapping[str, bool] | None = None,
    ) -> Context:
        """Build a Context from plain mappings, validating every entry."""
        ctx = cls()
        for name, value in (params or {}).items():
            ctx.set_param(name, value)
        for identifier, data in (loops or {}).items():
            ctx.set_loop(identifier, data)
        for identifier, flag in (conditionals or {}).items():
            ctx.set_conditional(identifier, flag)
        return ctx
