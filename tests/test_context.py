"""Tests for the render Context and dataset classification."""

from __future__ import annotations

import enum
from dataclasses import dataclass

import pytest

from attpl import Context, InvalidArgumentError, RecordDataset, ScalarDataset
from attpl.context import make_dataset


class Color(enum.Enum):
    RED = "red"
    BLUE = "blue"


@dataclass(frozen=True, slots=True)
class Point:
    x: int
    y: int


class TestIdentifiers:
    @pytest.mark.parametrize("bad", [1, None, 2.5, ("a",), b"name"])
    def test_non_string_param_name(self, bad) -> None:
        with pytest.raises(InvalidArgumentError, match="Parameter name must be a string"):
            Context().set_param(bad, "v")

    @pytest.mark.parametrize(
        "method",
        ["set_loop", "set_for_each", "set_for"],
    )
    def test_non_string_loop_identifier(self, method) -> None:
        with pytest.raises(InvalidArgumentError):
            getattr(Context(), method)(42, [1])

    def test_non_string_conditional_identifier(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Context().set_conditional(None, True)

    def test_invalid_argument_is_a_type_error(self) -> None:
        with pytest.raises(TypeError):
            Context().set_param(1, "v")


class TestUniqueness:
    def test_duplicate_loop_identifier(self) -> None:
        ctx = Context().set_loop("users", [])
        with pytest.raises(InvalidArgumentError, match="already bound"):
            ctx.set_loop("users", [{"name": "x"}])
        assert ctx.loops["users"] == ScalarDataset(())

    def test_for_and_for_each_share_identifiers(self) -> None:
        ctx = Context().set_for("items", [1])
        with pytest.raises(InvalidArgumentError):
            ctx.set_for_each("items", [{"a": 1}])

    def test_duplicate_conditional_identifier(self) -> None:
        ctx = Context().set_conditional("admin", True)
        with pytest.raises(InvalidArgumentError, match="already bound"):
            ctx.set_conditional("admin", False)
        assert ctx.conditionals == {"admin": True}

    def test_params_may_be_overwritten(self) -> None:
        ctx = Context().set_param("x", "1").set_param("x", "2")
        assert ctx.params == {"x": "2"}

    def test_same_identifier_in_different_namespaces(self) -> None:
        ctx = Context().set_param("x", "p").set_loop("x", [1]).set_conditional("x", True)
        assert ctx.params["x"] == "p"
        assert ctx.conditionals["x"] is True


class TestBindings:
    def test_conditional_requires_bool(self) -> None:
        with pytest.raises(InvalidArgumentError, match="must be a boolean"):
            Context().set_conditional("flag", 1)

    def test_set_for_rejects_mapping(self) -> None:
        with pytest.raises(InvalidArgumentError, match="must be a sequence"):
            Context().set_for("xs", {"a": 1})

    @pytest.mark.parametrize("bad", ["text", b"bytes", 5, None])
    def test_loop_data_must_be_iterable(self, bad) -> None:
        with pytest.raises(InvalidArgumentError):
            Context().set_loop("xs", bad)

    def test_chaining(self) -> None:
        ctx = Context().set_param("a", 1).set_loop("b", []).set_conditional("c", False)
        assert isinstance(ctx, Context)

    def test_from_mapping(self) -> None:
        ctx = Context.from_mapping(
            params={"title": "Home"},
            loops={"users": [{"name": "Ada"}]},
            conditionals={"admin": False},
        )
        assert ctx.params == {"title": "Home"}
        assert ctx.loops["users"] == RecordDataset(({"name": "Ada"},))
        assert ctx.conditionals == {"admin": False}

    def test_from_mapping_validates(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Context.from_mapping(conditionals={"admin": "yes"})


class TestMakeDataset:
    def test_scalars(self) -> None:
        assert make_dataset("xs", [1, "b", None, True]) == ScalarDataset(("1", "b", "", "1"))

    def test_records(self) -> None:
        dataset = make_dataset("rows", [{"id": 1, "ok": False}])
        assert dataset == RecordDataset(({"id": "1", "ok": ""},))

    def test_single_mapping_wraps(self) -> None:
        assert make_dataset("row", {"a": "b"}) == RecordDataset(({"a": "b"},))

    def test_mixed_records_and_scalars(self) -> None:
        with pytest.raises(InvalidArgumentError, match="mixes records"):
            make_dataset("xs", [{"a": 1}, 2])

    def test_empty(self) -> None:
        assert make_dataset("xs", []) == ScalarDataset(())

    def test_tuple_and_range(self) -> None:
        assert make_dataset("xs", range(3)) == ScalarDataset(("0", "1", "2"))
        assert make_dataset("xs", ("a",)) == ScalarDataset(("a",))

    def test_enum_members_are_scalars(self) -> None:
        assert make_dataset("c", [Color.RED, Color.BLUE]) == ScalarDataset(
            ("Color.RED", "Color.BLUE")
        )

    def test_slotted_dataclass_is_a_record(self) -> None:
        dataset = make_dataset("pts", [Point(1, 2)])
        assert dataset == RecordDataset(({"x": "1", "y": "2"},))

    def test_plain_object_is_a_record(self) -> None:
        class Row:
            def __init__(self) -> None:
                self.name = "Ada"

        assert make_dataset("rows", [Row()]) == RecordDataset(({"name": "Ada"},))
