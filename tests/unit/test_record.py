from __future__ import annotations
import pytest

from sheetdoc.models.record import FlatRecord, UndeclaredFieldError


def test_declared_keys_start_empty_in_order():
    record = FlatRecord(["b", "a", "c"])
    assert list(record) == ["b", "a", "c"]
    assert all(v == "" for v in record.values())


def test_write_to_undeclared_key_raises():
    record = FlatRecord(["a"])
    with pytest.raises(UndeclaredFieldError):
        record["typo"] = "x"
    # still a KeyError for callers catching the builtin
    with pytest.raises(KeyError):
        record["typo"] = "x"


def test_keys_cannot_be_removed():
    record = FlatRecord(["a"])
    with pytest.raises(TypeError):
        del record["a"]


def test_add_field_declares_derived_key():
    record = FlatRecord(["a"])
    record.add_field("schedule", ["line 1", "line 2"])
    assert list(record) == ["a", "schedule"]
    assert record["schedule"] == ["line 1", "line 2"]


def test_dict_round_trip_keeps_order_and_lists():
    record = FlatRecord(["x", "y"])
    record["x"] = "1"
    record.add_field("z", ["a", "b"])
    restored = FlatRecord.from_dict(record.to_dict())
    assert restored.to_dict() == {"x": "1", "y": "", "z": ["a", "b"]}
