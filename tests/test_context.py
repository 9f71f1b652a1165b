"""Tests for the execution context accessor."""

import pytest

from nodeflow.engine.context import ExecutionContext


def test_with_output_returns_new_context():
    original = ExecutionContext({"a": 1})
    updated = original.with_output("b", 2)

    assert dict(updated) == {"a": 1, "b": 2}
    assert dict(original) == {"a": 1}


def test_with_output_overwrites_existing_key():
    context = ExecutionContext({"a": 1}).with_output("a", {"nested": True})
    assert context["a"] == {"nested": True}


def test_with_output_rejects_empty_name():
    with pytest.raises(ValueError):
        ExecutionContext().with_output("", 1)


def test_merge_keeps_existing_keys():
    context = ExecutionContext({"a": 1, "b": 2}).merge({"b": 3, "c": 4})
    assert context.to_dict() == {"a": 1, "b": 3, "c": 4}


def test_merge_with_empty_mapping_is_identity():
    context = ExecutionContext({"a": 1})
    assert context.merge({}) is context
    assert context.merge(None) is context


def test_keys_cannot_be_deleted_or_assigned():
    context = ExecutionContext({"a": 1})

    with pytest.raises(TypeError):
        del context["a"]  # type: ignore[attr-defined]
    with pytest.raises(TypeError):
        context["b"] = 2  # type: ignore[index]


def test_to_dict_is_a_copy():
    context = ExecutionContext({"a": 1})
    snapshot = context.to_dict()
    snapshot["b"] = 2
    assert "b" not in context
