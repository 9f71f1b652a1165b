"""Accumulating execution context threaded through a workflow run."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any


class ExecutionContext(Mapping[str, Any]):
    """
    Read-only mapping of variable name to JSON-compatible value.

    Writers return a new context holding every existing key plus the new
    ones. There is no way to remove a key, so a run's context only grows.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ExecutionContext({self._values!r})"

    def with_output(self, name: str, value: Any) -> ExecutionContext:
        """Return a context with `name` set to `value` (last write wins)."""
        if not name:
            raise ValueError("Output variable name must not be empty")
        return ExecutionContext({**self._values, name: value})

    def merge(self, other: Mapping[str, Any] | None) -> ExecutionContext:
        """Return a context with every key of `other` added or overwritten."""
        if not other:
            return self
        return ExecutionContext({**self._values, **other})

    def to_dict(self) -> dict[str, Any]:
        """Shallow copy of the values, for templating and persistence."""
        return dict(self._values)
