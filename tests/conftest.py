from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest


class RecordingStore:
    """Dict-backed RawStore that records every call made against it."""

    def __init__(self, data: dict[Any, Any] | None = None) -> None:
        self.data: dict[Any, Any] = dict(data or {})
        self.calls: list[tuple[str, Any]] = []

    def get(self, key: Any) -> Any:
        self.calls.append(("get", key))
        return self.data.get(key)

    def set(self, key: Any, value: Any) -> None:
        self.calls.append(("set", key))
        self.data[key] = value

    def keys(self) -> list[Any]:
        self.calls.append(("keys", None))
        return list(self.data)

    def delete(self, keys: Iterable[Any]) -> None:
        batch = list(keys)
        self.calls.append(("delete", batch))
        for key in batch:
            self.data.pop(key, None)

    def deletes(self) -> list[list[Any]]:
        return [arg for op, arg in self.calls if op == "delete"]

    def sets(self) -> list[Any]:
        return [arg for op, arg in self.calls if op == "set"]


@pytest.fixture
def recording_store():
    """Factory for RecordingStore instances seeded with optional data."""

    def _make(data: dict[Any, Any] | None = None) -> RecordingStore:
        return RecordingStore(data)

    return _make
