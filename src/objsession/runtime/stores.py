"""
Adapters from host session objects to the RawStore protocol.

Most web frameworks expose their session as a MutableMapping (dict-like). A
SessionView talks to its store only through get/set/keys/delete, so mappings are
wrapped in a MappingStore; objects already implementing RawStore pass through.

Notes:
    - Nested dicts stored under a prefix are adapted the same way.
    - MappingStore holds a reference to the mapping; it never copies data.
"""

from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from typing import Any

from objsession.core.typing import RawStore, StoreKey

__all__ = [
    "MappingStore",
    "as_store",
]


class MappingStore:
    """
    RawStore view over a MutableMapping.

    Examples:
        >>> data = {"a": 1, "b": 2}
        >>> store = MappingStore(data)
        >>> store.set("c", 3); store.delete(["a", "zz"])
        >>> sorted(data)
        ['b', 'c']
    """

    def __init__(self, data: MutableMapping[Any, Any]) -> None:
        self.data = data

    def get(self, key: StoreKey) -> Any:
        return self.data.get(key)

    def set(self, key: StoreKey, value: Any) -> None:
        self.data[key] = value

    def keys(self) -> list[StoreKey]:
        return list(self.data.keys())

    def delete(self, keys: Iterable[StoreKey]) -> None:
        for key in list(keys):
            self.data.pop(key, None)

    def __repr__(self) -> str:
        return f"MappingStore({self.data!r})"


def as_store(obj: Any) -> RawStore:
    """
    Return obj as a RawStore.

    Args:
        obj: A RawStore implementation or a MutableMapping.

    Raises:
        TypeError: If obj is neither.
    """
    if isinstance(obj, RawStore):
        return obj
    if isinstance(obj, MutableMapping):
        return MappingStore(obj)
    raise TypeError(
        f"Expected a RawStore (get/set/keys/delete) or a mutable mapping, got {obj!r}"
    )
