"""
Typing aliases and protocols shared across objsession.

Notes:
    - RawStore is the contract a backing store must satisfy; plain mappings are
      adapted to it by objsession.runtime.stores.MappingStore.
    - No runtime logic beyond the runtime_checkable protocol.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "StoreKey",
    "RawStore",
]

# Keys are usually str; other hashables are compared by their str() form.
StoreKey = Any


@runtime_checkable
class RawStore(Protocol):
    """Key-value store borrowed (never owned) by a SessionView."""

    def get(self, key: StoreKey) -> Any: ...

    def set(self, key: StoreKey, value: Any) -> None: ...

    def keys(self) -> Iterable[StoreKey]: ...

    def delete(self, keys: Iterable[StoreKey]) -> None: ...
