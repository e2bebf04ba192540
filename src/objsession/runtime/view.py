"""
SessionView: one unit of work's guarded view over a raw key-value store.

Responsibilities
- Resolve the physical store: the raw store itself, or the nested map stored at
  the schema prefix. The nested map is re-read from the raw store on every
  access, and resolution never allocates; only set() does.
- Purge, at construction, keys the schema does not protect when the schema's
  unknown-field policy is "delete".
- Serve keyed get/set for active fields, validating writes before touching the store.
- Render a compact display string.

Notes
- Views borrow the raw store and never cache values: every get/set goes to the store.
- Views are not thread-safe and are meant to be discarded after the unit of work.
"""

from __future__ import annotations

import logging
from typing import Any

from objsession.core.constants import DISPLAY_ELLIPSIS, DISPLAY_TRUNCATE_LENGTH
from objsession.core.errors import NoSuchFieldError
from objsession.core.grammar import UnknownFieldPolicy, fold_field_name
from objsession.core.registry import SchemaRegistry
from objsession.core.schema import FieldDescriptor
from objsession.core.typing import RawStore
from objsession.core.validate import validate_value

from .stores import as_store

__all__ = ["SessionView"]

logger = logging.getLogger(__name__)


class SessionView:
    """
    Guarded, schema-aware access to a raw store.

    Args:
        schema (SchemaRegistry): Field declarations and policies.
        raw_store: RawStore or MutableMapping to borrow.

    Examples:
        >>> from objsession import SchemaRegistry, SessionView
        >>> schema = SchemaRegistry("Objsession", prefix="app")
        >>> _ = schema.field("user_id", storage="uid")
        >>> raw = {}
        >>> view = SessionView(schema, raw)
        >>> view["user_id"] is None, "app" in raw
        (True, False)
        >>> view["user_id"] = 42
        >>> raw
        {'app': {'uid': 42}}
    """

    __slots__ = ("_schema", "_raw_store")

    def __init__(self, schema: SchemaRegistry, raw_store: Any) -> None:
        self._schema = schema
        self._raw_store = as_store(raw_store)
        if schema.unknown_fields is UnknownFieldPolicy.DELETE:
            self._purge_unknown_data()

    @property
    def schema(self) -> SchemaRegistry:
        return self._schema

    @property
    def raw_store(self) -> RawStore:
        return self._raw_store

    # ------------------------------------------------------------------
    # Physical store
    # ------------------------------------------------------------------

    def _resolve_physical(self) -> RawStore | None:
        prefix = self._schema.prefix
        if prefix is None:
            return self._raw_store
        nested = self._raw_store.get(prefix)
        if nested is None:
            return None
        return as_store(nested)

    def _allocate_physical(self) -> RawStore:
        physical = self._resolve_physical()
        if physical is None:
            prefix = self._schema.prefix
            logger.debug("allocating prefix %r for schema %s", prefix, self._schema.name)
            self._raw_store.set(prefix, {})
            physical = self._resolve_physical()
            if physical is None:
                raise RuntimeError(
                    f"Store {self._raw_store!r} did not retain the map written at {prefix!r}"
                )
        return physical

    def _purge_unknown_data(self) -> None:
        physical = self._resolve_physical()
        if physical is None:
            return
        doomed = []
        for key in physical.keys():
            descriptor = self._schema.lookup_by_storage_key(key)
            if descriptor is None or descriptor.purged_with_unknown_data:
                doomed.append(key)
        if doomed:
            logger.debug(
                "purging %d unknown keys from %s: %r", len(doomed), self._schema.name, doomed
            )
            physical.delete(doomed)

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def _descriptor_for(self, name: object) -> FieldDescriptor:
        descriptor = self._schema.lookup_by_name(name)
        if descriptor is None or not descriptor.allows_access:
            folded = fold_field_name(name)
            shown = name if folded is None else folded
            raise NoSuchFieldError(
                self._schema.name, shown, self._schema.accessible_field_names()
            )
        return descriptor

    def get(self, name: str) -> Any:
        """
        Read an active field. Returns None when nothing is stored.

        Raises:
            NoSuchFieldError: If name is undeclared, retired, or inactive.
        """
        descriptor = self._descriptor_for(name)
        physical = self._resolve_physical()
        if physical is None:
            return None
        return physical.get(descriptor.storage_key)

    def set(self, name: str, value: Any) -> Any:
        """
        Write an active field and return the written value.

        Raises:
            NoSuchFieldError: If name is undeclared, retired, or inactive.
            ValueTypeViolation: If the schema's value-type policy rejects value;
                nothing is written in that case.
        """
        descriptor = self._descriptor_for(name)
        validate_value(value, self._schema.allowed_value_types)
        physical = self._allocate_physical()
        physical.set(descriptor.storage_key, value)
        return value

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def keys(self) -> list[str]:
        """Active field names whose stored value is not None."""
        return [n for n in self._schema.accessible_field_names() if self.get(n) is not None]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def to_display_string(self, abbreviate: bool = True) -> str:
        """
        Render ``<SchemaName a: 1, b: 'x'>`` over set fields, sorted by name.

        When abbreviate is true, each value repr longer than
        DISPLAY_TRUNCATE_LENGTH characters is cut and suffixed with "...".
        """
        parts = []
        for name in sorted(self._schema.accessible_field_names()):
            value = self.get(name)
            if value is None:
                continue
            text = repr(value)
            if abbreviate and len(text) > DISPLAY_TRUNCATE_LENGTH:
                text = text[:DISPLAY_TRUNCATE_LENGTH] + DISPLAY_ELLIPSIS
            parts.append(f"{name}: {text}")
        if not parts:
            return f"<{self._schema.name}>"
        return f"<{self._schema.name} {', '.join(parts)}>"

    def __repr__(self) -> str:
        return self.to_display_string(abbreviate=True)

    def __str__(self) -> str:
        return self.to_display_string(abbreviate=False)
