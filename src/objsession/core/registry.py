"""
SchemaRegistry: the per-session-type set of field declarations and policies.

Responsibilities
- Declare fields (active, retired, inactive) and enforce global uniqueness of
  field names and storage keys across every kind.
- Hold the schema-wide policies: prefix, default visibility, unknown-field
  policy, and allowed value types.
- Bind accessors for active fields through an AccessorBinder.
- Seal itself on first construction so the schema is immutable at use time.

Lifecycle
- Build once, at import/startup, before any session is constructed.
- Registries are single-writer: mutating one from several threads is the
  caller's responsibility to prevent.

Examples
--------
>>> from objsession.core.registry import SchemaRegistry
>>> schema = SchemaRegistry("Objsession", unknown_fields="delete")
>>> _ = schema.field("user_id", storage="uid")
>>> _ = schema.retire_field("cart")
>>> schema.accessible_field_names()
('user_id',)
>>> schema.lookup_by_storage_key("uid").name
'user_id'
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .accessors import AccessorBinder
from .constants import DEFAULT_ALLOWED_VALUE_TYPES, DEFAULT_UNKNOWN_FIELDS, DEFAULT_VISIBILITY
from .errors import (
    DuplicateFieldNameError,
    DuplicateFieldStorageNameError,
    InvalidOptionError,
    SchemaSealedError,
)
from .grammar import (
    FieldKind,
    UnknownFieldPolicy,
    ValueTypePolicy,
    Visibility,
    fold_field_name,
    normalize_field_name,
    normalize_prefix,
    unknown_fields_from_value,
    value_types_from_value,
    visibility_from_value,
)
from .schema import FieldDescriptor, parse_field_options

if TYPE_CHECKING:
    from objsession.runtime.config import SessionSettings

__all__ = ["SchemaRegistry"]

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Field declarations and policies for one logical session type.

    Args:
        name (str): Schema name; used in error messages, display strings, and as
            the name of the generated default session class.
        prefix (str | None): Optional namespace key for all field storage.
        default_visibility: Visibility applied to fields declared without one.
        unknown_fields: "preserve" (default) or "delete".
        allowed_value_types: "anything" (default), "primitive", or
            "primitive_and_compound".

    Raises:
        InvalidOptionError: If name is blank or a policy value is invalid.
    """

    def __init__(
        self,
        name: str,
        *,
        prefix: str | None = None,
        default_visibility: Visibility | str = DEFAULT_VISIBILITY,
        unknown_fields: UnknownFieldPolicy | str = DEFAULT_UNKNOWN_FIELDS,
        allowed_value_types: ValueTypePolicy | str = DEFAULT_ALLOWED_VALUE_TYPES,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise InvalidOptionError("schema name", name, reason="must be a non-blank str")
        self.name = name.strip()
        self._by_name: dict[str, FieldDescriptor] = {}
        self._by_storage_key: dict[str, FieldDescriptor] = {}
        self._binder = AccessorBinder(self.name)
        self._session_class: type | None = None
        self._sealed = False

        self._prefix: str | None = None
        self._default_visibility = DEFAULT_VISIBILITY
        self._unknown_fields = DEFAULT_UNKNOWN_FIELDS
        self._allowed_value_types = DEFAULT_ALLOWED_VALUE_TYPES
        self.set_prefix(prefix)
        self.set_default_visibility(default_visibility)
        self.set_unknown_fields(unknown_fields)
        self.set_allowed_value_types(allowed_value_types)

    @classmethod
    def from_settings(cls, name: str, settings: SessionSettings) -> SchemaRegistry:
        """Build an empty registry whose policies come from a SessionSettings."""
        return cls(
            name,
            prefix=settings.prefix,
            default_visibility=settings.default_visibility,
            unknown_fields=settings.unknown_fields,
            allowed_value_types=settings.allowed_value_types,
        )

    def __repr__(self) -> str:
        return f"SchemaRegistry({self.name!r}, fields={list(self._by_name)!r})"

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    @property
    def prefix(self) -> str | None:
        return self._prefix

    @property
    def default_visibility(self) -> Visibility:
        return self._default_visibility

    @property
    def unknown_fields(self) -> UnknownFieldPolicy:
        return self._unknown_fields

    @property
    def allowed_value_types(self) -> ValueTypePolicy:
        return self._allowed_value_types

    def set_prefix(self, value: str | None) -> None:
        """Set (or, with None, clear) the namespace prefix. Last write wins."""
        self._check_open("set prefix")
        self._prefix = normalize_prefix(value)

    def set_default_visibility(self, value: Visibility | str) -> None:
        """Set the visibility captured by fields declared after this call."""
        self._check_open("set default visibility")
        self._default_visibility = visibility_from_value(value)

    def set_unknown_fields(self, value: UnknownFieldPolicy | str) -> None:
        self._check_open("set unknown-fields policy")
        self._unknown_fields = unknown_fields_from_value(value)

    def set_allowed_value_types(self, value: ValueTypePolicy | str) -> None:
        self._check_open("set allowed value types")
        self._allowed_value_types = value_types_from_value(value)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def declare_field(self, name: object, **options: Any) -> FieldDescriptor:
        """
        Declare a field.

        Args:
            name (str): Field name; trimmed and casefolded.
            **options: ``kind`` (required), ``visibility``, ``storage``.

        Returns:
            FieldDescriptor: The new descriptor, or the existing one when an
            identical declaration is repeated.

        Raises:
            InvalidOptionError: Bad name, unknown option, or invalid option value.
            DuplicateFieldNameError: Name already declared with other attributes.
            DuplicateFieldStorageNameError: Storage key owned by another field.
            SchemaSealedError: The registry has already been used.
        """
        self._check_open("declare fields")
        normalized = normalize_field_name(name)
        opts = parse_field_options(options)
        descriptor = FieldDescriptor(
            schema_name=self.name,
            name=normalized,
            storage_key=opts.storage if opts.storage is not None else normalized,
            kind=opts.kind,
            visibility=opts.visibility or self._default_visibility,
        )

        existing = self._by_name.get(descriptor.name)
        if existing is not None:
            if existing == descriptor:
                return existing
            raise DuplicateFieldNameError(self.name, descriptor.name)

        owner = self._by_storage_key.get(descriptor.storage_key)
        if owner is not None:
            raise DuplicateFieldStorageNameError(
                self.name, owner.name, descriptor.name, descriptor.storage_key
            )

        self._binder.check(descriptor)
        self._by_name[descriptor.name] = descriptor
        self._by_storage_key[descriptor.storage_key] = descriptor
        self._binder.bind(descriptor)
        logger.debug(
            "declared %s field %s.%s (storage=%r, visibility=%s)",
            descriptor.kind.value,
            self.name,
            descriptor.name,
            descriptor.storage_key,
            descriptor.visibility.value,
        )
        return descriptor

    def _declare_kind(
        self, kind: FieldKind, name: object, options: dict[str, Any]
    ) -> FieldDescriptor:
        if "kind" in options:
            raise InvalidOptionError(
                "kind", options["kind"], reason=f"already fixed to {kind.value!r} by this call"
            )
        return self.declare_field(name, kind=kind, **options)

    def field(self, name: object, **options: Any) -> FieldDescriptor:
        """Declare an active field."""
        return self._declare_kind(FieldKind.ACTIVE, name, options)

    def retire_field(self, name: object, **options: Any) -> FieldDescriptor:
        """Declare a retired field: name and key reserved, leftover data purgeable."""
        return self._declare_kind(FieldKind.RETIRED, name, options)

    def deactivate_field(self, name: object, **options: Any) -> FieldDescriptor:
        """Declare an inactive field: name and key reserved, data kept."""
        return self._declare_kind(FieldKind.INACTIVE, name, options)

    # ------------------------------------------------------------------
    # Lookup / introspection
    # ------------------------------------------------------------------

    def lookup_by_name(self, name: object) -> FieldDescriptor | None:
        """Descriptor for a (not yet normalized) name, or None."""
        folded = fold_field_name(name)
        if folded is None:
            return None
        return self._by_name.get(folded)

    def lookup_by_storage_key(self, key: object) -> FieldDescriptor | None:
        """Descriptor owning a storage key (compared by str form), or None."""
        return self._by_storage_key.get(key if isinstance(key, str) else str(key))

    def accessible_field_names(self) -> tuple[str, ...]:
        """Names of active fields, in declaration order."""
        return tuple(d.name for d in self._by_name.values() if d.allows_access)

    def fields(self) -> tuple[FieldDescriptor, ...]:
        """All descriptors, in declaration order."""
        return tuple(self._by_name.values())

    def describe(self) -> dict[str, Any]:
        """Plain-dict summary of policies and fields."""
        return {
            "name": self.name,
            "prefix": self._prefix,
            "default_visibility": self._default_visibility.value,
            "unknown_fields": self._unknown_fields.value,
            "allowed_value_types": self._allowed_value_types.value,
            "fields": [
                {
                    "name": d.name,
                    "storage_key": d.storage_key,
                    "kind": d.kind.value,
                    "visibility": d.visibility.value,
                }
                for d in self._by_name.values()
            ],
        }

    def __contains__(self, name: object) -> bool:
        return self.lookup_by_name(name) is not None

    def __len__(self) -> int:
        return len(self._by_name)

    # ------------------------------------------------------------------
    # Session classes
    # ------------------------------------------------------------------

    @property
    def accessors(self) -> type:
        """Generated class carrying one property per active field."""
        return self._binder.namespace

    @property
    def session_class(self) -> type | None:
        """Session class bound with bind(), if any."""
        return self._session_class

    def bind(self, cls: type) -> type:
        """
        Register the class construct() instantiates for this schema.

        Usable as a class decorator. The class is called as ``cls(schema, raw_store)``.

        Raises:
            InvalidOptionError: If cls is not a class.
        """
        self._check_open("bind a session class")
        if not isinstance(cls, type):
            raise InvalidOptionError("session_class", cls, reason="must be a class")
        self._session_class = cls
        return cls

    def resolve_session_class(self, factory: Callable[[SchemaRegistry], type]) -> type:
        """
        Session class for construct(): the bound one, else ``factory(self)``.

        The generated class is cached on the registry, sealed or not, so every
        construct() of one schema yields instances of the same class.
        """
        if self._session_class is None:
            self._session_class = factory(self)
        return self._session_class

    # ------------------------------------------------------------------
    # Mutation window
    # ------------------------------------------------------------------

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Close the mutation window. Idempotent."""
        if not self._sealed:
            logger.debug("sealing schema %s with %d fields", self.name, len(self._by_name))
        self._sealed = True

    def _check_open(self, operation: str) -> None:
        if self._sealed:
            raise SchemaSealedError(self.name, operation)
