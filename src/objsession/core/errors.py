"""
Exception types raised by field declaration, session access, and construction.

Provides typed exceptions for objsession failures:
- Declaration-time errors (InvalidOptionError, DuplicateFieldNameError,
  DuplicateFieldStorageNameError, SchemaSealedError) signal a programming error
  in a schema definition and always propagate.
- Access-time errors (NoSuchFieldError, ValueTypeViolation) are caller errors
  and carry enough context to diagnose without re-running the operation.
- Construction errors (ConstructionFailed, InvalidSessionObject) are raised by
  objsession.runtime.construct.

Notes:
    - Every error derives from ObjsessionError and from the closest builtin
      (ValueError, LookupError, RuntimeError, TypeError) so callers can catch
      either family.
    - This module uses only the Python standard library and has no side effects.

Examples:
    >>> from objsession.core.errors import InvalidOptionError
    >>> try:
    ...     raise InvalidOptionError("visibility", 12345, allowed=["private", "public"])
    ... except ValueError as e:
    ...     msg = str(e)
    >>> "12345" in msg
    True
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

__all__ = [
    "ObjsessionError",
    "NoSuchFieldError",
    "DuplicateFieldNameError",
    "DuplicateFieldStorageNameError",
    "InvalidOptionError",
    "ValueTypeViolation",
    "ConstructionFailed",
    "InvalidSessionObject",
    "SchemaSealedError",
]


class ObjsessionError(Exception):
    """Base class for all objsession errors."""


class NoSuchFieldError(ObjsessionError, LookupError):
    """
    Raised when get/set addresses a name that is undeclared or not active.

    Attributes:
        schema_name (str): Name of the schema that was addressed.
        field_name (object): The (normalized, when possible) name requested.
        accessible_field_names (tuple[str, ...]): Active field names, in
            declaration order.
    """

    def __init__(
        self, schema_name: str, field_name: object, accessible_field_names: Iterable[str]
    ) -> None:
        self.schema_name = schema_name
        self.field_name = field_name
        self.accessible_field_names = tuple(accessible_field_names)
        super().__init__(
            f"Schema {schema_name} has no field named {field_name!r}; "
            f"its fields are: {list(self.accessible_field_names)!r}"
        )


class DuplicateFieldNameError(ObjsessionError, ValueError):
    """Raised when a name is redeclared with different attributes."""

    def __init__(self, schema_name: str, field_name: str) -> None:
        self.schema_name = schema_name
        self.field_name = field_name
        super().__init__(
            f"Schema {schema_name} already has one field named {field_name!r}; "
            "you can't define another."
        )


class DuplicateFieldStorageNameError(ObjsessionError, ValueError):
    """Raised when a storage key is already bound to a different field name."""

    def __init__(
        self,
        schema_name: str,
        original_field_name: str,
        new_field_name: str,
        storage_key: str,
    ) -> None:
        self.schema_name = schema_name
        self.original_field_name = original_field_name
        self.new_field_name = new_field_name
        self.storage_key = storage_key
        super().__init__(
            f"Schema {schema_name} already has a field, {original_field_name!r}, with "
            f"storage key {storage_key!r}; you can't define field {new_field_name!r} "
            "with that same storage key."
        )


class InvalidOptionError(ObjsessionError, ValueError):
    """
    Raised for a malformed option or setting at declaration/configuration time.

    Attributes:
        option (str): Option or setting name (e.g. "visibility", "prefix").
        value (Any): The rejected value.
        allowed (tuple[str, ...]): Accepted values, when the option is an enum.
    """

    def __init__(
        self,
        option: str,
        value: Any,
        *,
        allowed: Iterable[str] = (),
        reason: str | None = None,
    ) -> None:
        self.option = option
        self.value = value
        self.allowed = tuple(allowed)
        msg = f"Invalid value for {option}: {value!r}"
        if self.allowed:
            msg += f"; must be one of {list(self.allowed)!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ValueTypeViolation(ObjsessionError, ValueError):
    """
    Raised when a write would store a value the schema's policy does not allow.

    Attributes:
        value (Any): Top-level value being assigned.
        policy (str): Serialized allowed-value-types policy in effect.
    """

    def __init__(self, value: Any, policy: str) -> None:
        self.value = value
        self.policy = policy
        super().__init__(
            f"Value {value!r} cannot be stored: allowed value types are {policy!r}"
        )


class ConstructionFailed(ObjsessionError, RuntimeError):
    """
    Raised when the session class's constructor raised.

    The original exception is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, session_class: type, cause: BaseException) -> None:
        self.session_class = session_class
        self.cause = cause
        super().__init__(
            "When objsession went to create a new instance of the session class, it got "
            f"an exception from {session_class.__qualname__}(...): "
            f"({type(cause).__name__}) {cause}"
        )


class InvalidSessionObject(ObjsessionError, TypeError):
    """Raised when construction returned something that is not a SessionView."""

    def __init__(self, session_class: type, obj: object) -> None:
        self.session_class = session_class
        self.obj = obj
        super().__init__(
            f"Session class {session_class.__qualname__} produced {obj!r}, which is not "
            "an objsession.runtime.view.SessionView"
        )


class SchemaSealedError(ObjsessionError, RuntimeError):
    """Raised when a schema is changed after its first session was constructed."""

    def __init__(self, schema_name: str, operation: str) -> None:
        self.schema_name = schema_name
        self.operation = operation
        super().__init__(
            f"Schema {schema_name} is sealed (a session was already constructed); "
            f"cannot {operation}"
        )
