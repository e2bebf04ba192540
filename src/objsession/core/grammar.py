"""
Canonical objsession grammar and helpers.

Defines the closed option vocabularies used by schema declarations (field kind,
visibility, unknown-field policy, allowed value types) together with the
name-normalization rules shared by the registry and session views.

Responsibilities
- Define enums whose serialized values are lower_snake.
- Parse loose option values (enum members or case-insensitive strings) into
  enum members, raising InvalidOptionError naming the rejected value.
- Normalize field names and storage keys.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values (config files, env vars, error messages): lower_snake

2) Names vs. keys:
   - Field names are logical: trimmed and case-folded with str.casefold, so
     " FoO " and "foo" (or "STRASSE" and "straße") address the same field.
   - Storage keys are physical: trimmed only, case is preserved because the
     backing store is case-sensitive.

Examples
--------
>>> from objsession.core.grammar import FieldKind, kind_from_value, normalize_field_name
>>> kind_from_value("RETIRED") is FieldKind.RETIRED
True
>>> normalize_field_name(" FoO ")
'foo'
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import Final, TypeVar

from .errors import InvalidOptionError

__all__ = [
    "FieldKind",
    "Visibility",
    "UnknownFieldPolicy",
    "ValueTypePolicy",
    # helpers/validators
    "is_lower_snake",
    "enum_from_value",
    "kind_from_value",
    "visibility_from_value",
    "unknown_fields_from_value",
    "value_types_from_value",
    "fold_field_name",
    "normalize_field_name",
    "normalize_storage_key",
    "normalize_prefix",
    "ensure_all_enum_values_lower_snake",
]


# ============================================================================
# FIELD OPTIONS
# ============================================================================


class FieldKind(Enum):
    """
    Lifecycle state of a declared field.

    Notes:
      - active: readable and writable; binds accessors.
      - retired: reserves its name and storage key; leftover data is purged
        when unknown fields are deleted.
      - inactive: like retired, but its data is never purged.
    """

    ACTIVE = "active"
    RETIRED = "retired"
    INACTIVE = "inactive"


class Visibility(Enum):
    """
    Visibility of the named accessors generated for an active field.

    Private fields are still reachable through keyed access (view["name"]).
    """

    PUBLIC = "public"
    PRIVATE = "private"


class UnknownFieldPolicy(Enum):
    """What to do, at construction, with stored keys the schema does not know."""

    PRESERVE = "preserve"
    DELETE = "delete"


class ValueTypePolicy(Enum):
    """Which values a session may store through its fields."""

    ANYTHING = "anything"
    PRIMITIVE = "primitive"
    PRIMITIVE_AND_COMPOUND = "primitive_and_compound"


# ============================================================================
# Helpers & Validators (zero I/O)
# ============================================================================

_LOWER_SNAKE_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$")

EnumT = TypeVar("EnumT", bound=Enum)


def is_lower_snake(value: str) -> bool:
    """
    Check whether a string is lower_snake.

    Examples:
      >>> is_lower_snake("primitive_and_compound")
      True
      >>> is_lower_snake("PrimitiveAndCompound")
      False
    """
    return bool(_LOWER_SNAKE_RE.match(value or ""))


def enum_from_value(enum_cls: type[EnumT], value: object, option: str) -> EnumT:
    """
    Parse an enum member or a case-insensitive serialized value into a member.

    Args:
      enum_cls (type[Enum]): Target enum.
      value (object): Enum member or string such as "PUBLIC" / " public ".
      option (str): Option name used in the error message.

    Returns:
      Enum: The matching member.

    Raises:
      InvalidOptionError: If value is neither a member nor a known serialized value.
    """
    if isinstance(value, enum_cls):
        return value
    allowed = [m.value for m in enum_cls]
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    raise InvalidOptionError(option, value, allowed=allowed)


def kind_from_value(value: object) -> FieldKind:
    """Parse a field kind ("active" | "retired" | "inactive")."""
    return enum_from_value(FieldKind, value, "kind")


def visibility_from_value(value: object) -> Visibility:
    """Parse a visibility ("public" | "private")."""
    return enum_from_value(Visibility, value, "visibility")


def unknown_fields_from_value(value: object) -> UnknownFieldPolicy:
    """Parse an unknown-field policy ("preserve" | "delete")."""
    return enum_from_value(UnknownFieldPolicy, value, "unknown_fields")


def value_types_from_value(value: object) -> ValueTypePolicy:
    """Parse an allowed-value-types policy."""
    return enum_from_value(ValueTypePolicy, value, "allowed_value_types")


def fold_field_name(name: object) -> str | None:
    """
    Fold a field name for lookup: trim and casefold. Non-str names fold to None.

    Examples:
      >>> fold_field_name(" Straße ")
      'strasse'
    """
    if not isinstance(name, str):
        return None
    return name.strip().casefold()


def normalize_field_name(name: object) -> str:
    """
    Normalize a declared field name: fold it, and refuse non-str or blank names.

    Args:
      name (object): Candidate name; must be a str.

    Returns:
      str: Normalized name.

    Raises:
      InvalidOptionError: If name is not a str or is blank.

    Examples:
      >>> normalize_field_name("  UserId ")
      'userid'
    """
    if not isinstance(name, str):
        raise InvalidOptionError("name", name, reason="a field name must be a str")
    out = fold_field_name(name)
    if not out:
        raise InvalidOptionError("name", name, reason="a field name must not be blank")
    return out


def normalize_storage_key(key: object) -> str:
    """
    Normalize an explicit storage key: trim surrounding whitespace, keep case.

    Raises:
      InvalidOptionError: If key is not a str or is blank.
    """
    if not isinstance(key, str):
        raise InvalidOptionError("storage", key, reason="a storage key must be a str")
    out = key.strip()
    if not out:
        raise InvalidOptionError("storage", key, reason="a storage key must not be blank")
    return out


def normalize_prefix(prefix: object) -> str | None:
    """
    Normalize a namespace prefix. None clears the prefix.

    Raises:
      InvalidOptionError: If prefix is neither None nor a non-blank str.
    """
    if prefix is None:
        return None
    if not isinstance(prefix, str) or not prefix.strip():
        raise InvalidOptionError("prefix", prefix, reason="a prefix must be a str or None")
    return prefix.strip()


def ensure_all_enum_values_lower_snake(enums: Iterable[type[Enum]]) -> None:
    """
    Assert that every enum member's value is lower_snake.

    Raises:
      AssertionError: If any enum member has a non-lower_snake value.
    """
    for E in enums:
        for m in E:
            if not is_lower_snake(m.value):
                raise AssertionError(
                    f"{E.__name__}.{m.name} has non-lower_snake value: {m.value!r}"
                )
