"""
Write-time value-type validation.

Each ValueTypePolicy maps to a validator that either returns silently or raises
ValueTypeViolation naming the top-level value being assigned and the policy.

Policies
- anything: accepts every value.
- primitive: None, bool, numbers (numbers.Number), str, Enum members (symbolic
  atoms), and datetime/date/time timestamps.
- primitive_and_compound: the primitive set plus lists, tuples, and mappings whose
  elements (for mappings: keys and values) recursively satisfy the same rule.

Notes
- Validation is depth-first and stops at the first offending leaf; the error is
  always reported against the top-level value.
- Containers are tracked by identity along the current path, so a cyclic value
  is rejected rather than recursing forever.
- Zero-IO, stdlib only.
"""

from __future__ import annotations

import numbers
from collections.abc import Callable, Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from .errors import ValueTypeViolation
from .grammar import ValueTypePolicy

__all__ = [
    "PRIMITIVE_TYPES",
    "is_primitive",
    "is_primitive_or_compound",
    "validate_value",
    "validator_for",
]

PRIMITIVE_TYPES: tuple[type, ...] = (bool, numbers.Number, str, Enum, datetime, date, time)


def is_primitive(value: Any) -> bool:
    """
    Whether value is a scalar the primitive policy accepts.

    Examples:
        >>> is_primitive(None), is_primitive(3.5), is_primitive([1])
        (True, True, False)
    """
    return value is None or isinstance(value, PRIMITIVE_TYPES)


def is_primitive_or_compound(value: Any, _path: frozenset[int] = frozenset()) -> bool:
    """
    Whether value is a primitive, or a list/tuple/mapping built only from them.

    Examples:
        >>> is_primitive_or_compound({"a": [1, (2, "x")], 3: None})
        True
        >>> is_primitive_or_compound([1, object()])
        False
    """
    if is_primitive(value):
        return True
    if not isinstance(value, (list, tuple, Mapping)):
        return False
    if id(value) in _path:
        return False
    path = _path | {id(value)}
    if isinstance(value, Mapping):
        return all(
            is_primitive_or_compound(k, path) and is_primitive_or_compound(v, path)
            for k, v in value.items()
        )
    return all(is_primitive_or_compound(item, path) for item in value)


def _accept_anything(value: Any) -> None:
    return None


def _require_primitive(value: Any) -> None:
    if not is_primitive(value):
        raise ValueTypeViolation(value, ValueTypePolicy.PRIMITIVE.value)


def _require_primitive_or_compound(value: Any) -> None:
    if not is_primitive_or_compound(value):
        raise ValueTypeViolation(value, ValueTypePolicy.PRIMITIVE_AND_COMPOUND.value)


_VALIDATORS: dict[ValueTypePolicy, Callable[[Any], None]] = {
    ValueTypePolicy.ANYTHING: _accept_anything,
    ValueTypePolicy.PRIMITIVE: _require_primitive,
    ValueTypePolicy.PRIMITIVE_AND_COMPOUND: _require_primitive_or_compound,
}


def validator_for(policy: ValueTypePolicy) -> Callable[[Any], None]:
    """Return the validator callable for a policy."""
    return _VALIDATORS[policy]


def validate_value(value: Any, policy: ValueTypePolicy) -> None:
    """
    Validate value against policy.

    Raises:
        ValueTypeViolation: If the policy rejects the value.
    """
    validator_for(policy)(value)
