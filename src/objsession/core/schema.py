"""
Field option model and frozen field descriptors.

Responsibilities
- FieldOptions: the typed per-field option structure (kind, visibility, storage),
  validated with pydantic. Unknown keys are forbidden.
- FieldDescriptor: the immutable, registry-owned description of one declared field.
- parse_field_options: turn a loose option mapping into FieldOptions, surfacing
  any failure as InvalidOptionError naming the rejected value.

Style
- Zero-IO (stdlib + pydantic only).
- Validators normalize enum-like strings via grammar helpers.

References
- grammar: src/objsession/core/grammar.py (enums, normalization helpers)
- errors: src/objsession/core/errors.py (InvalidOptionError)
- tests: tests/core/test_schema_options.py
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import InvalidOptionError
from .grammar import (
    FieldKind,
    Visibility,
    kind_from_value,
    normalize_storage_key,
    visibility_from_value,
)

__all__ = [
    "FieldOptions",
    "FieldDescriptor",
    "parse_field_options",
]


class FieldOptions(BaseModel):
    """
    Options accepted when declaring a field.

    Attributes:
        kind (FieldKind): Required; active, retired, or inactive.
        visibility (Visibility | None): Accessor visibility; None means "use the
            registry's default visibility at declaration time".
        storage (str | None): Storage key; None means "use the field name".

    Raises:
        pydantic.ValidationError: On unknown keys or invalid values. Use
            parse_field_options to get InvalidOptionError instead.

    Examples:
        >>> from objsession.core.schema import FieldOptions
        >>> FieldOptions(kind="ACTIVE", storage=" uid ").storage
        'uid'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: FieldKind
    visibility: Visibility | None = None
    storage: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, v: Any) -> FieldKind:
        return kind_from_value(v)

    @field_validator("visibility", mode="before")
    @classmethod
    def _parse_visibility(cls, v: Any) -> Visibility | None:
        if v is None:
            return None
        return visibility_from_value(v)

    @field_validator("storage", mode="before")
    @classmethod
    def _parse_storage(cls, v: Any) -> str | None:
        if v is None:
            return None
        return normalize_storage_key(v)


def parse_field_options(options: Mapping[str, Any]) -> FieldOptions:
    """
    Validate a loose option mapping into FieldOptions.

    Args:
        options (Mapping[str, Any]): Keys among {"kind", "visibility", "storage"}.

    Returns:
        FieldOptions: Validated options.

    Raises:
        InvalidOptionError: For unknown keys, a missing kind, or invalid values.
    """
    try:
        return FieldOptions(**dict(options))
    except ValidationError as exc:
        err = exc.errors()[0]
        cause = err.get("ctx", {}).get("error")
        if isinstance(cause, InvalidOptionError):
            raise cause from exc
        loc = ".".join(str(p) for p in err.get("loc", ())) or "options"
        if err.get("type") == "extra_forbidden":
            raise InvalidOptionError(
                "options", loc, allowed=sorted(FieldOptions.model_fields), reason="unknown option"
            ) from exc
        if err.get("type") == "missing":
            raise InvalidOptionError(loc, None, reason="required") from exc
        raise InvalidOptionError(loc, err.get("input"), reason=err.get("msg")) from exc


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Frozen description of one declared field.

    Attributes:
        schema_name (str): Name of the owning schema.
        name (str): Normalized field name.
        storage_key (str): Key under which the value lives in the physical store.
        kind (FieldKind): Lifecycle state.
        visibility (Visibility): Accessor visibility, resolved at declaration time.

    Notes:
        - Equality compares all five attributes; redeclaring an equal descriptor
          is a no-op.
        - Only active descriptors allow access to data; only retired descriptors
          have their data purged under the delete policy.
    """

    schema_name: str
    name: str
    storage_key: str
    kind: FieldKind
    visibility: Visibility

    @property
    def allows_access(self) -> bool:
        return self.kind is FieldKind.ACTIVE

    @property
    def purged_with_unknown_data(self) -> bool:
        return self.kind is FieldKind.RETIRED

    @property
    def accessor_name(self) -> str:
        """Attribute name of the generated property (underscored when private)."""
        if self.visibility is Visibility.PRIVATE:
            return "_" + self.name
        return self.name
