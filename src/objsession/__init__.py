"""
objsession: typed, policy-checked fields over an arbitrary key-value store.

Declare a schema once at startup, then construct a SessionView per unit of work
(typically one web request) over the host's session store.

## Public API
- SchemaRegistry: field declarations and schema-wide policies.
- SessionView / construct: per-request guarded access.
- SessionSettings: env/TOML configuration for schema policies.
- FieldKind, Visibility, UnknownFieldPolicy, ValueTypePolicy: option vocabularies.
- Errors: see objsession.core.errors.

## Examples
```python
from objsession import SchemaRegistry, SessionView, construct

schema = SchemaRegistry("Objsession", unknown_fields="delete")
schema.field("user_id", storage="uid")
schema.field("csrf_seed", visibility="private")
schema.deactivate_field("beta_flags")

@schema.bind
class Objsession(schema.accessors, SessionView):
    def rotate_csrf(self, seed):
        self._csrf_seed = seed

view = construct(schema, {"uid": 7, "stale": 1})
view.user_id  # 7 ("stale" was purged)
```
"""

from __future__ import annotations

from .core.errors import (
    ConstructionFailed,
    DuplicateFieldNameError,
    DuplicateFieldStorageNameError,
    InvalidOptionError,
    InvalidSessionObject,
    NoSuchFieldError,
    ObjsessionError,
    SchemaSealedError,
    ValueTypeViolation,
)
from .core.grammar import FieldKind, UnknownFieldPolicy, ValueTypePolicy, Visibility
from .core.registry import SchemaRegistry
from .core.schema import FieldDescriptor, FieldOptions
from .runtime import MappingStore, SessionSettings, SessionView, construct

__all__ = [
    "SchemaRegistry",
    "FieldDescriptor",
    "FieldOptions",
    "SessionView",
    "SessionSettings",
    "MappingStore",
    "construct",
    "FieldKind",
    "Visibility",
    "UnknownFieldPolicy",
    "ValueTypePolicy",
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
