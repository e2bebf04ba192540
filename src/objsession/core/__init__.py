"""
Core package aggregator for objsession contracts (grammar, field options and
descriptors, value validation, registry, accessors, errors).

## Contracts (single source of truth)
- Grammar: option enums (field kind, visibility, unknown-field policy, value
  types) and name normalization.
- Schema: typed FieldOptions (pydantic) and frozen FieldDescriptor.
- Validate: write-time value-type policies.
- Registry: SchemaRegistry (declarations, uniqueness rules, policies, sealing).
- Accessors: per-schema generated properties for active fields.
- Errors: the objsession error taxonomy.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Field names are trimmed and case-folded; storage keys are trimmed only.

## Downstream usage
- objsession.runtime: SessionView reads the registry for every get/set and for
  the construction-time purge; construct() seals the registry.

## Examples
```python
from objsession.core.registry import SchemaRegistry
schema = SchemaRegistry("Objsession", allowed_value_types="primitive")
schema.field("user_id", storage="uid")
schema.retire_field("legacy_cart")
schema.accessible_field_names()  # ('user_id',)
```
"""
