"""
objsession.runtime: session views over host-owned key-value stores.

## Responsibilities
- Adapt host session objects (mappings or RawStore implementations) to the store protocol.
- Provide SessionView: prefix resolution, construction-time purge, guarded get/set, display.
- Provide construct(), the boundary host integrations call once per unit of work.
- Load schema-wide settings from the environment and TOML.

## Import DAG discipline
- Depends only on stdlib and objsession.core.*.
- objsession.core never imports runtime modules at import time.

## Examples
```python
from objsession import SchemaRegistry, construct

schema = SchemaRegistry("Objsession", prefix="app", unknown_fields="delete")
schema.field("user_id")
view = construct(schema, request.session)  # doctest: +SKIP
view.user_id = 42  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import SessionSettings
from .construct import construct, default_session_class
from .stores import MappingStore, as_store
from .view import SessionView

__all__ = [
    "SessionSettings",
    "SessionView",
    "MappingStore",
    "as_store",
    "construct",
    "default_session_class",
]
