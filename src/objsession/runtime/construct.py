"""
Construction boundary used by host integrations.

A host (web framework hook, job runner, test) owns the raw store and calls
construct(schema, raw_store) once per unit of work. Resolving which schema to
use, and caching the resulting view per request, stay with the host.

Notes:
    - The first construct() seals the schema; later declarations fail with
      SchemaSealedError.
    - When no class was bound with SchemaRegistry.bind, a default session class
      named after the schema is generated from the schema's accessors
      and cached on the schema.
"""

from __future__ import annotations

from typing import Any

from objsession.core.errors import ConstructionFailed, InvalidSessionObject
from objsession.core.registry import SchemaRegistry

from .view import SessionView

__all__ = [
    "construct",
    "default_session_class",
]


def default_session_class(schema: SchemaRegistry) -> type:
    """Generate ``class <schema.name>(schema.accessors, SessionView)``."""
    return type(
        schema.name,
        (schema.accessors, SessionView),
        {"__module__": __name__, "__slots__": ()},
    )


def construct(schema: SchemaRegistry, raw_store: Any) -> SessionView:
    """
    Build the session view for one unit of work.

    Args:
        schema (SchemaRegistry): Schema to construct against.
        raw_store: RawStore or MutableMapping owned by the caller.

    Returns:
        SessionView: Instance of the schema's session class, purged and ready.

    Raises:
        ConstructionFailed: The session class raised while being instantiated
            (the original exception is chained).
        InvalidSessionObject: The session class returned something that is not
            a SessionView.

    Examples:
        >>> from objsession import SchemaRegistry, construct
        >>> schema = SchemaRegistry("Objsession")
        >>> _ = schema.field("theme")
        >>> view = construct(schema, {"theme": "dark"})
        >>> view.theme, type(view).__name__
        ('dark', 'Objsession')
    """
    cls = schema.resolve_session_class(default_session_class)
    schema.seal()
    try:
        out = cls(schema, raw_store)
    except Exception as exc:
        raise ConstructionFailed(cls, exc) from exc
    if not isinstance(out, SessionView):
        raise InvalidSessionObject(cls, out)
    return out
