"""
Per-schema accessor generation.

An AccessorBinder owns one generated class per schema (the "accessor namespace").
Every active field becomes a property on that class; session classes inherit
from it, so overriding an accessor in a subclass and calling the original via
``super()`` works the usual way.

Notes:
    - Public fields bind the property under the field name.
    - Private fields bind it under ``_<name>``; the keyed path (view["name"])
      is unaffected by visibility.
    - Retired and inactive fields bind nothing.
    - Names that would shadow SessionView's own API, or another field's
      accessor (private "foo" and public "_foo" both want "_foo"), are refused.

Examples:
    >>> from objsession import SchemaRegistry, SessionView
    >>> schema = SchemaRegistry("Objsession")
    >>> _ = schema.field("user_id")
    >>> class Objsession(schema.accessors, SessionView):
    ...     @property
    ...     def user_id(self):
    ...         return "u-" + str(super().user_id)
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import InvalidOptionError
from .schema import FieldDescriptor

__all__ = [
    "RESERVED_ATTRIBUTE_NAMES",
    "AccessorBinder",
    "field_property",
]

logger = logging.getLogger(__name__)

# SessionView attributes a generated accessor must never shadow.
RESERVED_ATTRIBUTE_NAMES: frozenset[str] = frozenset(
    {
        "get",
        "set",
        "keys",
        "schema",
        "raw_store",
        "to_display_string",
        "_schema",
        "_raw_store",
        "_resolve_physical",
        "_allocate_physical",
        "_purge_unknown_data",
        "_descriptor_for",
    }
)


def field_property(name: str) -> property:
    """Build the property that routes attribute access to keyed get/set."""

    def fget(self: Any) -> Any:
        return self.get(name)

    def fset(self: Any, value: Any) -> None:
        self.set(name, value)

    return property(fget, fset, doc=f"Session field {name!r}.")


class AccessorBinder:
    """
    Generates and tracks the accessor namespace for one schema.

    Attributes:
        namespace (type): Generated class holding one property per active field.
    """

    def __init__(self, schema_name: str) -> None:
        self.namespace: type = type(
            f"{schema_name}Accessors", (), {"__module__": __name__, "__slots__": ()}
        )
        self._bound: dict[str, str] = {}

    def check(self, descriptor: FieldDescriptor) -> None:
        """
        Refuse descriptors whose accessor would clash with SessionView or another field.

        Raises:
            InvalidOptionError: If the accessor name is reserved, dunder, or already
                bound to another field.
        """
        if not descriptor.allows_access:
            return
        attr = descriptor.accessor_name
        if attr in RESERVED_ATTRIBUTE_NAMES or (attr.startswith("__") and attr.endswith("__")):
            raise InvalidOptionError(
                "name", descriptor.name, reason=f"accessor {attr!r} is reserved by SessionView"
            )
        owner = self._bound.get(attr)
        if owner is not None and owner != descriptor.name:
            raise InvalidOptionError(
                "name",
                descriptor.name,
                reason=f"accessor {attr!r} is already bound to field {owner!r}",
            )

    def bind(self, descriptor: FieldDescriptor) -> None:
        """Install the accessor for an active descriptor; no-op otherwise."""
        if not descriptor.allows_access:
            return
        attr = descriptor.accessor_name
        setattr(self.namespace, attr, field_property(descriptor.name))
        self._bound[attr] = descriptor.name
        logger.debug("bound accessor %s.%s", self.namespace.__name__, attr)

    def bound_names(self) -> tuple[str, ...]:
        """Attribute names installed so far, in binding order."""
        return tuple(self._bound)
