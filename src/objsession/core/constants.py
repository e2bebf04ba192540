"""
objsession defaults.

Defines the default policies applied to a new SchemaRegistry and the display
rendering limits used by SessionView.to_display_string. This module is zero-IO
and uses only the Python standard library.

Notes:
    - objsession.runtime.config.SessionSettings takes its defaults from here.
    - Changing DEFAULT_* values changes behavior for every schema that does not
      configure the setting explicitly.
"""

from __future__ import annotations

from .grammar import UnknownFieldPolicy, ValueTypePolicy, Visibility

__all__ = [
    "DEFAULT_VISIBILITY",
    "DEFAULT_UNKNOWN_FIELDS",
    "DEFAULT_ALLOWED_VALUE_TYPES",
    "DISPLAY_TRUNCATE_LENGTH",
    "DISPLAY_ELLIPSIS",
]

DEFAULT_VISIBILITY: Visibility = Visibility.PUBLIC

DEFAULT_UNKNOWN_FIELDS: UnknownFieldPolicy = UnknownFieldPolicy.PRESERVE

DEFAULT_ALLOWED_VALUE_TYPES: ValueTypePolicy = ValueTypePolicy.ANYTHING

# Abbreviated display keeps at most this many characters of each value repr.
DISPLAY_TRUNCATE_LENGTH: int = 40

DISPLAY_ELLIPSIS: str = "..."
