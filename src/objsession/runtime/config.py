"""
Configuration for objsession schemas.

Defines SessionSettings, a frozen dataclass carrying the schema-wide policies a
deployment may want to set outside code (prefix, default visibility, unknown
field handling, allowed value types). Defaults are sourced from
objsession.core.constants (the single source of truth).

Source of truth
- objsession.core.constants.DEFAULT_* policies
- Vocabularies from objsession.core.grammar

Notes
- Loaders apply precedence: env > TOML > defaults.
- Values that do not parse are ignored and the previous value is kept, so a
  typo in deployment config never prevents startup; declaring the same policy
  in code raises instead.
- Use SchemaRegistry.from_settings(name, settings) to build a registry.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from objsession.core.constants import (
    DEFAULT_ALLOWED_VALUE_TYPES,
    DEFAULT_UNKNOWN_FIELDS,
    DEFAULT_VISIBILITY,
)
from objsession.core.grammar import UnknownFieldPolicy, ValueTypePolicy, Visibility

VisibilityName = Literal["public", "private"]
UnknownFieldsName = Literal["preserve", "delete"]
ValueTypesName = Literal["anything", "primitive", "primitive_and_compound"]

__all__ = ["SessionSettings"]


@dataclass(frozen=True)
class SessionSettings:
    """
    Schema-wide policies loadable from the environment or TOML.

    Attributes:
        prefix (str | None): Namespace key for field storage; None stores at top level.
        default_visibility (Literal["public","private"]): Visibility for fields
            declared without one.
        unknown_fields (Literal["preserve","delete"]): Purge policy at construction.
        allowed_value_types (Literal["anything","primitive","primitive_and_compound"]):
            Write-time value policy.

    Examples:
        >>> from objsession.runtime.config import SessionSettings
        >>> SessionSettings(unknown_fields="delete")  # doctest: +ELLIPSIS
        SessionSettings(...)
    """

    prefix: str | None = None
    default_visibility: VisibilityName = DEFAULT_VISIBILITY.value
    unknown_fields: UnknownFieldsName = DEFAULT_UNKNOWN_FIELDS.value
    allowed_value_types: ValueTypesName = DEFAULT_ALLOWED_VALUE_TYPES.value

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: SessionSettings, cfg: dict[str, Any] | None) -> SessionSettings:
        """Apply a loose config mapping onto SessionSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _choice(val: Any, allowed: set[str]) -> str | None:
            if isinstance(val, str):
                lo = val.strip().lower()
                if lo in allowed:
                    return lo
            return None

        # prefix ("" clears it)
        if "prefix" in cfg:
            v = cfg["prefix"]
            if v is None or (isinstance(v, str) and not v.strip()):
                s = replace(s, prefix=None)
            elif isinstance(v, str):
                s = replace(s, prefix=v.strip())

        if "default_visibility" in cfg:
            vis = _choice(cfg["default_visibility"], {m.value for m in Visibility})
            if vis is not None:
                s = replace(s, default_visibility=vis)  # type: ignore[arg-type]

        if "unknown_fields" in cfg:
            uf = _choice(cfg["unknown_fields"], {m.value for m in UnknownFieldPolicy})
            if uf is not None:
                s = replace(s, unknown_fields=uf)  # type: ignore[arg-type]

        if "allowed_value_types" in cfg:
            vt = _choice(cfg["allowed_value_types"], {m.value for m in ValueTypePolicy})
            if vt is not None:
                s = replace(s, allowed_value_types=vt)  # type: ignore[arg-type]

        return s

    @classmethod
    def from_env(
        cls, base: SessionSettings | None = None, prefix: str = "OBJSESSION_"
    ) -> SessionSettings:
        """
        Build SessionSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - OBJSESSION_PREFIX
            - OBJSESSION_DEFAULT_VISIBILITY ("public" | "private")
            - OBJSESSION_UNKNOWN_FIELDS ("preserve" | "delete")
            - OBJSESSION_ALLOWED_VALUE_TYPES ("anything" | "primitive" | "primitive_and_compound")
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("prefix", "default_visibility", "unknown_fields", "allowed_value_types"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> SessionSettings:
        """
        Build SessionSettings from a TOML file.

        Search order when `path` is None:
            1) ./objsession.toml (with either a top-level [objsession] table or direct keys)
            2) ./pyproject.toml under [tool.objsession]

        Returns defaults if no file is present or the file does not parse.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "objsession.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("objsession") if isinstance(tool, dict) else None
            elif isinstance(data.get("objsession"), dict):
                cfg = data["objsession"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> SessionSettings:
        """
        Load SessionSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (objsession.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
