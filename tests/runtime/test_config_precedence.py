from __future__ import annotations

from pathlib import Path

from objsession import SchemaRegistry
from objsession.core.grammar import UnknownFieldPolicy, ValueTypePolicy, Visibility
from objsession.runtime.config import SessionSettings

_ENV_KEYS = [
    "OBJSESSION_PREFIX",
    "OBJSESSION_DEFAULT_VISIBILITY",
    "OBJSESSION_UNKNOWN_FIELDS",
    "OBJSESSION_ALLOWED_VALUE_TYPES",
]


def _clear_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = SessionSettings.load()

    assert s == SessionSettings()
    assert s.prefix is None
    assert s.default_visibility == "public"
    assert s.unknown_fields == "preserve"
    assert s.allowed_value_types == "anything"


def test_settings_from_objsession_toml(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "objsession.toml").write_text(
        """
        [objsession]
        prefix = "app"
        unknown_fields = "DELETE"
        allowed_value_types = "primitive"
        """.strip()
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = SessionSettings.load()

    assert s.prefix == "app"
    assert s.unknown_fields == "delete"
    assert s.allowed_value_types == "primitive"
    assert s.default_visibility == "public"


def test_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
        [tool.objsession]
        default_visibility = "private"
        """.strip()
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    assert SessionSettings.load().default_visibility == "private"


def test_env_overrides_toml(tmp_path: Path, monkeypatch) -> None:
    toml = tmp_path / "custom.toml"
    toml.write_text('prefix = "from_toml"\nunknown_fields = "delete"\n')
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("OBJSESSION_PREFIX", "from_env")
    monkeypatch.setenv("OBJSESSION_ALLOWED_VALUE_TYPES", "primitive_and_compound")

    s = SessionSettings.load(toml)

    assert s.prefix == "from_env"
    assert s.unknown_fields == "delete"
    assert s.allowed_value_types == "primitive_and_compound"


def test_invalid_values_are_ignored(tmp_path: Path, monkeypatch) -> None:
    toml = tmp_path / "objsession.toml"
    toml.write_text('default_visibility = "sometimes"\nunknown_fields = 3\n')
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("OBJSESSION_ALLOWED_VALUE_TYPES", "everything")

    assert SessionSettings.load() == SessionSettings()


def test_unparseable_toml_falls_back_to_defaults(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "objsession.toml").write_text("this is = = not toml")
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    assert SessionSettings.load() == SessionSettings()


def test_registry_from_settings() -> None:
    s = SessionSettings(
        prefix="app",
        default_visibility="private",
        unknown_fields="delete",
        allowed_value_types="primitive",
    )
    schema = SchemaRegistry.from_settings("Objsession", s)
    assert schema.prefix == "app"
    assert schema.default_visibility is Visibility.PRIVATE
    assert schema.unknown_fields is UnknownFieldPolicy.DELETE
    assert schema.allowed_value_types is ValueTypePolicy.PRIMITIVE
