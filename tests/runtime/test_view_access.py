import pytest

from objsession import SchemaRegistry, SessionView
from objsession.core.errors import NoSuchFieldError, ValueTypeViolation


def _schema(**kwargs) -> SchemaRegistry:
    schema = SchemaRegistry("Objsession", **kwargs)
    schema.field("foo")
    schema.field("bar", storage="b")
    return schema


def test_get_and_set_round_trip_at_storage_key(recording_store) -> None:
    store = recording_store()
    view = SessionView(_schema(), store)
    assert view.set("bar", 123) == 123
    assert store.data == {"b": 123}
    assert view.get("bar") == 123
    assert view["bar"] == 123


def test_keyed_access_normalizes_names(recording_store) -> None:
    schema = SchemaRegistry("Objsession")
    schema.field(" FoO ")
    store = recording_store()
    view = SessionView(schema, store)
    view["foo"] = "x"
    assert store.data == {"foo": "x"}
    assert view.get("  FOO ") == "x"


def test_plain_dicts_are_adapted() -> None:
    raw = {"foo": 1}
    view = SessionView(_schema(), raw)
    assert view["foo"] == 1
    view["foo"] = 2
    assert raw == {"foo": 2}


def test_missing_value_reads_as_none(recording_store) -> None:
    view = SessionView(_schema(), recording_store())
    assert view.get("foo") is None


def test_unknown_field_raises_with_context(recording_store) -> None:
    view = SessionView(_schema(), recording_store())
    with pytest.raises(NoSuchFieldError) as ei:
        view.get("baz")
    assert ei.value.field_name == "baz"
    assert ei.value.accessible_field_names == ("foo", "bar")
    assert ei.value.schema_name == "Objsession"
    with pytest.raises(NoSuchFieldError):
        view["baz"] = 1


def test_non_string_name_raises_no_such_field(recording_store) -> None:
    view = SessionView(_schema(), recording_store())
    with pytest.raises(NoSuchFieldError) as ei:
        view.get(42)  # type: ignore[arg-type]
    assert ei.value.field_name == 42


@pytest.mark.parametrize("reserve", ["retire_field", "deactivate_field"])
def test_retired_and_inactive_fields_are_not_accessible(recording_store, reserve: str) -> None:
    schema = SchemaRegistry("Objsession")
    schema.field("foo")
    getattr(schema, reserve)("bar")
    store = recording_store({"bar": "old"})
    view = SessionView(schema, store)
    with pytest.raises(NoSuchFieldError) as ei:
        view.get("bar")
    assert ei.value.accessible_field_names == ("foo",)
    with pytest.raises(NoSuchFieldError):
        view.set("bar", 1)
    assert store.data == {"bar": "old"}
    assert not hasattr(view, "bar")


def test_value_type_violation_writes_nothing(recording_store) -> None:
    schema = _schema(allowed_value_types="primitive")
    store = recording_store()
    view = SessionView(schema, store)
    with pytest.raises(ValueTypeViolation) as ei:
        view.set("foo", [1, 2])
    assert ei.value.policy == "primitive"
    assert store.sets() == []
    assert store.data == {}


def test_compound_policy_allows_nested_values(recording_store) -> None:
    store = recording_store()
    view = SessionView(_schema(allowed_value_types="primitive_and_compound"), store)
    view["foo"] = {"a": [1, {"b": None}]}
    assert store.data["foo"] == {"a": [1, {"b": None}]}
    with pytest.raises(ValueTypeViolation):
        view["foo"] = {"a": [1, {"b": object()}]}
    assert store.data["foo"] == {"a": [1, {"b": None}]}


def test_every_get_reads_the_store(recording_store) -> None:
    store = recording_store({"foo": 1})
    view = SessionView(_schema(), store)
    view.get("foo")
    store.data["foo"] = 2
    assert view.get("foo") == 2
    assert store.calls.count(("get", "foo")) == 2


def test_keys_lists_set_fields_only(recording_store) -> None:
    schema = _schema()
    schema.field("secret", visibility="private")
    store = recording_store({"foo": 1, "b": None, "secret": "s"})
    view = SessionView(schema, store)
    assert view.keys() == ["foo", "secret"]


def test_missing_field_error_reports_the_casefolded_name() -> None:
    view = SessionView(_schema(), {})
    with pytest.raises(NoSuchFieldError) as ei:
        view.get(" STRASSE ")
    assert ei.value.field_name == "strasse"
