from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

import pytest

from objsession.core.errors import ValueTypeViolation
from objsession.core.grammar import ValueTypePolicy
from objsession.core.validate import is_primitive, is_primitive_or_compound, validate_value


class Color(Enum):
    RED = "red"


class Opaque:
    pass


SCALARS = [
    "foobar",
    134832.32,
    7,
    Decimal("1.5"),
    True,
    False,
    None,
    Color.RED,
    datetime(2025, 1, 2, 3, 4, 5),
    date(2025, 1, 2),
    time(12, 30),
]


@pytest.mark.parametrize("value", SCALARS)
def test_primitive_accepts_scalars(value: object) -> None:
    validate_value(value, ValueTypePolicy.PRIMITIVE)
    validate_value(value, ValueTypePolicy.PRIMITIVE_AND_COMPOUND)


@pytest.mark.parametrize(
    "value",
    [[3, "foo", Color.RED], {"one": 1, "two": 2}, [3, [2, 4], {"foo": "bar"}], (1, 2), Opaque()],
)
def test_primitive_rejects_containers_and_objects(value: object) -> None:
    with pytest.raises(ValueTypeViolation) as ei:
        validate_value(value, ValueTypePolicy.PRIMITIVE)
    assert ei.value.value is value
    assert ei.value.policy == "primitive"


@pytest.mark.parametrize(
    "value",
    [
        [3, "foo", Color.RED],
        {"one": 1, "two": 2},
        [3, [2, 4], {"foo": "bar"}],
        {(1, 2): "onetwo", 3: {"bar": [Color.RED, "baz"]}},
        [],
        {},
    ],
)
def test_primitive_and_compound_accepts_nested_scalars(value: object) -> None:
    validate_value(value, ValueTypePolicy.PRIMITIVE_AND_COMPOUND)


@pytest.mark.parametrize(
    "value",
    [Opaque(), [1, 2, Opaque()], {"foo": Opaque()}, {Opaque(): "foo"}, [[[{"deep": {Opaque()}}]]]],
)
def test_primitive_and_compound_rejects_any_bad_leaf(value: object) -> None:
    with pytest.raises(ValueTypeViolation) as ei:
        validate_value(value, ValueTypePolicy.PRIMITIVE_AND_COMPOUND)
    # Reported against the top-level value, not the offending leaf.
    assert ei.value.value is value


def test_cyclic_values_are_rejected() -> None:
    loop: list[object] = [1]
    loop.append(loop)
    assert is_primitive_or_compound(loop) is False
    with pytest.raises(ValueTypeViolation):
        validate_value(loop, ValueTypePolicy.PRIMITIVE_AND_COMPOUND)


def test_shared_but_acyclic_containers_are_accepted() -> None:
    shared = [1, 2]
    assert is_primitive_or_compound([shared, shared, {"k": shared}]) is True


def test_anything_accepts_everything() -> None:
    validate_value(Opaque(), ValueTypePolicy.ANYTHING)
    validate_value({Opaque(): [Opaque()]}, ValueTypePolicy.ANYTHING)


def test_sets_are_not_compound() -> None:
    assert is_primitive({1}) is False
    assert is_primitive_or_compound({1}) is False
