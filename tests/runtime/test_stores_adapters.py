from collections import OrderedDict

import pytest

from objsession.core.typing import RawStore
from objsession.runtime.stores import MappingStore, as_store


def test_mapping_store_operations() -> None:
    data = OrderedDict(a=1, b=2)
    store = MappingStore(data)
    assert store.get("a") == 1
    assert store.get("zz") is None
    store.set("c", 3)
    assert store.keys() == ["a", "b", "c"]
    store.delete(k for k in ["a", "missing"])
    assert dict(data) == {"b": 2, "c": 3}


def test_as_store_passes_raw_stores_through(recording_store) -> None:
    store = recording_store()
    assert isinstance(store, RawStore)
    assert as_store(store) is store


def test_as_store_wraps_mappings() -> None:
    data = {"a": 1}
    store = as_store(data)
    assert isinstance(store, MappingStore)
    assert store.data is data


@pytest.mark.parametrize("bad", ["text", 3, None, ("a", 1)])
def test_as_store_rejects_other_objects(bad: object) -> None:
    with pytest.raises(TypeError):
        as_store(bad)
