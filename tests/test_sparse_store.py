import pytest

from mystery_host.services.sparse_store import SparseFieldStore


def test_missing_key_returns_default():
    store = SparseFieldStore("")
    assert store.get(0) == ""
    assert store.get(42) == ""
    assert len(store) == 0


@pytest.mark.parametrize(
    "default,value",
    [("", "indice"), (0.0, 1712345678.5), (False, True)],
)
def test_set_then_get(default, value):
    store = SparseFieldStore(default)
    store.set(3, value)
    assert store.get(3) == value
    assert 3 in store


@pytest.mark.parametrize(
    "default,value",
    [("", "x"), (0.0, 5.0), (False, True)],
)
def test_setting_default_removes_key(default, value):
    store = SparseFieldStore(default, {1: value})
    store.set(1, default)
    assert store.get(1) == default
    assert 1 not in store
    assert list(store) == []


def test_gaps_and_derived_counts():
    store = SparseFieldStore("")
    store.set(0, "a")
    store.set(4, "b")
    assert store.count() == 2
    assert store.max_index_plus_one() == 5
    assert store.first_empty_index() == 1
    assert list(store) == [0, 4]


def test_empty_store_counts():
    store = SparseFieldStore("")
    assert store.max_index_plus_one() == 0
    assert store.first_empty_index() == 0


def test_from_dict_skips_malformed_entries():
    raw = {"0": "ok", "deux": "bad key", "-1": "negative", "3": ""}
    store = SparseFieldStore.from_dict(raw, "", str)
    assert store.items() == [(0, "ok")]


def test_items_is_a_copy():
    store = SparseFieldStore(0.0, {0: 1.0, 1: 2.0})
    for index, _ in store.items():
        store.set(index, 0.0)
    assert len(store) == 0
