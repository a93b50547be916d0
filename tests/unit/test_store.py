import contextlib

import pytest

from kv_lib.errors import InvalidPattern, KeyNotFound, KVError
from kv_lib.storage import create_storage
from kv_lib.store import Store


@pytest.fixture(params=["json", "bson", "memory"])
def store(request, tmp_path):
    return Store(create_storage(request.param, data_dir=tmp_path))


@pytest.mark.parametrize("value", ["v", "", "multi\nline", "ünïcödé"])
def test_get_after_set(store, value):
    store.set("k", value)
    assert store.get("k") == value


def test_set_overwrites(store):
    store.set("k", "1")
    store.set("k", "2")
    assert store.get("k") == "2"


@pytest.mark.parametrize("op", ["get", "delete"])
def test_missing_key_raises_key_not_found(store, op):
    with pytest.raises(KeyNotFound) as exc:
        getattr(store, op)("missing")
    assert exc.value.key == "missing"
    assert str(exc.value) == "Key not found missing"


def test_key_not_found_is_a_key_error(store):
    with pytest.raises(KeyError):
        store.get("missing")


def test_exists(store):
    assert store.exists("k") is False
    store.set("k", "")
    assert store.exists("k") is True


def test_delete_removes_key(store):
    store.set("a", "1")
    store.set("b", "2")
    store.delete("a")
    assert store.exists("a") is False
    assert store.get("b") == "2"


def test_append_concatenates(store):
    store.set("a", "x")
    store.append("a", "y")
    assert store.get("a") == "xy"


def test_append_never_creates(store):
    with pytest.raises(KeyNotFound):
        store.append("missing", "y")
    assert store.exists("missing") is False


def test_rename_moves_value(store):
    store.set("a", "1")
    store.rename("a", "c")
    assert store.get("c") == "1"
    assert store.exists("a") is False


def test_rename_overwrites_existing_target(store):
    store.set("a", "1")
    store.set("b", "2")
    store.rename("a", "b")
    assert store.get("b") == "1"
    with pytest.raises(KeyNotFound):
        store.get("a")


def test_rename_onto_itself_keeps_value(store):
    store.set("a", "1")
    store.rename("a", "a")
    assert store.get("a") == "1"


def test_rename_missing_source(store):
    store.set("b", "2")
    with pytest.raises(KeyNotFound):
        store.rename("a", "b")
    assert store.get("b") == "2"


def test_list_keys_substring_match(store):
    for k in ("Abc", "Abi", "Xyz"):
        store.set(k, k)
    assert set(store.list_keys("Ab")) == {"Abc", "Abi"}
    assert set(store.list_keys("b.$")) == {"Abc", "Abi"}
    assert set(store.list_keys("")) == {"Abc", "Abi", "Xyz"}
    assert store.list_keys("^z") == []


def test_list_keys_invalid_pattern(store):
    store.set("a", "1")
    with pytest.raises(InvalidPattern) as exc:
        store.list_keys("(unbalanced")
    assert isinstance(exc.value, KVError)
    assert exc.value.pattern == "(unbalanced"


def test_clear_empties_store(store):
    store.set("a", "1")
    store.clear()
    assert store.list_keys("") == []
    store.clear()
    assert store.exists("a") is False


def test_missing_file_matches_cleared_store(tmp_path):
    fresh = Store(create_storage("bson", data_dir=tmp_path / "fresh"))
    cleared = Store(create_storage("bson", data_dir=tmp_path / "cleared"))
    cleared.set("a", "1")
    cleared.clear()
    for s in (fresh, cleared):
        assert s.exists("a") is False
        assert s.list_keys(".*") == []
        with pytest.raises(KeyNotFound):
            s.get("a")


def test_values_survive_new_store_instance(tmp_path):
    Store(create_storage("json", data_dir=tmp_path)).set("a", "1")
    assert Store(create_storage("json", data_dir=tmp_path)).get("a") == "1"


class RecordingStorage:
    """Storage double that records which backend calls a store makes."""

    name = "recording"

    def __init__(self, mapping=None):
        self.mapping = dict(mapping or {})
        self.calls = []

    def load(self):
        self.calls.append("load")
        return dict(self.mapping)

    def persist(self, mapping):
        self.calls.append("persist")
        self.mapping = dict(mapping)

    def reset(self):
        self.calls.append("reset")
        self.mapping = {}

    def lock(self):
        self.calls.append("lock")
        return contextlib.nullcontext()


def test_failed_delete_does_not_persist():
    rec = RecordingStorage()
    with pytest.raises(KeyNotFound):
        Store(rec).delete("a")
    assert "persist" not in rec.calls


def test_read_operations_do_not_persist():
    rec = RecordingStorage({"a": "1"})
    s = Store(rec)
    s.get("a")
    s.exists("a")
    s.list_keys("a")
    assert rec.calls == ["load", "load", "load"]


def test_invalid_pattern_checked_before_load():
    rec = RecordingStorage({"a": "1"})
    with pytest.raises(InvalidPattern):
        Store(rec).list_keys("[")
    assert rec.calls == []


def test_clear_calls_reset_under_lock():
    rec = RecordingStorage({"a": "1"})
    Store(rec).clear()
    assert rec.calls == ["lock", "reset"]
