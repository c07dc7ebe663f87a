"""
Unit tests for the file-backed local storage.
"""

import pytest

from gymleague.services.local_storage import LocalStorage, get_local_storage


def test_missing_key_returns_none(storage):
    assert storage.get_item("demo_gyms") is None
    assert storage.read_json("demo_gyms") is None


def test_write_then_read_from_a_new_instance(storage):
    storage.write_json("demo_gyms", [{"id": "g1", "name": "Gym"}])

    reopened = LocalStorage(storage.directory)

    assert reopened.read_json("demo_gyms") == [{"id": "g1", "name": "Gym"}]


def test_write_replaces_the_whole_snapshot(storage):
    storage.write_json("demo_events", [{"id": "e1"}, {"id": "e2"}])
    storage.write_json("demo_events", [{"id": "e2"}])

    assert storage.read_json("demo_events") == [{"id": "e2"}]


def test_no_temp_files_left_behind(storage):
    storage.write_json("demo_gyms", [])

    assert [p.name for p in storage.directory.iterdir()] == ["demo_gyms.json"]


def test_remove_item(storage):
    storage.set_item("demo_user", "{}")
    storage.remove_item("demo_user")
    storage.remove_item("demo_user")

    assert storage.get_item("demo_user") is None


def test_corrupt_json_raises_value_error(storage):
    storage.set_item("demo_user", "{not json")

    with pytest.raises(ValueError):
        storage.read_json("demo_user")


@pytest.mark.parametrize("key", ["../escape", "a/b", "", "with space"])
def test_invalid_keys_rejected(storage, key):
    with pytest.raises(ValueError):
        storage.set_item(key, "x")


def test_shared_instance_follows_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("GYMLEAGUE_DATA_DIR", str(tmp_path / "one"))
    first = get_local_storage()
    assert get_local_storage() is first

    monkeypatch.setenv("GYMLEAGUE_DATA_DIR", str(tmp_path / "two"))
    second = get_local_storage()

    assert second is not first
    assert second.directory == tmp_path / "two"
