import json
import os

import pytest

from storage import JsonStore, StorageError


def test_missing_file_loads_empty(tmp_path):
    store = JsonStore(str(tmp_path / "nothing.json"))
    assert store.load() == []


def test_save_creates_parent_directory(tmp_path):
    path = tmp_path / "data" / "trains.json"
    store = JsonStore(str(path))
    store.save([{"train_id": "bacs"}])
    assert json.loads(path.read_text()) == [{"train_id": "bacs"}]
    assert store.load() == [{"train_id": "bacs"}]


def test_invalid_json_raises_storage_error(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json")
    with pytest.raises(StorageError):
        JsonStore(str(path)).load()


def test_non_list_document_raises_storage_error(tmp_path):
    path = tmp_path / "users.json"
    path.write_text('{"name": "alice"}')
    with pytest.raises(StorageError):
        JsonStore(str(path)).load()


def test_failed_write_keeps_previous_file(tmp_path):
    path = tmp_path / "users.json"
    store = JsonStore(str(path))
    store.save([{"name": "alice"}])

    with pytest.raises(StorageError):
        store.save([{"name": object()}])

    assert store.load() == [{"name": "alice"}]
    assert os.listdir(tmp_path) == ["users.json"]
