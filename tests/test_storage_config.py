import json

from replbook.config import DEFAULT_API_BASE, Settings, load_config, save_config, state_path
from replbook.storage import REPL_ID_KEY, FileStorage, MemoryStorage


def test_memory_storage_round_trip():
    storage = MemoryStorage({"a": "1"})
    assert storage.get("a") == "1"
    assert storage.get("missing") is None
    storage.set("b", "2")
    assert storage.get("b") == "2"


def test_file_storage_creates_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "state.json"
    storage = FileStorage(path)
    assert storage.get(REPL_ID_KEY) is None
    storage.set(REPL_ID_KEY, "7")
    assert json.loads(path.read_text()) == {"replId": "7"}
    assert FileStorage(path).get(REPL_ID_KEY) == "7"


def test_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")
    assert FileStorage(path).get(REPL_ID_KEY) is None


def test_file_storage_keeps_other_keys(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"other": "x"}))
    FileStorage(path).set(REPL_ID_KEY, "3")
    assert json.loads(path.read_text()) == {"other": "x", "replId": "3"}


def test_settings_default():
    settings = Settings.resolve()
    assert settings.api_base == DEFAULT_API_BASE
    assert settings.state_file == state_path()


def test_settings_precedence(monkeypatch):
    save_config({"api_base": "http://from-config:1"})
    assert Settings.resolve().api_base == "http://from-config:1"

    monkeypatch.setenv("REPLBOOK_API_BASE", "http://from-env:2/")
    assert Settings.resolve().api_base == "http://from-env:2"

    assert Settings.resolve(api_base="http://explicit:3").api_base == "http://explicit:3"


def test_load_config_missing_returns_empty():
    assert load_config() == {}


def test_load_config_non_object_returns_empty():
    save_config([])
    assert load_config() == {}
    assert Settings.resolve().api_base == DEFAULT_API_BASE
