import json

import pytest
from pydantic import ValidationError

from mdhd.core.config import AppConfig, ConfigManager


def test_config_defaults():
    config = AppConfig()

    assert config.mongo.host == "localhost"
    assert config.mongo.port == 27017
    assert config.mongo.files_collection == "files"
    assert config.mongo.directories_collection == "directories"
    assert config.ingest.accepted_extensions == [".md", ".markdown"]
    assert config.ingest.directory_batch_size == 100


def test_config_manager_writes_defaults(tmp_path):
    path = tmp_path / "config.json"

    manager = ConfigManager(str(path))

    assert path.exists()
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["mongo"]["database_name"] == manager.data.mongo.database_name


def test_config_manager_loads_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"mongo": {"port": 27018}, "ingest": {"accepted_extensions": [".txt"]}}))

    manager = ConfigManager(str(path))

    assert manager.data.mongo.port == 27018
    assert manager.data.ingest.accepted_extensions == [".txt"]
    assert manager.data.general.debug_mode is False


def test_config_manager_loads_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[mongo]\ndatabase_name = "notes"\n\n[general]\ndebug_mode = true\n')

    manager = ConfigManager(str(path))

    assert manager.data.mongo.database_name == "notes"
    assert manager.data.general.debug_mode is True


def test_config_manager_bad_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    manager = ConfigManager(str(path))

    assert manager.data == AppConfig()
    # The broken file is replaced with valid defaults
    assert json.loads(path.read_text(encoding="utf-8"))["mongo"]["port"] == 27017


def test_config_update_persists(tmp_path):
    manager = ConfigManager(str(tmp_path / "config.json"))

    manager.update("mongo", "port", 28000)

    assert manager.get("mongo", "port") == 28000

    reloaded = ConfigManager(str(tmp_path / "config.json"))
    assert reloaded.data.mongo.port == 28000


def test_config_update_rejects_unknown_keys(tmp_path):
    manager = ConfigManager(str(tmp_path / "config.json"))

    with pytest.raises(ValueError):
        manager.update("nope", "port", 1)
    with pytest.raises(ValueError):
        manager.update("mongo", "nope", 1)
    with pytest.raises(ValidationError):
        manager.update("mongo", "port", "not a port")
    assert manager.get("mongo", "port") == 27017
