import json

import pytest

from src.adapters.storage_adapter import JsonFileStorage, PATIENTS_KEY
from src.core.config import CensusConfig
from src.services.census_service import CensusService


def test_json_file_storage_creates_document(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileStorage(str(path))

    assert path.exists()
    assert json.loads(path.read_text()) == {}
    assert storage.load("missing") is None


def test_json_file_storage_round_trip(tmp_path):
    path = tmp_path / "storage.json"
    storage = JsonFileStorage(str(path))
    storage.save("todayPatients", "3")
    storage.save("lastVisitDate", "2026-10-18")

    reopened = JsonFileStorage(str(path))
    assert reopened.load("todayPatients") == "3"
    assert reopened.load("lastVisitDate") == "2026-10-18"
    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


def test_json_file_storage_corrupt_document(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("not json")
    storage = JsonFileStorage(str(path))
    assert storage.load(PATIENTS_KEY) is None


def test_census_on_file_storage(tmp_path, clock):
    config = CensusConfig(data_dir=str(tmp_path))
    census = CensusService(JsonFileStorage(config.storage_file), config, clock=clock)
    record = census.add_patient("Alice", "Female", 30, "Diabetes")

    reloaded = CensusService(JsonFileStorage(config.storage_file), config, clock=clock)
    assert reloaded.records == [record]
    assert reloaded.today_count == 1


def test_config_defaults(monkeypatch):
    for var in ["CENSUS_DATA_DIR", "CENSUS_REFERENCE_SOURCE", "CENSUS_REFERENCE_TIMEOUT",
                "CENSUS_RECENT_LIMIT", "CENSUS_DATE_FORMAT", "CENSUS_LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)

    config = CensusConfig.from_env()

    assert config.data_dir == "data/census"
    assert config.storage_file.endswith("storage.json")
    assert config.reference_timeout is None
    assert config.recent_limit == 10


def test_config_env_overrides_args(monkeypatch):
    monkeypatch.delenv("CENSUS_DATA_DIR", raising=False)
    monkeypatch.setenv("CENSUS_RECENT_LIMIT", "5")
    monkeypatch.setenv("CENSUS_REFERENCE_TIMEOUT", "2.5")

    config = CensusConfig.from_env(recent_limit=20, data_dir="/tmp/census")

    assert config.recent_limit == 5
    assert config.reference_timeout == 2.5
    assert config.data_dir == "/tmp/census"


def test_config_invalid_env(monkeypatch):
    monkeypatch.setenv("CENSUS_RECENT_LIMIT", "ten")
    with pytest.raises(ValueError) as excinfo:
        CensusConfig.from_env()
    assert "CENSUS_RECENT_LIMIT" in str(excinfo.value)
