"""
test_config.py
"""
import json

import pytest
from pydantic import ValidationError

from src.stockcast.config import AppConfig, load_config
from src.stockcast.utils.logger import setup_logger
from src.stockcast.utils.universe_loader import UniverseLoader


def test_config_defaults(monkeypatch):
    for var in (
        "STOCKCAST_DATA_DIR", "STOCKCAST_LOG_DIR", "STOCKCAST_CACHE_TTL",
        "STOCKCAST_PROXY", "STOCKCAST_UNIVERSE_FILE", "STOCKCAST_OFFLINE",
    ):
        monkeypatch.delenv(var, raising=False)

    config = load_config()
    assert config == AppConfig()
    assert config.cache_ttl_seconds == 60.0
    assert not config.offline


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("STOCKCAST_DATA_DIR", "/tmp/stockcast")
    monkeypatch.setenv("STOCKCAST_CACHE_TTL", "30")
    monkeypatch.setenv("STOCKCAST_OFFLINE", "true")

    config = load_config()
    assert config.data_dir == "/tmp/stockcast"
    assert config.cache_ttl_seconds == 30.0
    assert config.offline


def test_config_rejects_bad_ttl(monkeypatch):
    monkeypatch.setenv("STOCKCAST_CACHE_TTL", "-5")
    with pytest.raises(ValidationError):
        load_config()


def test_universe_loader(tmp_path):
    path = tmp_path / "stocks.json"
    path.write_text(json.dumps({
        "default": [
            {"symbol": "AAPL", "name": "Apple Inc.", "sector": "Technology", "base_price": 175},
        ],
    }), encoding="utf-8")

    profiles = UniverseLoader(str(path)).get_profiles()
    assert profiles[0].symbol == "AAPL"
    assert profiles[0].base_price == 175.0

    with pytest.raises(KeyError):
        UniverseLoader(str(path)).get_profiles("missing")


def test_universe_loader_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        UniverseLoader(str(tmp_path / "nope.json"))

    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{", encoding="utf-8")
    with pytest.raises(ValueError):
        UniverseLoader(str(bad_json))

    bad_profile = tmp_path / "bad_profile.json"
    bad_profile.write_text(json.dumps({"default": [{"symbol": "X", "name": "X", "base_price": 0}]}))
    with pytest.raises(ValueError):
        UniverseLoader(str(bad_profile))


def test_shipped_universe_loads():
    profiles = UniverseLoader().get_profiles("default")
    assert [p.symbol for p in profiles][:3] == ["AAPL", "GOOGL", "MSFT"]


def test_setup_logger_creates_daily_file(tmp_path):
    log = setup_logger(str(tmp_path / "logs"), console_level="WARNING")
    try:
        files = list((tmp_path / "logs").glob("stockcast_*.log"))
        assert len(files) == 1
    finally:
        log.remove()
