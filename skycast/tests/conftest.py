"""Shared test fixtures."""

from pathlib import Path

import pytest
import yaml

from skycast.config.schema import SkycastConfig
from skycast.ingest.parsers import parse_forecast
from skycast.models.weather import ForecastReport
from skycast.tests.factories import FIXTURE_DIR, load_fixture


@pytest.fixture(autouse=True)
def _no_api_key_env(monkeypatch):
    monkeypatch.delenv("SKYCAST_API_KEY", raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def default_config() -> SkycastConfig:
    return SkycastConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "yaml-key", "units": "metric"},
        "autocomplete": {"debounce_ms": 250},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def current_payload() -> dict:
    return load_fixture("owm_current_london.json")


@pytest.fixture
def forecast_payload() -> dict:
    return load_fixture("owm_forecast_london.json")


@pytest.fixture
def forecast_report(forecast_payload: dict) -> ForecastReport:
    return parse_forecast(forecast_payload)


@pytest.fixture
def geocoding_payload() -> list:
    return load_fixture("nominatim_search_springfield.json")
