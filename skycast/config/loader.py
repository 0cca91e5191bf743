"""YAML config loader with environment override and runtime get/set."""

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from skycast.config.schema import SkycastConfig

logger = logging.getLogger(__name__)

API_KEY_ENV = "SKYCAST_API_KEY"


def load_config(path: str | Path | None = None) -> SkycastConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults. The API key is taken from
    SKYCAST_API_KEY when that variable is set.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            logger.info("Config file %s not found, using defaults", path)

    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        raw["provider"] = {**(raw.get("provider") or {}), "api_key": api_key}

    return SkycastConfig(**raw)


def get_config_value(config: SkycastConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'autocomplete.debounce_ms'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict) and part in obj:
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: SkycastConfig, dotted_key: str, value: Any) -> SkycastConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new SkycastConfig instance.
    """
    get_config_value(config, dotted_key)
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    # Attempt type coercion for common cases
    old_value = target.get(parts[-1])
    if isinstance(value, str):
        if isinstance(old_value, bool):
            value = value.lower() in ("1", "true", "yes", "on")
        elif isinstance(old_value, int):
            value = int(value)
        elif isinstance(old_value, float):
            value = float(value)
    target[parts[-1]] = value
    return SkycastConfig(**data)


def dump_config(config: SkycastConfig, redact: bool = True) -> str:
    """Render config as JSON, masking the API key unless redact is False."""
    data = json.loads(config.model_dump_json())
    if redact and data["provider"]["api_key"]:
        data["provider"]["api_key"] = "***"
    return json.dumps(data, indent=2)
