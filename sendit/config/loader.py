"""YAML config loader with runtime get/set and resort lookup."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from sendit.config.defaults import DEFAULT_RESORTS
from sendit.config.schema import AppConfig, ResortConfig


def load_config(path: str | Path) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. If no resorts are specified,
    injects DEFAULT_RESORTS.
    """
    path = Path(path)
    raw: dict = {}
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if "resorts" not in raw or not raw["resorts"]:
        raw["resorts"] = [r.model_dump() for r in DEFAULT_RESORTS]

    return AppConfig(**raw)


def config_hash(config: AppConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def resort_by_name(config: AppConfig, name: str) -> ResortConfig | None:
    """Case-insensitive lookup by display name or slug."""
    wanted = name.strip().lower()
    for resort in config.resorts:
        if resort.name.lower() == wanted:
            return resort
    return resort_by_slug(config, wanted)


def resort_by_slug(config: AppConfig, slug: str) -> ResortConfig | None:
    for resort in config.resorts:
        if resort.slug == slug:
            return resort
    return None


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'weather.forecast_days'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: AppConfig, dotted_key: str, value: Any) -> AppConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new AppConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[int(part)] if isinstance(target, list) else target[part]
    # Attempt type coercion for common cases
    old_value = target.get(parts[-1])
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return AppConfig(**data)
