# pylint: disable=wrong-import-position
"""pixform.utils.config – user paths and TOML config loader"""

from __future__ import annotations

import os
import pathlib
import tomllib
from functools import lru_cache
from typing import Any, Dict, cast

DEFAULT_CONFIG_DIR = pathlib.Path.home() / ".config" / "pixform"
# Allow overriding the config directory at import time via environment variable
CONFIG_DIR = pathlib.Path(os.getenv("PIXFORM_CONFIG_DIR", str(DEFAULT_CONFIG_DIR))).expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"


def get_config_path() -> pathlib.Path:
    """Return config file path honoring environment variables."""
    env_file = os.getenv("PIXFORM_CONFIG_FILE")
    if env_file:
        return pathlib.Path(env_file).expanduser()
    env_dir = os.getenv("PIXFORM_CONFIG_DIR")
    if env_dir:
        return pathlib.Path(env_dir).expanduser() / "config.toml"
    return CONFIG_FILE


# max_workers == 0 means "one worker per CPU"
DEFAULTS: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
    },
    "transform": {
        "default_filter": "lanczos",
        "max_workers": 0,
        "min_rows_per_worker": 64,
    },
    "codec": {
        "jpeg_quality": 95,
        "png_compression_level": 6,
    },
}

# Expected config schema for validation
EXPECTED_SCHEMA: Dict[str, Any] = {
    "logging": {"level": str},
    "transform": {"default_filter": str, "max_workers": int, "min_rows_per_worker": int},
    "codec": {"jpeg_quality": int, "png_compression_level": int},
}


def _validate_config(data: Dict[str, Any]) -> None:
    errors: list[str] = []
    for key, expected in EXPECTED_SCHEMA.items():
        if key not in data:
            data[key] = dict(DEFAULTS[key])
            continue
        value = data[key]
        if not isinstance(value, dict):
            errors.append(f"section '{key}' must be a table")
            continue
        for sub, exptype in expected.items():
            if sub not in value:
                value[sub] = DEFAULTS[key][sub]
                continue
            subval = value[sub]
            # bool is an int subclass; reject it explicitly for int keys
            if not isinstance(subval, exptype) or (exptype is int and isinstance(subval, bool)):
                errors.append(f"'{key}.{sub}' must be {exptype.__name__}")
    if errors:
        raise ValueError("Invalid configuration: " + "; ".join(errors))


@lru_cache(maxsize=1)
def _load_config() -> Dict[str, Any]:
    """Load configuration from TOML and validate."""
    data: Dict[str, Any] = {key: dict(section) for key, section in DEFAULTS.items()}

    cfg_path = get_config_path()
    if cfg_path.exists():
        with cfg_path.open("rb") as fp:
            try:
                loaded_data = tomllib.load(fp)
            except tomllib.TOMLDecodeError as exc:
                raise ValueError(f"Invalid TOML in {cfg_path}: {exc}") from exc

            for key, value in loaded_data.items():
                if key in data and isinstance(data[key], dict) and isinstance(value, dict):
                    data[key].update(value)
                else:
                    data[key] = value

    _validate_config(data)
    return data


def reload_config() -> None:
    """Drop the cached configuration so the next lookup re-reads the file."""
    _load_config.cache_clear()


# public helpers -----------------------------------------------------------


def get_logging_level() -> str:
    level = _load_config()["logging"]["level"]
    return cast(str, level)


def get_default_filter_name() -> str:
    return cast(str, _load_config()["transform"]["default_filter"])


def get_max_workers() -> int:
    """Worker count for row-parallel transforms; 0 selects ``os.cpu_count()``."""
    workers = cast(int, _load_config()["transform"]["max_workers"])
    if workers <= 0:
        return os.cpu_count() or 1
    return workers


def get_min_rows_per_worker() -> int:
    return max(1, cast(int, _load_config()["transform"]["min_rows_per_worker"]))


def get_jpeg_quality() -> int:
    return cast(int, _load_config()["codec"]["jpeg_quality"])


def get_png_compression_level() -> int:
    return cast(int, _load_config()["codec"]["png_compression_level"])
