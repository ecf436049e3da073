"""Configuration module — frozen dataclass loaded from YAML and environment variables."""

import logging
import os
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class SinkConfig:
    base_filename: str = "./logs/application.log"
    max_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    max_files: int = 5
    max_compressed_files: int = 10
    rotate_on_open: bool = False
    compression_level: int = 6
    rename_retry_attempts: int = 2
    rename_retry_delay_ms: int = 100
    archive_retry_delay_ms: int = 10


_ENV_KEYS = {
    "base_filename": "LOG_FILE",
    "max_files": "MAX_FILES",
    "max_compressed_files": "MAX_COMPRESSED_FILES",
    "rotate_on_open": "ROTATE_ON_OPEN",
    "compression_level": "COMPRESSION_LEVEL",
    "rename_retry_attempts": "RENAME_RETRY_ATTEMPTS",
    "rename_retry_delay_ms": "RENAME_RETRY_DELAY_MS",
    "archive_retry_delay_ms": "ARCHIVE_RETRY_DELAY_MS",
}


def load_yaml_config(path: str | None) -> dict:
    """Load sink settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def _coerce(name: str, value):
    if name == "base_filename":
        return str(value)
    if name == "rotate_on_open":
        return _parse_bool(value)
    return int(value)


def load_config(yaml_path: str | None = None) -> SinkConfig:
    """Build SinkConfig from defaults, then YAML, then environment variables."""
    known = {f.name for f in fields(SinkConfig)}
    values = {}

    yaml_data = load_yaml_config(yaml_path or os.environ.get("CONFIG_PATH"))
    for key, value in yaml_data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        values[key] = _coerce(key, value)

    for name, env_key in _ENV_KEYS.items():
        raw = os.environ.get(env_key)
        if raw is not None:
            values[name] = _coerce(name, raw)

    # MAX_FILE_SIZE_BYTES takes precedence over MAX_FILE_SIZE_MB
    raw_bytes = os.environ.get("MAX_FILE_SIZE_BYTES")
    raw_mb = os.environ.get("MAX_FILE_SIZE_MB")
    if raw_bytes is not None:
        values["max_size_bytes"] = int(raw_bytes)
    elif raw_mb is not None:
        values["max_size_bytes"] = int(float(raw_mb) * 1024 * 1024)

    return SinkConfig(**values)
