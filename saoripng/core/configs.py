"""Configuration management for saoripng.

Loads settings from ~/.config/saoripng/config.cfg, then from a ``.env`` file
in the working directory, then from ``SAORIPNG_*`` environment variables (later
sources win). Provides PluginSettings for the host adapter and the CLI.
"""

import configparser
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

# Default location for user configuration.
CONFIG_PATH = Path.home() / ".config" / "saoripng" / "config.cfg"

ENV_PREFIX = "SAORIPNG_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class PluginSettings:
    base_dir: Optional[Path] = None
    log_level: str = "WARNING"
    max_image_pixels: Optional[int] = None


def load_raw_config(
    path: Path = CONFIG_PATH,
    env_path: Optional[Path] = None,
) -> Dict[str, str]:
    """
    Load configuration values from the config file, a .env file and the
    process environment. Values are returned with lowercase keys.

    ``env_path`` defaults to ``.env`` in the current working directory.
    """
    cfg = configparser.ConfigParser()
    data: Dict[str, str] = {}

    if path.exists():
        cfg.read(path)
        if "DEFAULT" in cfg:
            data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})

    env_path = env_path if env_path is not None else Path.cwd() / ".env"
    if env_path.exists():
        for key, value in dotenv_values(env_path).items():
            if key.upper().startswith(ENV_PREFIX) and value is not None:
                data[key[len(ENV_PREFIX):].lower()] = value

    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX) and value.strip() != "":
            data[key[len(ENV_PREFIX):].lower()] = value

    return data


def _get_int(raw: Dict[str, str], key: str, default: Optional[int] = None) -> Optional[int]:
    value = raw.get(key)
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(float(value))
    except ValueError:
        raise ValueError(f"Invalid integer for '{key}': {value!r}") from None


def get_plugin_settings(raw: Optional[Dict[str, str]] = None) -> PluginSettings:
    """
    Build PluginSettings from raw configuration values.
    Raises ValueError for an unknown log level or a malformed number.
    """
    raw = raw if raw is not None else load_raw_config()

    log_level = raw.get("log_level", "WARNING").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level '{log_level}'. Expected one of: {', '.join(LOG_LEVELS)}"
        )

    base_dir = raw.get("base_dir", "").strip()

    max_image_pixels = _get_int(raw, "max_image_pixels")
    if max_image_pixels is not None and max_image_pixels <= 0:
        max_image_pixels = None

    return PluginSettings(
        base_dir=Path(base_dir).expanduser() if base_dir else None,
        log_level=log_level,
        max_image_pixels=max_image_pixels,
    )
