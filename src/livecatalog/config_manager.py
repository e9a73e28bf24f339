#!/usr/bin/env python3
"""Engine settings: where to fetch from, where to cache, how long to wait."""
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "mxonlive-player/6.0"

DEFAULT_CONFIG: Dict[str, Any] = {
    # Remote JSON describing app behavior and the playlist location
    "config_url": "https://raw.githubusercontent.com/mxonlive/mxonlive.github.io/refs/heads/main/live/mxonlive_app_5.json",
    # Used when the remote config names no playlist at all
    "default_playlist_url": "https://raw.githubusercontent.com/mxonlive/mxonlive.github.io/refs/heads/main/live/playlist.m3u",
    # Sent on every fetch and injected into channels that set none
    "default_user_agent": DEFAULT_USER_AGENT,
    # Group assigned to entries without a group-title attribute
    "fallback_group": "Others",
    "network": {
        "config_timeout": 10,
        "playlist_timeout": 20,
    },
    "cache": {
        "directory": "data",
        "config_filename": "config.json",
        "playlist_filename": "playlist.m3u",
    },
}

_CACHE_FILENAME_KEYS = {
    "config": "config_filename",
    "playlist": "playlist_filename",
}


def get_default_config() -> Dict[str, Any]:
    """Return a fresh copy of the default configuration."""
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: str | None) -> Dict[str, Any]:
    """Load settings from a JSON file merged over the defaults; defaults on error."""
    config = get_default_config()
    if not config_path:
        return config
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.loads(f.read().strip())
    except FileNotFoundError:
        logger.info(f"No settings file at {config_path}, using defaults")
        return config
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load settings from {config_path}: {e}")
        return config
    if not isinstance(loaded, dict):
        logger.warning(f"Ignoring settings file {config_path}: not a JSON object")
        return config
    return _merge(config, loaded)


def get_cache_directory(config: Dict[str, Any]) -> str:
    return config.get("cache", {}).get("directory", "data")


def get_cache_path(config: Dict[str, Any], key: str) -> str:
    """
    Get the file path of a cache slot.

    Args:
        config: Settings dictionary
        key: Cache slot name, 'config' or 'playlist'

    Returns:
        Full file path as string
    """
    cache = config.get("cache", {})
    directory = get_cache_directory(config)
    filename_key = _CACHE_FILENAME_KEYS.get(key)
    if filename_key and cache.get(filename_key):
        return os.path.join(directory, cache[filename_key])
    return os.path.join(directory, f"{key}.cache")


def ensure_cache_directory_exists(config: Dict[str, Any]) -> None:
    os.makedirs(get_cache_directory(config), exist_ok=True)


def get_timeout(config: Dict[str, Any], kind: str) -> float:
    """Timeout in seconds for 'config' or 'playlist' fetches."""
    network = config.get("network", {})
    default = DEFAULT_CONFIG["network"][f"{kind}_timeout"]
    try:
        value = float(network.get(f"{kind}_timeout", default))
    except (TypeError, ValueError):
        return float(default)
    # An unbounded wait is never allowed
    return value if value > 0 else float(default)
