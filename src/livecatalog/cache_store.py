#!/usr/bin/env python3
"""Last-known-good storage for the raw configuration and playlist documents."""
from __future__ import annotations
import logging
import os
import tempfile
import threading
from typing import Any, Dict, Optional

from .config_manager import ensure_cache_directory_exists, get_cache_path

logger = logging.getLogger(__name__)

CONFIG_KEY = "config"
PLAYLIST_KEY = "playlist"


class FileCacheStore:
    """Stores each cache slot as a plain file holding the raw fetched text.

    Writes overwrite the previous value; there is no history and no expiry.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the cache store.

        Args:
            config: Settings dictionary providing the cache directory and file names
        """
        self.config = config
        ensure_cache_directory_exists(self.config)

    def path_for(self, key: str) -> str:
        return get_cache_path(self.config, key)

    def write(self, key: str, data: bytes) -> None:
        """
        Replace the value of a slot.

        The data lands in a temporary file first and is renamed over the slot,
        so readers never see a partially written document.
        """
        path = self.path_for(key)
        directory = os.path.dirname(path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{key}-", dir=directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.info(f"Cached {key} ({len(data)} bytes) to {path}")

    def read(self, key: str) -> Optional[bytes]:
        """
        Read a slot.

        Returns:
            The stored bytes, or None if the slot was never written or cannot be read
        """
        path = self.path_for(key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            logger.info(f"No cached {key} at {path}")
            return None
        except OSError as e:
            logger.error(f"Failed to read cached {key} (IO error): {e}")
            return None

    def clear(self, key: str | None = None) -> None:
        keys = [key] if key else [CONFIG_KEY, PLAYLIST_KEY]
        for k in keys:
            path = self.path_for(k)
            if os.path.exists(path):
                os.remove(path)
                logger.info(f"Cache cleared: {path}")


class MemoryCacheStore:
    """In-process cache store with the same read/write contract."""

    def __init__(self, initial: Dict[str, bytes] | None = None):
        self._slots: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def write(self, key: str, data: bytes) -> None:
        with self._lock:
            self._slots[key] = bytes(data)

    def read(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._slots.get(key)

    def clear(self, key: str | None = None) -> None:
        with self._lock:
            if key:
                self._slots.pop(key, None)
            else:
                self._slots.clear()
