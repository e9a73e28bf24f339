#!/usr/bin/env python3
"""Catalog orchestration: fetch live documents or fall back to the cache.

The service is the only writer of the cache and the only producer of
CatalogSnapshot values. Consumers call ``reload()`` and read
``current_snapshot()``; filtering is done with ``m3u.filters.search_filter``.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Tuple

from .app_config import parse_app_config
from .cache_store import CONFIG_KEY, PLAYLIST_KEY, FileCacheStore
from .config_manager import DEFAULT_USER_AGENT, load_config
from .errors import (
    EmptyPlaylist,
    FetchError,
    MalformedConfig,
    NoConfigAvailable,
    NoPlaylistAvailable,
    ReloadCancelled,
)
from .m3u.downloader import RemoteSource
from .m3u.filters import build_group_index
from .m3u.parser import parse_playlist
from .models import AppConfig, CatalogSnapshot, Channel, SourceState

logger = logging.getLogger(__name__)

ProgressCb = Callable[[str], None] | None


class CatalogService:
    """Owns the current catalog snapshot and the fetch-or-fallback policy."""

    def __init__(self, config: Dict[str, Any] | None = None, *, config_path: str | None = None, remote=None, cache=None):
        self.config = config or load_config(config_path)
        self.remote = remote or RemoteSource(self.config)
        self.cache = cache or FileCacheStore(self.config)
        self._lock = threading.Lock()
        # serializes cache writes and generation changes; never held by readers
        self._write_lock = threading.Lock()
        self._generation = 0
        self._snapshot = CatalogSnapshot.empty()

    # --- snapshot access -------------------------------------------------
    def current_snapshot(self) -> CatalogSnapshot:
        with self._lock:
            return self._snapshot

    def cancel(self) -> None:
        """Supersede any reload in flight; it will neither write nor publish."""
        with self._write_lock, self._lock:
            self._generation += 1

    def _begin(self) -> int:
        with self._write_lock, self._lock:
            self._generation += 1
            return self._generation

    def _check_current(self, generation: int) -> None:
        # caller holds self._lock or self._write_lock
        if generation != self._generation:
            raise ReloadCancelled(f"Reload #{generation} superseded by #{self._generation}")

    def _ensure_current(self, generation: int) -> None:
        with self._lock:
            self._check_current(generation)

    def _store(self, generation: int, key: str, data: bytes) -> None:
        with self._write_lock:
            self._check_current(generation)
            try:
                self.cache.write(key, data)
            except OSError as e:
                # A failed cache write does not fail the reload
                logger.error(f"Failed to cache {key}: {e}")

    # --- parsing helpers ---------------------------------------------------
    def _parse_config(self, raw: bytes) -> AppConfig:
        return parse_app_config(raw, default_playlist_url=self.config.get('default_playlist_url', ''))

    def _parse_playlist(self, raw: bytes, progress_callback: ProgressCb = None) -> List[Channel]:
        return parse_playlist(
            raw,
            default_user_agent=self.config.get('default_user_agent') or DEFAULT_USER_AGENT,
            fallback_group=self.config.get('fallback_group', 'Others'),
            progress_callback=progress_callback,
        )

    # --- resolution steps ----------------------------------------------------
    def _resolve_config(self, generation: int) -> Tuple[AppConfig, SourceState]:
        try:
            raw = self.remote.fetch_config()
            app_config = self._parse_config(raw)
        except (FetchError, MalformedConfig) as e:
            logger.warning(f"Remote configuration unavailable, trying cache: {e}")
        except Exception as e:  # noqa: BLE001
            logger.exception(f"Unexpected error fetching configuration, trying cache: {e}")
        else:
            self._store(generation, CONFIG_KEY, raw)
            return app_config, SourceState.LIVE

        cached = self.cache.read(CONFIG_KEY)
        if cached is None:
            raise NoConfigAvailable("No configuration available (remote failed, cache empty)")
        try:
            app_config = self._parse_config(cached)
        except MalformedConfig as e:
            raise NoConfigAvailable(f"Cached configuration is unusable: {e}") from e
        logger.info("Using cached configuration")
        return app_config, SourceState.CACHED

    def _resolve_playlist(self, generation: int, url: str, progress_callback: ProgressCb) -> Tuple[List[Channel], SourceState]:
        try:
            raw = self.remote.fetch_playlist(url)
            channels = self._parse_playlist(raw, progress_callback)
        except (FetchError, EmptyPlaylist) as e:
            logger.warning(f"Remote playlist unavailable, trying cache: {e}")
        except Exception as e:  # noqa: BLE001
            logger.exception(f"Unexpected error fetching playlist, trying cache: {e}")
        else:
            # Only parsed, non-empty playlists reach the cache
            self._store(generation, PLAYLIST_KEY, raw)
            return channels, SourceState.LIVE

        cached = self.cache.read(PLAYLIST_KEY)
        if cached is None:
            raise NoPlaylistAvailable(f"No playlist available for {url} (remote failed, cache empty)")
        try:
            channels = self._parse_playlist(cached, progress_callback)
        except EmptyPlaylist as e:
            raise NoPlaylistAvailable(f"Cached playlist is unusable: {e}") from e
        logger.info(f"Using cached playlist ({len(channels)} channels)")
        return channels, SourceState.CACHED

    # --- public API ------------------------------------------------------------
    def reload(self, server_id: str | None = None, progress_callback: ProgressCb = None) -> CatalogSnapshot:
        """
        Fetch configuration and playlist (or their cached copies) and publish a new snapshot.

        Args:
            server_id: Optional id of a configured server whose playlist to load instead of the default
            progress_callback: Optional callback function for progress updates

        Returns:
            The newly published snapshot

        Raises:
            NoConfigAvailable: remote config failed and nothing usable is cached
            NoPlaylistAvailable: remote playlist failed and nothing usable is cached
            ReloadCancelled: a newer reload or cancel() superseded this call
        """
        generation = self._begin()

        if progress_callback:
            progress_callback("Loading configuration...")
        app_config, config_state = self._resolve_config(generation)
        self._ensure_current(generation)

        server = app_config.find_server(server_id)
        if server_id and server is None:
            logger.warning(f"Unknown server {server_id!r}, using default playlist")
        url = server.url if server and server.url else app_config.playlist_url

        if progress_callback:
            progress_callback("Loading playlist...")
        channels, playlist_state = self._resolve_playlist(generation, url, progress_callback)

        both_live = config_state is SourceState.LIVE and playlist_state is SourceState.LIVE
        snapshot = CatalogSnapshot(
            config=app_config,
            channels=tuple(channels),
            groups=build_group_index(channels),
            source_state=SourceState.LIVE if both_live else SourceState.CACHED,
            config_state=config_state,
            playlist_state=playlist_state,
            loaded_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._check_current(generation)
            self._snapshot = snapshot

        logger.info(f"Catalog loaded: {len(snapshot.channels)} channels in {len(snapshot.groups) - 1} groups ({snapshot.source_state.value})")
        if progress_callback:
            progress_callback(f"Loaded {len(snapshot.channels)} channels")
        return snapshot
