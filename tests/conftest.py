"""
Shared fixtures for catalog engine tests.
"""
import json
import os
import sys

import pytest

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from livecatalog.cache_store import MemoryCacheStore
from livecatalog.config_manager import get_default_config
from livecatalog.errors import NetworkUnreachable


SAMPLE_CONFIG = {
    "app": {
        "name": "mxonlive",
        "version": "6.0",
        "notice": "Welcome back",
        "m3u_url": "http://example.com/live.m3u",
    },
    "features": {"show_notice": True},
    "updates": {"latest": "6.1", "url": "http://example.com/update"},
    "contact": {"email": "team@example.com"},
}

SAMPLE_PLAYLIST = '''#EXTM3U
#EXTINF:-1 tvg-logo="http://logo.example.com/news.png" group-title="News",World News
http://stream.example.com/news.m3u8
#EXTINF:-1 group-title="Sports",Sports One
#EXTVLCOPT:http-user-agent=SportsAgent/1.0
#EXTVLCOPT:http-referrer=http://sports.example.com/
http://stream.example.com/sports.m3u8
#EXTINF:-1 tvg-logo="" group-title="Movies",Cinema Max
http://stream.example.com/cinema.m3u8|User-Agent=CinemaAgent
'''


class FakeRemote:
    """RemoteSource stand-in returning canned documents or raising."""

    def __init__(self, config=None, playlist=None, config_error=None, playlist_error=None):
        self.config = config
        self.playlist = playlist
        self.config_error = config_error
        self.playlist_error = playlist_error
        self.config_calls = 0
        self.playlist_urls = []

    def fetch_config(self):
        self.config_calls += 1
        if self.config_error:
            raise self.config_error
        return self.config

    def fetch_playlist(self, url):
        self.playlist_urls.append(url)
        if self.playlist_error:
            raise self.playlist_error
        return self.playlist


class RecordingCache(MemoryCacheStore):
    """Memory cache that remembers every write."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    def write(self, key, data):
        self.writes.append(key)
        super().write(key, data)


def failing_remote():
    return FakeRemote(
        config_error=NetworkUnreachable("http://config", "down"),
        playlist_error=NetworkUnreachable("http://playlist", "down"),
    )


@pytest.fixture
def settings(tmp_path):
    config = get_default_config()
    config["cache"]["directory"] = str(tmp_path / "cache")
    return config


@pytest.fixture
def config_bytes():
    return json.dumps(SAMPLE_CONFIG).encode("utf-8")


@pytest.fixture
def playlist_bytes():
    return SAMPLE_PLAYLIST.encode("utf-8")
