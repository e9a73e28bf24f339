"""
Tests for remote retrieval, the cache store and engine settings.
"""
import json
import os
from unittest.mock import Mock, patch

import pytest
import requests

from livecatalog.cache_store import FileCacheStore, MemoryCacheStore
from livecatalog.config_manager import DEFAULT_USER_AGENT, get_cache_path, get_default_config, get_timeout, load_config
from livecatalog.errors import FetchError, HttpStatusError, NetworkTimeout, NetworkUnreachable
from livecatalog.m3u.downloader import RemoteSource


def _response(status_code=200, content=b"ok"):
    resp = Mock()
    resp.status_code = status_code
    resp.content = content
    return resp


class TestRemoteSource:
    """Test HTTP retrieval and error mapping."""

    def test_fetch_config_returns_bytes(self):
        source = RemoteSource()
        with patch("livecatalog.m3u.downloader.requests.get", return_value=_response(content=b"{}")) as get:
            assert source.fetch_config() == b"{}"
        args, kwargs = get.call_args
        assert args[0] == source.config["config_url"]
        assert kwargs["timeout"] == 10
        assert kwargs["headers"]["User-Agent"] == source.config["default_user_agent"]

    def test_fetch_playlist_uses_playlist_timeout(self):
        source = RemoteSource()
        with patch("livecatalog.m3u.downloader.requests.get", return_value=_response(content=b"#EXTM3U")) as get:
            assert source.fetch_playlist("http://example.com/a.m3u") == b"#EXTM3U"
        assert get.call_args.kwargs["timeout"] == 20

    def test_timeout(self):
        with patch("livecatalog.m3u.downloader.requests.get", side_effect=requests.exceptions.ReadTimeout("slow")):
            with pytest.raises(NetworkTimeout):
                RemoteSource().fetch_config()

    def test_connection_error(self):
        with patch("livecatalog.m3u.downloader.requests.get", side_effect=requests.exceptions.ConnectionError("dns")):
            with pytest.raises(NetworkUnreachable):
                RemoteSource().fetch_playlist("http://nowhere.invalid/")

    @pytest.mark.parametrize("status", [301, 404, 500, 503])
    def test_non_2xx_status(self, status):
        with patch("livecatalog.m3u.downloader.requests.get", return_value=_response(status_code=status)):
            with pytest.raises(HttpStatusError) as exc:
                RemoteSource().fetch_config()
        assert exc.value.status_code == status
        assert isinstance(exc.value, FetchError)

    def test_no_retries(self):
        with patch("livecatalog.m3u.downloader.requests.get", side_effect=requests.exceptions.ConnectionError()) as get:
            with pytest.raises(NetworkUnreachable):
                RemoteSource().fetch_config()
        assert get.call_count == 1

    def test_user_agent_falls_back_to_default(self):
        source = RemoteSource({"config_url": "http://example.com/config.json", "default_user_agent": ""})
        with patch("livecatalog.m3u.downloader.get_default_config") as defaults:
            assert source.user_agent == DEFAULT_USER_AGENT
        defaults.assert_not_called()


class TestFileCacheStore:
    """Test on-disk cache slots."""

    def test_missing_slot_reads_none(self, settings):
        assert FileCacheStore(settings).read("config") is None

    def test_write_then_read(self, settings):
        store = FileCacheStore(settings)
        store.write("playlist", b"#EXTM3U\n")
        assert store.read("playlist") == b"#EXTM3U\n"
        assert store.read("config") is None

    def test_last_write_wins(self, settings):
        store = FileCacheStore(settings)
        store.write("config", b"one")
        store.write("config", b"two")
        assert store.read("config") == b"two"

    def test_raw_text_on_disk(self, settings):
        store = FileCacheStore(settings)
        store.write("config", b'{"app": {}}')
        with open(get_cache_path(settings, "config"), "rb") as f:
            assert f.read() == b'{"app": {}}'

    def test_no_temp_files_left(self, settings):
        store = FileCacheStore(settings)
        store.write("config", b"x")
        assert os.listdir(settings["cache"]["directory"]) == ["config.json"]

    def test_clear(self, settings):
        store = FileCacheStore(settings)
        store.write("config", b"x")
        store.write("playlist", b"y")
        store.clear("config")
        assert store.read("config") is None
        assert store.read("playlist") == b"y"
        store.clear()
        assert store.read("playlist") is None


class TestMemoryCacheStore:
    def test_roundtrip_and_clear(self):
        store = MemoryCacheStore({"config": b"a"})
        store.write("playlist", b"b")
        assert store.read("config") == b"a"
        assert store.read("playlist") == b"b"
        store.clear()
        assert store.read("config") is None


class TestSettings:
    """Test engine settings loading."""

    def test_defaults_when_no_file(self, tmp_path):
        assert load_config(str(tmp_path / "missing.json")) == get_default_config()

    def test_defaults_on_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(str(path)) == get_default_config()

    def test_partial_file_merged_over_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"fallback_group": "Uncategorized", "network": {"config_timeout": 5}}), encoding="utf-8")
        config = load_config(str(path))
        assert config["fallback_group"] == "Uncategorized"
        assert config["network"]["config_timeout"] == 5
        assert config["network"]["playlist_timeout"] == 20
        assert config["default_user_agent"] == get_default_config()["default_user_agent"]

    def test_default_copy_is_independent(self):
        config = get_default_config()
        config["network"]["config_timeout"] = 99
        assert get_default_config()["network"]["config_timeout"] == 10

    @pytest.mark.parametrize("value", [0, -1, "soon", None])
    def test_timeout_is_always_finite_and_positive(self, value):
        config = get_default_config()
        config["network"]["playlist_timeout"] = value
        assert get_timeout(config, "playlist") == 20

    def test_cache_paths(self, settings):
        directory = settings["cache"]["directory"]
        assert get_cache_path(settings, "config") == os.path.join(directory, "config.json")
        assert get_cache_path(settings, "playlist") == os.path.join(directory, "playlist.m3u")
