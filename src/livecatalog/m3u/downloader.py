#!/usr/bin/env python3
"""Timed HTTP retrieval of the configuration and playlist documents."""
from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from ..config_manager import DEFAULT_USER_AGENT, get_default_config, get_timeout
from ..errors import HttpStatusError, NetworkTimeout, NetworkUnreachable

logger = logging.getLogger(__name__)


def download(url: str, *, timeout: float, user_agent: str) -> bytes:
    """
    Download a document and return its raw bytes. No retries.

    Raises:
        NetworkTimeout: the request did not complete within ``timeout``
        NetworkUnreachable: connection or other transport failure
        HttpStatusError: any non-2xx response
    """
    headers = {'User-Agent': user_agent}
    try:
        resp = requests.get(url, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise NetworkTimeout(url, timeout) from e
    except requests.exceptions.RequestException as e:
        raise NetworkUnreachable(url, f"Download failed: {e}") from e

    if not 200 <= resp.status_code < 300:
        raise HttpStatusError(url, resp.status_code)
    logger.debug(f"Downloaded {len(resp.content)} bytes from {url}")
    return resp.content


class RemoteSource:
    """Fetches the remote configuration and playlists named by it."""

    def __init__(self, config: Dict[str, Any] | None = None):
        self.config = config or get_default_config()

    @property
    def user_agent(self) -> str:
        return self.config.get('default_user_agent') or DEFAULT_USER_AGENT

    def fetch_config(self) -> bytes:
        return download(self.config['config_url'], timeout=get_timeout(self.config, 'config'), user_agent=self.user_agent)

    def fetch_playlist(self, url: str) -> bytes:
        return download(url, timeout=get_timeout(self.config, 'playlist'), user_agent=self.user_agent)
