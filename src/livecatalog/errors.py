#!/usr/bin/env python3
"""Exception types raised by the catalog engine."""
from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog engine errors."""


# --- fetch layer -----------------------------------------------------------
class FetchError(CatalogError):
    """A remote document could not be retrieved."""

    def __init__(self, url: str, message: str = ""):
        self.url = url
        super().__init__(message or f"Failed to fetch {url}")


class NetworkTimeout(FetchError):
    def __init__(self, url: str, timeout: float):
        self.timeout = timeout
        super().__init__(url, f"Timed out after {timeout}s fetching {url}")


class NetworkUnreachable(FetchError):
    pass


class HttpStatusError(FetchError):
    def __init__(self, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(url, f"HTTP {status_code} fetching {url}")


# --- parse layer -----------------------------------------------------------
class MalformedConfig(CatalogError):
    """The configuration document is not a JSON object."""


class EmptyPlaylist(CatalogError):
    """Parsing produced no playable channel."""


# --- terminal reload failures ----------------------------------------------
class NoConfigAvailable(CatalogError):
    """Neither the remote nor the cached configuration could be used."""


class NoPlaylistAvailable(CatalogError):
    """Neither the remote nor the cached playlist could be used."""


class ReloadCancelled(CatalogError):
    """A newer reload superseded this one before it could publish."""
