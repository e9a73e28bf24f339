#!/usr/bin/env python3
"""Immutable records shared between the parser, the service and consumers."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

ALL_GROUPS = "All"


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    """Read-only view over a private copy of ``mapping``."""
    return MappingProxyType(dict(mapping))


class SourceState(str, Enum):
    LIVE = "live"
    CACHED = "cached"
    EMPTY = "empty"


@dataclass(frozen=True)
class Channel:
    """A single playable playlist entry."""

    name: str
    stream_url: str
    group: str
    logo_url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    tvg_id: str = ""
    tvg_name: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'headers', _frozen(self.headers))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'url': self.stream_url,
            'group': self.group,
            'logo': self.logo_url,
            'headers': dict(self.headers),
            'tvg_id': self.tvg_id,
            'tvg_name': self.tvg_name,
        }


@dataclass(frozen=True)
class ServerItem:
    id: str
    name: str
    url: str


@dataclass(frozen=True)
class AppConfig:
    """Remote-controlled behavior descriptor.

    ``metadata`` carries the update/download/legal/contact sections untouched;
    the engine never interprets them.
    """

    playlist_url: str
    app_name: str = ""
    version: str = ""
    welcome_text: str = ""
    welcome_enabled: bool = False
    notice: str = ""
    notice_enabled: bool = False
    about_notice: str = ""
    servers: Tuple[ServerItem, ...] = ()
    features: Mapping[str, bool] = field(default_factory=dict, hash=False)
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'features', _frozen(self.features))
        object.__setattr__(self, 'metadata', _frozen(self.metadata))

    def find_server(self, server_id: str | None) -> Optional[ServerItem]:
        if not server_id:
            return None
        for server in self.servers:
            if server.id == server_id:
                return server
        return None


@dataclass(frozen=True)
class CatalogSnapshot:
    """Externally visible catalog state, replaced as a whole on every reload."""

    config: Optional[AppConfig]
    channels: Tuple[Channel, ...]
    groups: Tuple[str, ...]
    source_state: SourceState
    config_state: SourceState = SourceState.EMPTY
    playlist_state: SourceState = SourceState.EMPTY
    loaded_at: Optional[datetime] = None

    @classmethod
    def empty(cls) -> "CatalogSnapshot":
        return cls(config=None, channels=(), groups=(ALL_GROUPS,), source_state=SourceState.EMPTY)

    @property
    def is_empty(self) -> bool:
        return self.source_state is SourceState.EMPTY
