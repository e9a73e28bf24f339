#!/usr/bin/env python3
"""Parsing of the remote configuration document into an AppConfig."""
from __future__ import annotations
import json
from typing import Any, Dict, List

from .errors import MalformedConfig
from .models import AppConfig, ServerItem

# Sections handed to the UI layer untouched
PASSTHROUGH_SECTIONS = ("updates", "downloads", "legal", "contact", "update_data")


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _text(*candidates: Any) -> str:
    """First non-empty string among the candidates, stripped."""
    for value in candidates:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _server_id(value: Any, index: int) -> str:
    # JSON ids may be numbers; bool is excluded since it is an int subclass
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        text = str(value).strip()
        if text:
            return text
    return str(index)


def _servers(raw: Any) -> List[ServerItem]:
    servers: List[ServerItem] = []
    if not isinstance(raw, list):
        return servers
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            continue
        servers.append(ServerItem(
            id=_server_id(item.get("id"), index),
            name=_text(item.get("name")) or "Server",
            url=_text(item.get("url")),
        ))
    return servers


def _flag(features: Dict[str, bool], key: str, text: str) -> bool:
    if key in features:
        return features[key] and bool(text)
    return bool(text)


def parse_app_config(data: bytes | str, *, default_playlist_url: str) -> AppConfig:
    """
    Build an AppConfig from the raw configuration document.

    Both the sectioned layout (``app``, ``features``, ...) and the flat layout
    (``notice``, ``servers``, ...) are understood; every field is optional.

    Args:
        data: Raw JSON text or bytes
        default_playlist_url: Used when the document names no playlist

    Raises:
        MalformedConfig: the document is not valid JSON or not a JSON object
    """
    try:
        if isinstance(data, bytes):
            data = data.decode("utf-8-sig")
        doc = json.loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedConfig(f"Invalid configuration JSON: {e}") from e
    if not isinstance(doc, dict):
        raise MalformedConfig("Configuration document must be a JSON object")

    app = _section(doc, "app")
    features = {k: v for k, v in _section(doc, "features").items() if isinstance(v, bool)}
    servers = _servers(doc.get("servers"))

    playlist_url = _text(
        app.get("m3u_url"),
        doc.get("m3u_url"),
        *(server.url for server in servers),
        default_playlist_url,
    )

    welcome_text = _text(app.get("welcome_text"), app.get("welcome"), doc.get("welcome_text"))
    notice = _text(app.get("notice"), app.get("notification"), doc.get("notice"))

    return AppConfig(
        playlist_url=playlist_url,
        app_name=_text(app.get("name"), doc.get("name")),
        version=_text(app.get("version"), doc.get("version")),
        welcome_text=welcome_text,
        welcome_enabled=_flag(features, "show_welcome", welcome_text),
        notice=notice,
        notice_enabled=_flag(features, "show_notice", notice),
        about_notice=_text(app.get("about_notice"), doc.get("about_notice")),
        servers=tuple(servers),
        features=features,
        metadata={key: doc[key] for key in PASSTHROUGH_SECTIONS if key in doc},
    )
