#!/usr/bin/env python3
"""Attribute and display-name extraction for #EXTINF lines."""
from __future__ import annotations

import re
from typing import Dict, NamedTuple

DEFAULT_GROUP = "Others"

# key="value" pairs; an unterminated quote simply does not match
_ATTRIBUTE_RE = re.compile(r'([A-Za-z0-9_-]+)="([^"]*)"')


class EntryMetadata(NamedTuple):
    name: str
    logo: str
    group: str
    tvg_id: str
    tvg_name: str


def extract_attributes(line: str) -> Dict[str, str]:
    """
    Collect every quoted key="value" attribute of a metadata line.

    Keys are case-sensitive. When a key repeats, the first occurrence wins.
    """
    attributes: Dict[str, str] = {}
    for key, value in _ATTRIBUTE_RE.findall(line):
        attributes.setdefault(key, value)
    return attributes


def _display_name(line: str) -> str:
    # Commas inside quoted attribute values are not name separators
    bare = _ATTRIBUTE_RE.sub('', line)
    _, sep, tail = bare.rpartition(',')
    return tail.strip() if sep else ''


def extract_metadata(line: str, position: int, *, fallback_group: str = DEFAULT_GROUP) -> EntryMetadata:
    """
    Extract display name, logo and group from an #EXTINF line.

    Args:
        line: The metadata line, e.g. '#EXTINF:-1 tvg-logo="L" group-title="G",Name'
        position: 1-based index of the channel being built, used for synthesized names
        fallback_group: Group used when no group-title attribute is present

    Returns:
        EntryMetadata with never-empty name
    """
    attributes = extract_attributes(line)
    tvg_name = attributes.get('tvg-name', '')

    name = _display_name(line) or tvg_name.strip() or f"Channel {position}"

    return EntryMetadata(
        name=name,
        logo=attributes.get('tvg-logo', ''),
        group=attributes.get('group-title', fallback_group),
        tvg_id=attributes.get('tvg-id', ''),
        tvg_name=tvg_name,
    )
