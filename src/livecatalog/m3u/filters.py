#!/usr/bin/env python3
"""Group index and search filtering over a catalog snapshot."""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..models import ALL_GROUPS, CatalogSnapshot, Channel


def build_group_index(channels: Iterable[Channel]) -> Tuple[str, ...]:
    """'All' followed by the distinct channel groups in lexicographic order."""
    groups = {c.group for c in channels}
    groups.discard(ALL_GROUPS)
    return (ALL_GROUPS, *sorted(groups))


def search_filter(source: CatalogSnapshot | Sequence[Channel], query: str = "", group: str | None = ALL_GROUPS) -> List[Channel]:
    """
    Channels whose name or group contains ``query`` (case-insensitive),
    restricted to ``group`` unless it is 'All'.

    Pure: the snapshot is never modified and the result is a new list.
    """
    channels = source.channels if isinstance(source, CatalogSnapshot) else source
    term = (query or "").strip().lower()
    filtered: List[Channel] = []
    for channel in channels:
        if group is not None and group != ALL_GROUPS and channel.group != group:
            continue
        if term and term not in channel.name.lower() and term not in channel.group.lower():
            continue
        filtered.append(channel)
    return filtered
