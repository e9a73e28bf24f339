#!/usr/bin/env python3
"""M3U playlist parsing utilities."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List

from ..config_manager import DEFAULT_USER_AGENT
from ..errors import EmptyPlaylist
from ..models import Channel
from .attributes import DEFAULT_GROUP, EntryMetadata, extract_metadata
from .headers import HeaderAccumulator, is_option_line, split_stream_url

logger = logging.getLogger(__name__)

ProgressCb = Callable[[str], None] | None

METADATA_PREFIX = '#EXTINF:'


def parse_channels(
    lines: Iterable[str],
    *,
    default_user_agent: str = DEFAULT_USER_AGENT,
    fallback_group: str = DEFAULT_GROUP,
    progress_callback: ProgressCb = None,
) -> List[Channel]:
    """
    Parse M3U playlist lines into Channel records, in document order.

    Args:
        lines: Playlist lines
        default_user_agent: User-Agent for channels that declare none
        fallback_group: Group for entries without a group-title attribute
        progress_callback: Optional callback function for progress updates

    Returns:
        Non-empty list of channels

    Raises:
        EmptyPlaylist: when no entry produced a playable channel
    """
    if progress_callback:
        progress_callback("Parsing channels...")

    channels: List[Channel] = []
    headers = HeaderAccumulator(default_user_agent)
    pending: EntryMetadata | None = None
    dropped = 0

    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        if line.startswith(METADATA_PREFIX):
            if pending is not None:
                logger.debug(f"Entry {pending.name!r} has no URL, replaced by next #EXTINF")
            pending = extract_metadata(line, len(channels) + 1, fallback_group=fallback_group)
            continue

        if is_option_line(line):
            headers.add_option_line(line)
            continue

        if line.startswith('#'):
            continue

        # URL line
        url, suffix = split_stream_url(line)
        if pending is not None and url:
            if suffix:
                headers.apply_pipe_suffix(suffix)
            channels.append(Channel(
                name=pending.name,
                stream_url=url,
                group=pending.group,
                logo_url=pending.logo,
                headers=headers.build(),
                tvg_id=pending.tvg_id,
                tvg_name=pending.tvg_name,
            ))
        else:
            dropped += 1
        pending = None
        headers.reset()

    if dropped:
        logger.debug(f"Dropped {dropped} URL lines without a usable entry")

    if progress_callback:
        progress_callback(f"Parsed {len(channels)} channels")

    if not channels:
        raise EmptyPlaylist("Playlist contains no playable channels")
    return channels


def decode_playlist(data: bytes | str) -> str:
    if isinstance(data, bytes):
        # utf-8-sig drops a leading BOM
        return data.decode('utf-8-sig', errors='replace')
    return data.lstrip('\ufeff')


def parse_playlist(data: bytes | str, **kwargs) -> List[Channel]:
    """Decode a raw playlist document and parse it. See parse_channels."""
    return parse_channels(decode_playlist(data).splitlines(), **kwargs)
