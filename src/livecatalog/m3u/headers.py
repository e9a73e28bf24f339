#!/usr/bin/env python3
"""Stream header directives: option lines and inline pipe syntax."""
from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from ..config_manager import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

OPTION_PREFIXES = ('#EXTVLCOPT:', '#EXTHTTP:', '#KODIPROP:')

# lower-cased directive key -> canonical header name
_RECOGNIZED_KEYS = {
    'user-agent': 'User-Agent',
    'useragent': 'User-Agent',
    'referer': 'Referer',
    'referrer': 'Referer',
    'cookie': 'Cookie',
}


def is_option_line(line: str) -> bool:
    return line.startswith(OPTION_PREFIXES)


def canonical_header(key: str) -> str | None:
    """Map a directive key such as 'http-user-agent' to its header name."""
    key = key.strip().lower()
    if key.startswith('http-'):
        key = key[len('http-'):]
    return _RECOGNIZED_KEYS.get(key)


def split_stream_url(line: str) -> Tuple[str, str]:
    """Split 'url|k=v&k=v' into the playback URL and the raw suffix."""
    url, _, suffix = line.partition('|')
    return url.strip(), suffix.strip()


class HeaderAccumulator:
    """Collects headers for the channel currently being assembled.

    Option lines are recorded first; the pipe suffix of the URL line is applied
    last and overrides them.
    """

    def __init__(self, default_user_agent: str = DEFAULT_USER_AGENT):
        self.default_user_agent = default_user_agent
        self._headers: Dict[str, str] = {}

    def reset(self) -> None:
        self._headers = {}

    def _set(self, key: str, value: str) -> bool:
        header = canonical_header(key)
        if header is None:
            return False
        self._headers[header] = value.strip()
        return True

    def add_option_line(self, line: str) -> None:
        _, _, payload = line.partition(':')
        payload = payload.strip()
        if line.startswith('#EXTHTTP:') and payload.startswith('{'):
            self._add_json_payload(payload)
            return
        key, sep, value = payload.partition('=')
        if not sep:
            logger.debug(f"Ignoring option line without key=value: {line!r}")
            return
        if not self._set(key, value):
            logger.debug(f"Ignoring unrecognized option {key!r}")

    def _add_json_payload(self, payload: str) -> None:
        try:
            data = json.loads(payload)
        except ValueError:
            logger.debug(f"Ignoring malformed #EXTHTTP payload: {payload!r}")
            return
        if not isinstance(data, dict):
            return
        for key, value in data.items():
            if isinstance(value, str):
                self._set(str(key), value)

    def apply_pipe_suffix(self, suffix: str) -> None:
        for pair in suffix.split('&'):
            key, sep, value = pair.partition('=')
            if sep:
                self._set(key, value)

    def build(self) -> Mapping[str, str]:
        """Return a read-only copy of the collected headers with a User-Agent guaranteed."""
        headers = dict(self._headers)
        if not headers.get('User-Agent'):
            headers['User-Agent'] = self.default_user_agent
        return MappingProxyType(headers)
