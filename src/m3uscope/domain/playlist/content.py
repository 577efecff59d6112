"""Heuristic check whether fetched text is a playlist at all."""

from __future__ import annotations

import re

_URL_LINE_RE = re.compile(r"^https?://", re.IGNORECASE)


def looks_like_playlist(content: object) -> bool:
    """Return *True* when *content* looks like an M3U playlist.

    First match wins (case-insensitive):
    - starts with ``#EXTM3U``
    - contains ``#EXTINF:`` anywhere
    - any line starts with ``http://`` or ``https://``
    """
    if not content or not isinstance(content, str):
        return False

    lowered = content.lower().strip()
    if lowered.startswith("#extm3u"):
        return True
    if "#extinf:" in lowered:
        return True
    return any(_URL_LINE_RE.match(line.strip()) for line in content.split("\n"))
