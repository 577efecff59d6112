"""M3U playlist parser for the ``#EXTM3U`` / ``#EXTINF`` / URL-line subset."""

from __future__ import annotations

import re

from m3uscope.domain.entities import (
    DEFAULT_GROUP,
    DEFAULT_LIMITS,
    Channel,
    PlaylistLimits,
)

EXTINF_PREFIX = "#EXTINF:"
_STREAM_PREFIXES = ("http://", "https://")

# key="value" pairs inside an #EXTINF line (tvg-id, tvg-logo, group-title, ...)
_ATTR_RE = re.compile(r'(\w+[-\w]*)="([^"]*)"', re.ASCII)


def parse_extinf_attributes(info: str) -> dict[str, str]:
    """Extract ``key="value"`` attributes with lower-cased keys.

    Unterminated quotes simply don't match, so a malformed attribute is
    skipped instead of failing the line. Later duplicates win.
    """
    return {m.group(1).lower(): m.group(2) for m in _ATTR_RE.finditer(info)}


def _channel_from_extinf(info: str, limits: PlaylistLimits) -> Channel:
    comma = info.rfind(",")
    name = info[comma + 1 :].strip() if comma > -1 else "Unknown"
    attrs = parse_extinf_attributes(info)
    group = attrs.get("group-title") or DEFAULT_GROUP
    return Channel(
        name=name[: limits.max_name_length],
        group=group[: limits.max_group_length],
        url=None,
    )


def parse_playlist(
    text: str, limits: PlaylistLimits = DEFAULT_LIMITS
) -> list[Channel]:
    """Parse playlist text into channels in document order.

    An ``#EXTINF`` line opens a pending channel that the next URL line
    completes. A pending channel without a URL line is dropped when the
    next ``#EXTINF`` arrives or the input ends. URL lines without metadata
    become ``"Channel N"`` entries.
    """
    channels: list[Channel] = []
    pending: Channel | None = None

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue

        if line.startswith(EXTINF_PREFIX):
            pending = _channel_from_extinf(line[len(EXTINF_PREFIX) :], limits)
        elif line.startswith(_STREAM_PREFIXES):
            url = line[: limits.max_url_length]
            if pending is not None:
                channels.append(
                    Channel(name=pending.name, group=pending.group, url=url)
                )
                pending = None
            else:
                channels.append(
                    Channel(name=f"Channel {len(channels) + 1}", url=url)
                )

    return channels
