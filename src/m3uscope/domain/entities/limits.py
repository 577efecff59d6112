"""Size and bound limits for playlist handling.

Pure value object, passed explicitly into the parser, validator and use
cases so callers can override every bound.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlaylistLimits:
    """Bounds applied while parsing and aggregating a playlist."""

    max_url_length: int = 2048
    max_channels_to_check: int = 100
    default_channels_to_check: int = 50
    max_playlist_bytes: int = 10 * 1024 * 1024
    max_name_length: int = 200
    max_group_length: int = 100
    max_groups_in_result: int = 50
    max_channels_in_result: int = 200


DEFAULT_LIMITS = PlaylistLimits()
