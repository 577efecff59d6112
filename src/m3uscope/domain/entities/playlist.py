"""Domain entities for playlist analysis.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

ChannelStatus = Literal["unknown", "live", "dead", "invalid", "unchecked"]

DEFAULT_GROUP = "Uncategorized"


@dataclass(frozen=True)
class Channel:
    """One playlist entry.

    Probe fields (``status``, ``http_status``, ``response_time``,
    ``content_type``, ``error``) stay at their defaults until the batch
    prober merges a ``ProbeOutcome`` into a copy of the record.
    """

    name: str
    url: str | None
    group: str = DEFAULT_GROUP
    status: ChannelStatus = "unknown"
    http_status: int = 0
    response_time: int | None = None  # milliseconds
    content_type: str | None = None
    error: str | None = None  # "timeout", "connect_error", ...


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single reachability probe against a channel URL."""

    status: ChannelStatus
    http_status: int = 0
    response_time: int = 0
    content_type: str | None = None
    error: str | None = None

    @property
    def is_live(self) -> bool:
        return self.status == "live"


@dataclass(frozen=True)
class GroupCount:
    name: str
    count: int


@dataclass(frozen=True)
class AnalysisSummary:
    total_channels: int
    checked_channels: int
    live_channels: int
    dead_channels: int
    unchecked_channels: int
    live_percentage: int
    avg_response_time: int
    group_count: int


@dataclass(frozen=True)
class AnalysisOptions:
    check_channels: bool = True
    max_channels_to_check: int = 50


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregated playlist statistics.

    ``groups`` and ``channels`` are truncated for the payload; ``summary``
    always reflects the full parsed playlist.
    """

    summary: AnalysisSummary
    groups: list[GroupCount] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)

    # Set by the URL-driven flow only
    url: str | None = None
    is_http: bool = False
    timestamp: datetime | None = None


@dataclass(frozen=True)
class FetchedPlaylist:
    content: str
    url: str
    upgraded: bool = False

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PlaylistValidation:
    valid: bool
    upgraded: bool
    is_http: bool


@dataclass(frozen=True)
class ChannelCheckReport:
    """Result of an ad-hoc single channel check."""

    url: str
    status: ChannelStatus
    http_status: int
    response_time: int
    content_type: str | None
    protocol: str
    stream_type: str
    server: str
    timestamp: datetime


class PlaylistError(Exception):
    """Base error for playlist use cases.

    ``reason`` is a stable machine-readable code; ``message`` is safe to
    show to API clients.
    """

    default_reason = "playlist_error"

    def __init__(self, message: str, *, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason


class InvalidInput(PlaylistError):
    default_reason = "invalid_input"


class FetchFailure(PlaylistError):
    default_reason = "fetch_failure"


class EmptyPlaylist(PlaylistError):
    default_reason = "no_channels"

    def __init__(self, message: str = "No channels found in playlist") -> None:
        super().__init__(message)
