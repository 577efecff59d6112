"""Playlist analysis use case: parse, optionally probe, aggregate."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Sequence

import structlog

from m3uscope.application.use_cases.fetch_playlist import FetchPlaylistUseCase
from m3uscope.domain.entities import (
    DEFAULT_LIMITS,
    AnalysisOptions,
    AnalysisResult,
    AnalysisSummary,
    Channel,
    EmptyPlaylist,
    GroupCount,
    InvalidInput,
    PlaylistLimits,
)
from m3uscope.domain.playlist.parser import parse_playlist
from m3uscope.domain.playlist.urls import is_http_url
from m3uscope.domain.ports import BatchProberPort

log = structlog.get_logger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def group_histogram(channels: Sequence[Channel]) -> list[GroupCount]:
    """Count channels per group, largest first.

    Ties keep the order in which groups were first seen.
    """
    counts = Counter(ch.group for ch in channels)
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [GroupCount(name=name, count=count) for name, count in ordered]


def summarize(
    channels: Sequence[Channel],
    *,
    cap: int,
    group_count: int,
) -> AnalysisSummary:
    """Compute summary statistics over the full channel list.

    ``live_percentage`` is relative to the checked subset; with nothing
    checked it is 0.
    """
    total = len(channels)
    checked = min(cap, total)
    live = sum(1 for ch in channels if ch.status == "live")
    dead = sum(1 for ch in channels if ch.status == "dead")

    timed = [
        ch.response_time
        for ch in channels
        if ch.status == "live" and ch.response_time
    ]
    avg_response_time = _round_half_up(sum(timed) / len(timed)) if timed else 0

    return AnalysisSummary(
        total_channels=total,
        checked_channels=checked,
        live_channels=live,
        dead_channels=dead,
        unchecked_channels=max(0, total - cap),
        live_percentage=_round_half_up(live / checked * 100) if checked else 0,
        avg_response_time=avg_response_time,
        group_count=group_count,
    )


class AnalyzePlaylistUseCase:
    """Analyzes playlist content and produces an AnalysisResult.

    Flow:
        1. Validate options
        2. Parse channels (EmptyPlaylist when none)
        3. Build the group histogram over all channels
        4. Probe the first ``max_channels_to_check`` channels (optional)
        5. Summarize and truncate the payload
    """

    def __init__(
        self,
        batch_prober: BatchProberPort,
        fetch_uc: FetchPlaylistUseCase | None = None,
        limits: PlaylistLimits = DEFAULT_LIMITS,
    ) -> None:
        self.batch_prober = batch_prober
        self.fetch_uc = fetch_uc
        self.limits = limits

    def _validate_options(self, options: AnalysisOptions) -> None:
        cap = options.max_channels_to_check
        if isinstance(cap, bool) or not isinstance(cap, int):
            raise InvalidInput(
                "maxChannelsToCheck must be an integer", reason="invalid_options"
            )
        if not 1 <= cap <= self.limits.max_channels_to_check:
            raise InvalidInput(
                "maxChannelsToCheck must be between 1 and "
                f"{self.limits.max_channels_to_check}",
                reason="invalid_options",
            )

    async def analyze(
        self, content: str, options: AnalysisOptions | None = None
    ) -> AnalysisResult:
        """Analyze already-fetched, already-validated playlist text.

        Raises:
            InvalidInput: ``max_channels_to_check`` out of range.
            EmptyPlaylist: No channels parsed.
        """
        options = options or AnalysisOptions(
            max_channels_to_check=self.limits.default_channels_to_check
        )
        self._validate_options(options)

        channels = parse_playlist(content, self.limits)
        if not channels:
            raise EmptyPlaylist()

        groups = group_histogram(channels)
        cap = options.max_channels_to_check

        if options.check_channels:
            checked = await self.batch_prober.batch_probe(channels[:cap])
            rest = [replace(ch, status="unchecked") for ch in channels[cap:]]
            channels = checked + rest

        summary = summarize(channels, cap=cap, group_count=len(groups))

        log.info(
            "analysis_completed",
            total=summary.total_channels,
            checked=summary.checked_channels if options.check_channels else 0,
            live=summary.live_channels,
            dead=summary.dead_channels,
            groups=summary.group_count,
        )

        return AnalysisResult(
            summary=summary,
            groups=groups[: self.limits.max_groups_in_result],
            channels=channels[: self.limits.max_channels_in_result],
        )

    async def execute(
        self, url: str, options: AnalysisOptions | None = None
    ) -> AnalysisResult:
        """Fetch the playlist at *url* and analyze it.

        Raises:
            InvalidInput: Bad URL or options.
            FetchFailure: Download failed or content is not a playlist.
            EmptyPlaylist: No channels parsed.
        """
        if self.fetch_uc is None:
            raise RuntimeError("AnalyzePlaylistUseCase.execute requires fetch_uc")

        if options is not None:
            self._validate_options(options)

        fetched = await self.fetch_uc.execute(url)
        result = await self.analyze(fetched.content, options)
        return replace(
            result,
            url=fetched.url,
            is_http=is_http_url(fetched.url),
            timestamp=datetime.now(timezone.utc),
        )
