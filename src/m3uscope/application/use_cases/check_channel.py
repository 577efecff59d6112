"""Single channel check use case."""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlsplit

from m3uscope.domain.entities import (
    DEFAULT_LIMITS,
    ChannelCheckReport,
    PlaylistLimits,
)
from m3uscope.domain.ports import ChannelProberPort
from m3uscope.domain.playlist.stream_type import detect_stream_type
from m3uscope.domain.playlist.urls import validate_url_format


class CheckChannelUseCase:
    """Probes one channel URL and enriches the result for display.

    Uses a longer timeout than batch checks since the user waits for a
    single answer.
    """

    def __init__(
        self,
        prober: ChannelProberPort,
        timeout_seconds: float = 15.0,
        limits: PlaylistLimits = DEFAULT_LIMITS,
    ) -> None:
        self.prober = prober
        self.timeout_seconds = timeout_seconds
        self.limits = limits

    async def execute(self, url: object) -> ChannelCheckReport:
        """Probe *url*.

        Raises:
            InvalidInput: Malformed or disallowed URL.
        """
        sanitized = validate_url_format(url, self.limits.max_url_length)
        parts = urlsplit(sanitized)

        outcome = await self.prober.probe(sanitized, self.timeout_seconds)

        return ChannelCheckReport(
            url=sanitized,
            status=outcome.status,
            http_status=outcome.http_status,
            response_time=outcome.response_time,
            content_type=outcome.content_type,
            protocol=parts.scheme.upper() or "Unknown",
            stream_type=detect_stream_type(sanitized, outcome.content_type),
            server=parts.hostname or "Unknown",
            timestamp=datetime.now(timezone.utc),
        )
