"""Fetch use case: validate URL, upgrade to HTTPS, download, gate content."""

from __future__ import annotations

import structlog

from m3uscope.domain.entities import (
    DEFAULT_LIMITS,
    FetchedPlaylist,
    FetchFailure,
    PlaylistLimits,
)
from m3uscope.domain.ports import PlaylistFetcherPort
from m3uscope.domain.playlist.content import looks_like_playlist
from m3uscope.domain.playlist.urls import validate_url_format

log = structlog.get_logger(__name__)


class FetchPlaylistUseCase:
    """Downloads a playlist and makes sure it looks like one.

    Flow:
        1. Validate and sanitize the URL (no I/O on failure)
        2. Try the HTTPS variant of http:// URLs
        3. Download with size cap
        4. Reject content that does not look like a playlist
    """

    def __init__(
        self,
        fetcher: PlaylistFetcherPort,
        limits: PlaylistLimits = DEFAULT_LIMITS,
    ) -> None:
        self.fetcher = fetcher
        self.limits = limits

    async def execute(
        self, url: object, timeout_seconds: float | None = None
    ) -> FetchedPlaylist:
        """Return the fetched playlist.

        Raises:
            InvalidInput: Malformed or disallowed URL.
            FetchFailure: Download failed or content is not a playlist.
        """
        sanitized = validate_url_format(url, self.limits.max_url_length)
        target, upgraded = await self.fetcher.try_https_upgrade(sanitized)

        content = await self.fetcher.fetch(target, timeout_seconds)

        if not looks_like_playlist(content):
            log.info("playlist_content_rejected", url=target, size=len(content))
            raise FetchFailure(
                "Invalid playlist content", reason="invalid_playlist_content"
            )

        return FetchedPlaylist(content=content, url=target, upgraded=upgraded)
