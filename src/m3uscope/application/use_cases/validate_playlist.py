"""Validate use case: is this URL a reachable playlist?"""

from __future__ import annotations

from m3uscope.application.use_cases.fetch_playlist import FetchPlaylistUseCase
from m3uscope.domain.entities import PlaylistValidation
from m3uscope.domain.playlist.urls import is_http_url


class ValidatePlaylistUseCase:
    """Runs the fetch flow with a short timeout and reports the outcome.

    Errors from the fetch flow propagate unchanged; callers decide how to
    surface them.
    """

    def __init__(
        self, fetch_uc: FetchPlaylistUseCase, timeout_seconds: float = 10.0
    ) -> None:
        self.fetch_uc = fetch_uc
        self.timeout_seconds = timeout_seconds

    async def execute(self, url: object) -> PlaylistValidation:
        fetched = await self.fetch_uc.execute(
            url, timeout_seconds=self.timeout_seconds
        )
        return PlaylistValidation(
            valid=True,
            upgraded=fetched.upgraded,
            is_http=is_http_url(fetched.url),
        )
