"""Port for downloading playlist documents."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PlaylistFetcherPort(Protocol):
    """Downloads playlist text with a byte cap, timeout and redirect limit."""

    async def fetch(self, url: str, timeout_seconds: float | None = None) -> str:
        """Download the playlist body as text.

        Raises:
            FetchFailure: Network error, timeout, non-2xx/3xx status or
                a body larger than the configured maximum.
        """
        ...

    async def try_https_upgrade(self, url: str) -> tuple[str, bool]:
        """Return ``(url, upgraded)``; swaps http for https when reachable."""
        ...
