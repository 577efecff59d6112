"""Shared test fixtures for m3uscope test suite."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from m3uscope.domain.entities import Channel, ProbeOutcome

# ---------------------------------------------------------------------------
# Playlist text fixtures
# ---------------------------------------------------------------------------

SAMPLE_PLAYLIST = (
    "#EXTM3U\n"
    '#EXTINF:-1 tvg-id="cnn.us" group-title="News",CNN\n'
    "http://a.test/cnn\n"
    "#EXTINF:-1,BBC\n"
    "https://b.test/bbc\n"
)


def make_playlist(count: int, group: str = "General") -> str:
    """Build an ``#EXTM3U`` playlist with *count* numbered channels."""
    lines = ["#EXTM3U"]
    for i in range(count):
        lines.append(f'#EXTINF:-1 group-title="{group}",Channel {i}')
        lines.append(f"http://streams.example.com/{i}.m3u8")
    return "\n".join(lines)


@pytest.fixture()
def playlist_factory():
    return make_playlist


@pytest.fixture()
def sample_playlist() -> str:
    return SAMPLE_PLAYLIST


@pytest.fixture()
def channel() -> Channel:
    """Minimal parsed channel (not probed yet)."""
    return Channel(name="CNN", url="http://a.test/cnn", group="News")


# ---------------------------------------------------------------------------
# Port fakes
# ---------------------------------------------------------------------------


class FakeChannelProber:
    """ChannelProberPort fake that records calls and in-flight counts.

    ``outcomes`` maps URL -> ProbeOutcome; unknown URLs are live/200.
    ``delays`` maps URL -> seconds to sleep before answering.
    """

    def __init__(
        self,
        outcomes: dict[str, ProbeOutcome] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.outcomes = outcomes or {}
        self.delays = delays or {}
        self.calls: list[tuple[str, float]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.started: list[str] = []

    async def probe(self, url: str, timeout_seconds: float) -> ProbeOutcome:
        self.calls.append((url, timeout_seconds))
        self.started.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
        finally:
            self.in_flight -= 1
        return self.outcomes.get(
            url, ProbeOutcome(status="live", http_status=200, response_time=100)
        )


@pytest.fixture()
def fake_prober() -> FakeChannelProber:
    return FakeChannelProber()


@pytest.fixture()
def prober_factory() -> type[FakeChannelProber]:
    return FakeChannelProber


@pytest.fixture()
def mock_fetcher() -> MagicMock:
    """PlaylistFetcherPort mock: no upgrade, returns the sample playlist."""
    fetcher = MagicMock()
    fetcher.try_https_upgrade = AsyncMock(
        side_effect=lambda url: (url, False)
    )
    fetcher.fetch = AsyncMock(return_value=SAMPLE_PLAYLIST)
    return fetcher
