"""Tests for FetchPlaylistUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from m3uscope.application.use_cases.fetch_playlist import FetchPlaylistUseCase
from m3uscope.domain.entities import FetchFailure, InvalidInput

_URL = "http://iptv.example.com/list.m3u"


class TestFetchPlaylist:
    async def test_returns_fetched_playlist(
        self, mock_fetcher: MagicMock, sample_playlist: str
    ) -> None:
        fetched = await FetchPlaylistUseCase(mock_fetcher).execute(_URL)

        assert fetched.content == sample_playlist
        assert fetched.url == _URL
        assert fetched.upgraded is False
        assert fetched.size == len(sample_playlist)
        mock_fetcher.fetch.assert_awaited_once_with(_URL, None)

    async def test_sanitizes_url_first(self, mock_fetcher: MagicMock) -> None:
        await FetchPlaylistUseCase(mock_fetcher).execute(f"  {_URL}<> ")
        mock_fetcher.try_https_upgrade.assert_awaited_once_with(_URL)

    async def test_uses_upgraded_url(self, mock_fetcher: MagicMock) -> None:
        https_url = "https://iptv.example.com/list.m3u"
        mock_fetcher.try_https_upgrade = AsyncMock(return_value=(https_url, True))

        fetched = await FetchPlaylistUseCase(mock_fetcher).execute(_URL)

        mock_fetcher.fetch.assert_awaited_once_with(https_url, None)
        assert fetched.url == https_url
        assert fetched.upgraded is True

    async def test_passes_timeout(self, mock_fetcher: MagicMock) -> None:
        await FetchPlaylistUseCase(mock_fetcher).execute(_URL, timeout_seconds=10.0)
        mock_fetcher.fetch.assert_awaited_once_with(_URL, 10.0)

    async def test_invalid_url_does_no_io(self, mock_fetcher: MagicMock) -> None:
        with pytest.raises(InvalidInput) as exc_info:
            await FetchPlaylistUseCase(mock_fetcher).execute("ftp://example.com/x")

        assert exc_info.value.reason == "url_protocol_not_allowed"
        mock_fetcher.try_https_upgrade.assert_not_awaited()
        mock_fetcher.fetch.assert_not_awaited()

    async def test_rejects_non_playlist_content(self, mock_fetcher: MagicMock) -> None:
        mock_fetcher.fetch = AsyncMock(return_value="<html>login required</html>")

        with pytest.raises(FetchFailure) as exc_info:
            await FetchPlaylistUseCase(mock_fetcher).execute(_URL)

        assert exc_info.value.reason == "invalid_playlist_content"

    async def test_fetch_failure_propagates(self, mock_fetcher: MagicMock) -> None:
        mock_fetcher.fetch = AsyncMock(
            side_effect=FetchFailure("down", reason="fetch_timeout")
        )

        with pytest.raises(FetchFailure) as exc_info:
            await FetchPlaylistUseCase(mock_fetcher).execute(_URL)

        assert exc_info.value.reason == "fetch_timeout"
