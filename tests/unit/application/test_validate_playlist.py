"""Tests for ValidatePlaylistUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from m3uscope.application.use_cases.fetch_playlist import FetchPlaylistUseCase
from m3uscope.application.use_cases.validate_playlist import ValidatePlaylistUseCase
from m3uscope.domain.entities import FetchFailure, InvalidInput

_URL = "http://iptv.example.com/list.m3u"


def _uc(fetcher: MagicMock, timeout: float = 10.0) -> ValidatePlaylistUseCase:
    return ValidatePlaylistUseCase(FetchPlaylistUseCase(fetcher), timeout_seconds=timeout)


class TestValidatePlaylist:
    async def test_valid_http_playlist(self, mock_fetcher: MagicMock) -> None:
        report = await _uc(mock_fetcher).execute(_URL)

        assert report.valid is True
        assert report.upgraded is False
        assert report.is_http is True

    async def test_upgraded_playlist_is_not_http(self, mock_fetcher: MagicMock) -> None:
        mock_fetcher.try_https_upgrade = AsyncMock(
            return_value=("https://iptv.example.com/list.m3u", True)
        )
        report = await _uc(mock_fetcher).execute(_URL)

        assert report.upgraded is True
        assert report.is_http is False

    async def test_uses_short_timeout(self, mock_fetcher: MagicMock) -> None:
        await _uc(mock_fetcher, timeout=4.0).execute(_URL)
        mock_fetcher.fetch.assert_awaited_once_with(_URL, 4.0)

    async def test_invalid_url_propagates(self, mock_fetcher: MagicMock) -> None:
        with pytest.raises(InvalidInput):
            await _uc(mock_fetcher).execute("")

    async def test_non_playlist_propagates(self, mock_fetcher: MagicMock) -> None:
        mock_fetcher.fetch = AsyncMock(return_value="just some text")
        with pytest.raises(FetchFailure) as exc_info:
            await _uc(mock_fetcher).execute(_URL)
        assert exc_info.value.reason == "invalid_playlist_content"
