"""Shared fixtures for integration tests.

These tests wire real infrastructure components (httpx clients, fetcher,
prober, batch prober) with mocked HTTP via respx.
"""

from __future__ import annotations

import pytest

from m3uscope.infrastructure.config import AppConfig

PLAYLIST_URL = "http://iptv.example.com/list.m3u"


@pytest.fixture()
def config() -> AppConfig:
    """Config with small windows and fast timeouts."""
    return AppConfig(
        environment="test",
        probing={"concurrency": 2, "timeout_seconds": 1.0},
    )


@pytest.fixture()
def playlist_text() -> str:
    return (
        "#EXTM3U\n"
        '#EXTINF:-1 group-title="News",CNN\n'
        "http://streams.example.com/cnn.m3u8\n"
        '#EXTINF:-1 group-title="News",BBC\n'
        "http://streams.example.com/bbc.m3u8\n"
        '#EXTINF:-1 group-title="Sports",ESPN\n'
        "http://streams.example.com/espn.ts\n"
        "http://streams.example.com/bare\n"
    )
