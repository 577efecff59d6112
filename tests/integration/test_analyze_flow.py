"""End-to-end analysis flow with real adapters and mocked HTTP (respx)."""

from __future__ import annotations

import httpx
import idna
import pytest
import respx
from fastapi.testclient import TestClient

from m3uscope.application.use_cases.analyze_playlist import AnalyzePlaylistUseCase
from m3uscope.domain.entities import AnalysisOptions, FetchFailure
from m3uscope.infrastructure.config import AppConfig
from m3uscope.infrastructure.probing.batch_prober import BatchProber
from m3uscope.infrastructure.probing.channel_prober import HttpxChannelProber
from m3uscope.interfaces.app import create_app
from m3uscope.interfaces.cli.cli import run_analysis

pytestmark = pytest.mark.integration

_URL = "http://iptv.example.com/list.m3u"
_HTTPS_URL = "https://iptv.example.com/list.m3u"


def _mock_channels() -> None:
    respx.head("http://streams.example.com/cnn.m3u8").respond(
        200, headers={"Content-Type": "application/vnd.apple.mpegurl"}
    )
    respx.head("http://streams.example.com/bbc.m3u8").respond(404)
    respx.head("http://streams.example.com/espn.ts").mock(
        side_effect=httpx.ConnectTimeout("slow")
    )
    respx.head("http://streams.example.com/bare").respond(200)


class TestRunAnalysis:
    @respx.mock
    async def test_full_flow(self, config: AppConfig, playlist_text: str) -> None:
        respx.head(_HTTPS_URL).respond(404)
        respx.get(_URL).respond(200, text=playlist_text)
        _mock_channels()

        payload = await run_analysis(
            config, _URL, AnalysisOptions(max_channels_to_check=50)
        )

        assert payload["url"] == _URL
        assert payload["isHttp"] is True
        summary = payload["summary"]
        assert summary["totalChannels"] == 4
        assert summary["checkedChannels"] == 4
        assert summary["liveChannels"] == 2
        assert summary["deadChannels"] == 2
        assert summary["livePercentage"] == 50
        assert summary["groupCount"] == 3
        assert payload["groups"][0] == {"name": "News", "count": 2}

        by_name = {ch["name"]: ch for ch in payload["channels"]}
        assert by_name["CNN"]["status"] == "live"
        assert by_name["BBC"]["httpStatus"] == 404
        assert by_name["ESPN"]["error"] == "timeout"
        assert by_name["Channel 4"]["group"] == "Uncategorized"

    @respx.mock
    async def test_https_upgrade(self, config: AppConfig, playlist_text: str) -> None:
        respx.head(_HTTPS_URL).respond(200)
        respx.get(_HTTPS_URL).respond(200, text=playlist_text)

        payload = await run_analysis(
            config,
            _URL,
            AnalysisOptions(check_channels=False, max_channels_to_check=50),
        )

        assert payload["url"] == _HTTPS_URL
        assert payload["isHttp"] is False
        assert all(ch["status"] == "unknown" for ch in payload["channels"])

    @respx.mock
    async def test_cap_leaves_rest_unchecked(
        self, config: AppConfig, playlist_text: str
    ) -> None:
        respx.head(_HTTPS_URL).respond(404)
        respx.get(_URL).respond(200, text=playlist_text)
        respx.head("http://streams.example.com/cnn.m3u8").respond(200)

        payload = await run_analysis(
            config, _URL, AnalysisOptions(max_channels_to_check=1)
        )

        assert payload["summary"]["checkedChannels"] == 1
        assert payload["summary"]["uncheckedChannels"] == 3
        assert payload["summary"]["livePercentage"] == 100
        assert [ch["status"] for ch in payload["channels"]] == [
            "live",
            "unchecked",
            "unchecked",
            "unchecked",
        ]

    @respx.mock
    async def test_html_page_is_rejected(self, config: AppConfig) -> None:
        respx.head(_HTTPS_URL).respond(404)
        respx.get(_URL).respond(200, html="<html>Login</html>")

        with pytest.raises(FetchFailure) as exc_info:
            await run_analysis(config, _URL, AnalysisOptions())
        assert exc_info.value.reason == "invalid_playlist_content"


class TestMalformedChannelHost:
    @respx.mock
    async def test_bad_host_only_kills_its_channel(self) -> None:
        bad_url = "http://xn--/live"
        respx.head("https://good.test/a").respond(200)
        respx.head(bad_url).mock(side_effect=idna.IDNAError("Malformed A-label"))
        content = (
            "#EXTM3U\n"
            "#EXTINF:-1,Good\nhttps://good.test/a\n"
            f"#EXTINF:-1,Bad\n{bad_url}\n"
        )

        async with httpx.AsyncClient() as client:
            uc = AnalyzePlaylistUseCase(BatchProber(HttpxChannelProber(client)))
            result = await uc.analyze(content)

        assert [ch.status for ch in result.channels] == ["live", "dead"]
        assert result.channels[1].error == "invalid_url"
        assert result.summary.live_channels == 1
        assert result.summary.dead_channels == 1


class TestApiWithLifespan:
    def test_analyze_endpoint(self, config: AppConfig, playlist_text: str) -> None:
        with respx.mock(assert_all_called=False) as mock:
            mock.head(_HTTPS_URL).respond(404)
            mock.get(_URL).respond(200, text=playlist_text)
            mock.head(url__startswith="http://streams.example.com/").respond(200)

            with TestClient(create_app(config)) as client:
                resp = client.post(
                    "/api/analyze", json={"url": _URL, "maxChannelsToCheck": 2}
                )

        assert resp.status_code == 200
        body = resp.json()
        assert body["summary"]["checkedChannels"] == 2
        assert body["summary"]["liveChannels"] == 2
        assert body["summary"]["uncheckedChannels"] == 2

    def test_validate_endpoint(self, config: AppConfig, playlist_text: str) -> None:
        with respx.mock(assert_all_called=False) as mock:
            mock.head(_HTTPS_URL).respond(200)
            mock.get(_HTTPS_URL).respond(200, text=playlist_text)

            with TestClient(create_app(config)) as client:
                resp = client.post("/api/validate", json={"url": _URL})

        assert resp.status_code == 200
        assert resp.json() == {"valid": True, "upgraded": True, "isHttp": False}

    def test_invalid_options(self, config: AppConfig) -> None:
        with TestClient(create_app(config)) as client:
            resp = client.post(
                "/api/analyze", json={"url": _URL, "maxChannelsToCheck": 0}
            )

        assert resp.status_code == 400
        assert resp.json()["reason"] == "invalid_options"
