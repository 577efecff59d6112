"""httpx-based playlist downloader with size cap and HTTPS upgrade."""

from __future__ import annotations

import httpx
import structlog

from m3uscope.domain.entities import DEFAULT_LIMITS, FetchFailure
from m3uscope.domain.playlist.urls import is_http_url

log = structlog.get_logger(__name__)

DEFAULT_BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)


class HttpxPlaylistFetcher:
    """Downloads playlist text through a shared ``httpx.AsyncClient``.

    The body is streamed and aborted as soon as it exceeds
    ``max_bytes``. Redirect limits come from the injected client.

    Args:
        http_client: Shared client for playlist downloads.
        probe_client: Client for the HTTPS upgrade HEAD check.
            Defaults to ``http_client``.
        timeout_seconds: Default download timeout.
        max_bytes: Maximum accepted body size.
        user_agent: User-Agent header for downloads.
        https_upgrade: Enable the http -> https upgrade attempt.
        https_upgrade_timeout_seconds: Timeout of the upgrade HEAD check.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        probe_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        max_bytes: int = DEFAULT_LIMITS.max_playlist_bytes,
        user_agent: str = DEFAULT_BROWSER_UA,
        https_upgrade: bool = True,
        https_upgrade_timeout_seconds: float = 3.0,
    ) -> None:
        self._http = http_client
        self._probe_http = probe_client or http_client
        self._timeout = timeout_seconds
        self._max_bytes = max_bytes
        self._user_agent = user_agent
        self._https_upgrade = https_upgrade
        self._upgrade_timeout = https_upgrade_timeout_seconds

    def _too_large(self, url: str, size: int) -> FetchFailure:
        log.warning(
            "playlist_too_large", url=url, size=size, max_bytes=self._max_bytes
        )
        return FetchFailure(
            f"Playlist exceeds maximum size of {self._max_bytes} bytes",
            reason="playlist_too_large",
        )

    async def fetch(self, url: str, timeout_seconds: float | None = None) -> str:
        """Download the playlist body as text.

        Raises:
            FetchFailure: timeout, network error, status outside
                ``[200, 400)`` or oversized body.
        """
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "*/*",
            "Accept-Encoding": "identity",
        }
        timeout = timeout_seconds or self._timeout

        try:
            async with self._http.stream(
                "GET",
                url,
                headers=headers,
                timeout=timeout,
                follow_redirects=True,
            ) as resp:
                if not 200 <= resp.status_code < 400:
                    raise FetchFailure(
                        f"Could not fetch playlist: HTTP {resp.status_code}",
                        reason="fetch_http_status",
                    )

                declared = resp.headers.get("content-length")
                if (
                    declared
                    and declared.isdigit()
                    and int(declared) > self._max_bytes
                ):
                    raise self._too_large(url, int(declared))

                body = bytearray()
                async for chunk in resp.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > self._max_bytes:
                        raise self._too_large(url, len(body))

                encoding = resp.encoding or "utf-8"

        except httpx.TimeoutException as e:
            log.warning("playlist_fetch_timeout", url=url, timeout=timeout)
            raise FetchFailure(
                "Could not fetch playlist: request timed out",
                reason="fetch_timeout",
            ) from e
        except httpx.HTTPError as e:
            log.warning("playlist_fetch_error", url=url, error=str(e))
            raise FetchFailure(
                "Could not fetch playlist: network error",
                reason="fetch_network_error",
            ) from e
        except (httpx.InvalidURL, UnicodeError) as e:
            log.warning("playlist_fetch_invalid_url", url=url, error=str(e))
            raise FetchFailure(
                "Could not fetch playlist: invalid URL",
                reason="fetch_network_error",
            ) from e

        content = body.decode(encoding, errors="replace")
        log.info("playlist_fetched", url=url, size=len(body))
        return content

    async def try_https_upgrade(self, url: str) -> tuple[str, bool]:
        """Return ``(https_url, True)`` if the HTTPS variant answers 2xx.

        Falls back to ``(url, False)`` for HTTPS input, a disabled upgrade,
        or any failure.
        """
        if not self._https_upgrade or not is_http_url(url):
            return url, False

        https_url = "https://" + url.split("://", 1)[1]
        try:
            resp = await self._probe_http.head(
                https_url,
                timeout=self._upgrade_timeout,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            log.debug("https_upgrade_failed", url=url, error=str(e))
            return url, False

        if 200 <= resp.status_code < 300:
            log.info("https_upgrade_applied", url=url)
            return https_url, True
        return url, False
