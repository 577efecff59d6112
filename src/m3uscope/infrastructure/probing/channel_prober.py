"""Channel prober: HEAD reachability check against stream URLs."""

from __future__ import annotations

import time

import httpx
import structlog

from m3uscope.domain.entities import ProbeOutcome

log = structlog.get_logger(__name__)


def _elapsed_ms(t0: float) -> int:
    return int((time.monotonic() - t0) * 1000)


class HttpxChannelProber:
    """Probes channel stream URLs with a single HEAD request.

    No body is downloaded. Redirects are followed up to the client's
    ``max_redirects``. 2xx/3xx is ``live``, anything else ``dead``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        user_agent: str | None = None,
    ) -> None:
        self._http = http_client
        self._headers = {"User-Agent": user_agent} if user_agent else None

    async def probe(self, url: str, timeout_seconds: float) -> ProbeOutcome:
        """Probe a single channel URL and return a ProbeOutcome."""
        t0 = time.monotonic()

        try:
            resp = await self._http.head(
                url,
                timeout=timeout_seconds,
                follow_redirects=True,
                headers=self._headers,
            )
        except httpx.TimeoutException:
            return ProbeOutcome(
                status="dead", response_time=_elapsed_ms(t0), error="timeout"
            )
        except httpx.TooManyRedirects:
            return ProbeOutcome(
                status="dead",
                response_time=_elapsed_ms(t0),
                error="too_many_redirects",
            )
        except httpx.ConnectError as exc:
            log.debug("channel_probe_connect_error", url=url, error=str(exc))
            return ProbeOutcome(
                status="dead", response_time=_elapsed_ms(t0), error="connect_error"
            )
        except httpx.HTTPError as exc:
            log.debug("channel_probe_error", url=url, error=str(exc))
            return ProbeOutcome(
                status="dead", response_time=_elapsed_ms(t0), error="http_error"
            )
        except (httpx.InvalidURL, UnicodeError, ValueError) as exc:
            # IDNA failures surface as UnicodeError from the DNS layer
            log.debug("channel_probe_invalid_url", url=url, error=str(exc))
            return ProbeOutcome(
                status="dead", response_time=_elapsed_ms(t0), error="invalid_url"
            )

        ok = 200 <= resp.status_code < 400
        return ProbeOutcome(
            status="live" if ok else "dead",
            http_status=resp.status_code,
            response_time=_elapsed_ms(t0),
            content_type=resp.headers.get("content-type"),
        )
