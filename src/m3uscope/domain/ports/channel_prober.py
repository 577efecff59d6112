"""Port for probing a single channel URL."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from m3uscope.domain.entities import ProbeOutcome


@runtime_checkable
class ChannelProberPort(Protocol):
    """Performs one bounded-time reachability check against a stream URL.

    Implementations never raise for network failures: an unreachable
    channel is reported as ``status="dead"`` on the returned outcome.
    """

    async def probe(self, url: str, timeout_seconds: float) -> ProbeOutcome:
        """Probe ``url`` (HEAD, no body).

        Args:
            url: Channel stream URL.
            timeout_seconds: Hard timeout for the request.

        Returns:
            ProbeOutcome with status ``live`` for 2xx/3xx, ``dead`` otherwise.
        """
        ...
