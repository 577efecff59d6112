"""Port for probing channel sequences."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from m3uscope.domain.entities import Channel


@runtime_checkable
class BatchProberPort(Protocol):
    """Probes many channels with bounded concurrency."""

    async def batch_probe(self, channels: Sequence[Channel]) -> list[Channel]:
        """Return copies of *channels* with probe fields filled.

        Output order equals input order. Channels without URL come back
        with ``status="invalid"``; unreachable ones with ``status="dead"``.
        """
        ...
