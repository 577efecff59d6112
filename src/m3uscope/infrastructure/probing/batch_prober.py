"""Windowed batch prober for playlist channels.

Channels are probed in fixed-size windows: every probe of a window runs
concurrently, and the next window starts only after the current one fully
resolved. This caps simultaneous outbound connections at ``concurrency``
while keeping output order identical to input order.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import replace
from typing import Sequence

import structlog

from m3uscope.domain.entities import Channel, ProbeOutcome
from m3uscope.domain.ports import ChannelProberPort

log = structlog.get_logger(__name__)


def merge_outcome(channel: Channel, outcome: ProbeOutcome) -> Channel:
    """Return a copy of *channel* carrying the probe fields of *outcome*."""
    return replace(
        channel,
        status=outcome.status,
        http_status=outcome.http_status,
        response_time=outcome.response_time,
        content_type=outcome.content_type,
        error=outcome.error,
    )


class BatchProber:
    """Runs a ChannelProberPort over channel sequences in windows.

    Args:
        prober: Single-URL prober (injected).
        concurrency: Window size, i.e. max in-flight probes.
        timeout_seconds: Per-probe timeout.
        window_deadline_seconds: Optional bound for a whole window; probes
            still running when it expires are reported dead.
    """

    def __init__(
        self,
        prober: ChannelProberPort,
        concurrency: int = 5,
        timeout_seconds: float = 8.0,
        window_deadline_seconds: float | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._prober = prober
        self._concurrency = concurrency
        self._timeout = timeout_seconds
        self._window_deadline = window_deadline_seconds

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def _probe_channel(self, channel: Channel) -> Channel:
        if not channel.url:
            return replace(channel, status="invalid")
        outcome = await self._prober.probe(channel.url, self._timeout)
        log.debug(
            "channel_probe_done",
            url=channel.url,
            status=outcome.status,
            http_status=outcome.http_status,
            response_time=outcome.response_time,
        )
        return merge_outcome(channel, outcome)

    async def _run_window(self, window: Sequence[Channel]) -> list[Channel]:
        t0 = time.monotonic()
        tasks = [asyncio.create_task(self._probe_channel(ch)) for ch in window]

        if self._window_deadline is None:
            return list(await asyncio.gather(*tasks))

        _, pending = await asyncio.wait(tasks, timeout=self._window_deadline)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            log.warning(
                "batch_window_deadline_exceeded",
                pending=len(pending),
                deadline_seconds=self._window_deadline,
            )

        elapsed_ms = int((time.monotonic() - t0) * 1000)
        results: list[Channel] = []
        for task, channel in zip(tasks, window):
            if task in pending:
                results.append(
                    merge_outcome(
                        channel,
                        ProbeOutcome(
                            status="dead",
                            response_time=elapsed_ms,
                            error="deadline_exceeded",
                        ),
                    )
                )
            else:
                results.append(task.result())
        return results

    async def batch_probe(self, channels: Sequence[Channel]) -> list[Channel]:
        """Probe all *channels* and return them with probe fields filled.

        Output order always equals input order, regardless of which probe
        finishes first.
        """
        if not channels:
            return []

        size = self._concurrency
        results: list[Channel] = list(channels)

        log.info(
            "batch_probe_started",
            channels=len(channels),
            concurrency=size,
            windows=(len(channels) + size - 1) // size,
        )

        for start in range(0, len(channels), size):
            window = channels[start : start + size]
            results[start : start + len(window)] = await self._run_window(window)

        live = sum(1 for ch in results if ch.status == "live")
        log.info(
            "batch_probe_completed",
            channels=len(results),
            live=live,
            dead=sum(1 for ch in results if ch.status == "dead"),
        )
        return results
