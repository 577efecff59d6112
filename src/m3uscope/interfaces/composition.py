"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from m3uscope.application.use_cases import (
    AnalyzePlaylistUseCase,
    CheckChannelUseCase,
    FetchPlaylistUseCase,
    ValidatePlaylistUseCase,
)
from m3uscope.infrastructure.config import AppConfig
from m3uscope.infrastructure.playlist.fetcher import HttpxPlaylistFetcher
from m3uscope.infrastructure.probing.batch_prober import BatchProber
from m3uscope.infrastructure.probing.channel_prober import HttpxChannelProber
from m3uscope.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_http_clients(
    config: AppConfig,
) -> tuple[httpx.AsyncClient, httpx.AsyncClient]:
    """Create the download client and the probe client.

    Redirect limits differ (download vs. probe), and httpx only sets
    ``max_redirects`` per client.
    """
    http_client = httpx.AsyncClient(
        timeout=config.http_fetch_timeout_seconds,
        follow_redirects=True,
        max_redirects=config.http_max_redirects,
        headers={"User-Agent": config.http_user_agent},
    )
    probe_client = httpx.AsyncClient(
        timeout=config.probing.timeout_seconds,
        follow_redirects=True,
        max_redirects=config.probing.max_redirects,
        headers={"User-Agent": config.http_user_agent},
    )
    return http_client, probe_client


def wire_use_cases(
    state: AppState,
    config: AppConfig,
    http_client: httpx.AsyncClient,
    probe_client: httpx.AsyncClient,
) -> None:
    """Build adapters and use cases and attach them to *state*."""
    limits = config.to_limits()

    fetcher = HttpxPlaylistFetcher(
        http_client,
        probe_client=probe_client,
        timeout_seconds=config.http_fetch_timeout_seconds,
        max_bytes=limits.max_playlist_bytes,
        user_agent=config.http_user_agent,
        https_upgrade=config.http_https_upgrade,
        https_upgrade_timeout_seconds=config.http_https_upgrade_timeout_seconds,
    )
    prober = HttpxChannelProber(probe_client, user_agent=config.http_user_agent)
    batch_prober = BatchProber(
        prober,
        concurrency=config.probing.concurrency,
        timeout_seconds=config.probing.timeout_seconds,
        window_deadline_seconds=config.probing.window_deadline_seconds,
    )

    state.http_client = http_client
    state.probe_client = probe_client
    state.fetch_uc = FetchPlaylistUseCase(fetcher, limits=limits)
    state.validate_uc = ValidatePlaylistUseCase(
        state.fetch_uc, timeout_seconds=config.http_validate_timeout_seconds
    )
    state.analyze_uc = AnalyzePlaylistUseCase(
        batch_prober, fetch_uc=state.fetch_uc, limits=limits
    )
    state.check_channel_uc = CheckChannelUseCase(
        prober,
        timeout_seconds=config.probing.single_timeout_seconds,
        limits=limits,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP clients (download + probe)
        2. Adapters (fetcher, prober, batch prober)
        3. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    async with AsyncExitStack() as stack:
        http_client, probe_client = build_http_clients(config)
        await stack.enter_async_context(http_client)
        await stack.enter_async_context(probe_client)

        wire_use_cases(state, config, http_client, probe_client)
        log.info(
            "app_started",
            environment=config.environment,
            probe_concurrency=config.probing.concurrency,
            probe_timeout_seconds=config.probing.timeout_seconds,
        )

        yield

        log.info("app_shutting_down")
