"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

import httpx
from starlette.datastructures import State

from m3uscope.application.use_cases import (
    AnalyzePlaylistUseCase,
    CheckChannelUseCase,
    FetchPlaylistUseCase,
    ValidatePlaylistUseCase,
)
from m3uscope.infrastructure.config import AppConfig


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient  # playlist downloads
    probe_client: httpx.AsyncClient  # channel probes / HTTPS upgrade

    # Application Services
    fetch_uc: FetchPlaylistUseCase
    validate_uc: ValidatePlaylistUseCase
    analyze_uc: AnalyzePlaylistUseCase
    check_channel_uc: CheckChannelUseCase
