"""Playlist API endpoints (validate, fetch, analyze, check-channel)."""

from __future__ import annotations

from typing import Optional, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, StrictBool

from m3uscope.domain.entities import (
    AnalysisOptions,
    FetchFailure,
    InvalidInput,
    PlaylistError,
)
from m3uscope.interfaces.api.playlist.presenter import (
    present_analysis,
    present_channel_check,
    present_error,
)
from m3uscope.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["playlist"])


class UrlRequest(BaseModel):
    """Body with a single URL; unexpected fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    url: Optional[str] = None


class AnalyzeRequest(UrlRequest):
    check_channels: StrictBool = Field(default=True, alias="checkChannels")
    max_channels_to_check: Optional[int] = Field(
        default=None, alias="maxChannelsToCheck"
    )


def _error(exc: PlaylistError, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=present_error(exc))


@router.post("/validate")
async def validate_playlist(request: Request, body: UrlRequest) -> JSONResponse:
    state = cast(AppState, request.app.state)

    try:
        report = await state.validate_uc.execute(body.url)
    except InvalidInput as e:
        return JSONResponse(
            status_code=400,
            content={"valid": False, "error": e.message, "reason": e.reason},
        )
    except FetchFailure as e:
        message = (
            "URL does not contain valid playlist content"
            if e.reason == "invalid_playlist_content"
            else "URL is not accessible"
        )
        return JSONResponse(
            status_code=400,
            content={"valid": False, "error": message, "reason": e.reason},
        )

    return JSONResponse(
        content={
            "valid": report.valid,
            "upgraded": report.upgraded,
            "isHttp": report.is_http,
        }
    )


@router.post("/fetch-playlist")
async def fetch_playlist(request: Request, body: UrlRequest) -> JSONResponse:
    """Return raw playlist content for client-side rendering."""
    state = cast(AppState, request.app.state)

    try:
        fetched = await state.fetch_uc.execute(body.url)
    except PlaylistError as e:
        return _error(e)

    return JSONResponse(
        content={"content": fetched.content, "size": fetched.size, "url": fetched.url}
    )


@router.post("/analyze")
async def analyze_playlist(request: Request, body: AnalyzeRequest) -> JSONResponse:
    state = cast(AppState, request.app.state)
    limits = state.analyze_uc.limits

    options = AnalysisOptions(
        check_channels=body.check_channels,
        max_channels_to_check=(
            body.max_channels_to_check
            if body.max_channels_to_check is not None
            else limits.default_channels_to_check
        ),
    )

    try:
        result = await state.analyze_uc.execute(body.url, options)
    except PlaylistError as e:
        log.info("analysis_rejected", reason=e.reason)
        return _error(e)
    except Exception:
        log.exception("analysis_unhandled_error")
        return JSONResponse(status_code=500, content={"error": "Analysis failed"})

    return JSONResponse(content=present_analysis(result))


@router.post("/check-channel")
async def check_channel(request: Request, body: UrlRequest) -> JSONResponse:
    state = cast(AppState, request.app.state)

    try:
        report = await state.check_channel_uc.execute(body.url)
    except PlaylistError as e:
        return _error(e)
    except Exception:
        log.exception("channel_check_unhandled_error")
        return JSONResponse(
            status_code=500, content={"error": "Channel check failed"}
        )

    return JSONResponse(content=present_channel_check(report))
