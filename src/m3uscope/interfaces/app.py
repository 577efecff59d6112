"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import PlainTextResponse, Response

from m3uscope.infrastructure.config import AppConfig
from m3uscope.interfaces.api.middleware import RateLimitMiddleware, RateLimitRule
from m3uscope.interfaces.app_state import AppState
from m3uscope.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

APP_VERSION = "0.1.0"


def _validation_message(exc: RequestValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if err.get("type") == "extra_forbidden":
            parts.append(f"Unexpected field: {'.'.join(loc)}")
        elif loc:
            parts.append(f"{'.'.join(loc)}: {err.get('msg', 'invalid value')}")
        else:
            parts.append("Invalid request body")
    return ". ".join(parts) or "Invalid request body"


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration ONLY, NO resource initialization.

    Resources (HTTP clients, adapters, use cases) are created in lifespan().
    """
    app = FastAPI(
        title="m3uscope",
        description="IPTV/M3U playlist validation and channel health analysis",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    app.add_middleware(
        RateLimitMiddleware,
        rules=[
            RateLimitRule("/api", config.api.rate_limit_rpm),
            RateLimitRule(
                "/api/analyze",
                config.api.analysis_rate_limit_rpm,
                message="Analysis rate limit exceeded. Please wait before trying again.",
            ),
        ],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.api.allowed_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Accept"],
        max_age=86400,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    from m3uscope.interfaces.api.playlist.router import router as playlist_router

    app.include_router(playlist_router, prefix="/api")

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        """Liveness probe, returns 200 as long as the process is running."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "version": APP_VERSION,
        }

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": _validation_message(exc), "reason": "invalid_input"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> Response:
        log.error(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        if request.url.path.startswith("/api"):
            return JSONResponse(
                status_code=500, content={"error": "Internal server error"}
            )
        return PlainTextResponse("Internal Server Error", status_code=500)

    @app.api_route("/api/{rest:path}", methods=["GET", "POST"], include_in_schema=False)
    async def api_not_found(rest: str) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "API endpoint not found"})

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
