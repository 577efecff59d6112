from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from collections.abc import Iterable
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from m3uscope.domain.entities import AnalysisOptions, PlaylistError
from m3uscope.infrastructure.config import AppConfig, load_config
from m3uscope.infrastructure.logging.setup import configure_logging
from m3uscope.interfaces.api.playlist.presenter import present_analysis
from m3uscope.interfaces.app import create_app
from m3uscope.interfaces.app_state import AppState
from m3uscope.interfaces.composition import build_http_clients, wire_use_cases

log = structlog.get_logger(__name__)


def _add_config_args(parser: argparse.ArgumentParser) -> None:
    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="m3uscope")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    serve.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )
    _add_config_args(serve)

    analyze = sub.add_parser("analyze", help="Analyze a playlist URL once.")
    analyze.add_argument("url", help="Playlist URL.")
    analyze.add_argument(
        "--no-check",
        dest="check_channels",
        action="store_false",
        help="Parse and count only, do not probe channels.",
    )
    analyze.add_argument(
        "--max-channels",
        default=None,
        type=int,
        help="How many channels to probe (default from config).",
    )
    _add_config_args(analyze)

    return parser.parse_args(argv)


def _load(args: argparse.Namespace) -> AppConfig:
    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    return load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )


async def run_analysis(
    config: AppConfig, url: str, options: AnalysisOptions
) -> dict[str, Any]:
    """Wire the use cases outside of FastAPI and analyze *url* once."""
    state = AppState()
    async with AsyncExitStack() as stack:
        http_client, probe_client = build_http_clients(config)
        await stack.enter_async_context(http_client)
        await stack.enter_async_context(probe_client)

        wire_use_cases(state, config, http_client, probe_client)
        result = await state.analyze_uc.execute(url, options)

    return present_analysis(result)


def _analyze(args: argparse.Namespace, config: AppConfig) -> int:
    limits = config.to_limits()
    options = AnalysisOptions(
        check_channels=args.check_channels,
        max_channels_to_check=(
            args.max_channels
            if args.max_channels is not None
            else limits.default_channels_to_check
        ),
    )

    try:
        payload = asyncio.run(run_analysis(config, args.url, options))
    except PlaylistError as e:
        log.warning("analysis_failed", url=args.url, reason=e.reason)
        print(f"error: {e.message}", file=sys.stderr)
        return 1

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def _serve(args: argparse.Namespace, config: AppConfig, log_config: dict) -> int:
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "3000"))

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Config is loaded exactly once here and handed to the app or the one-shot
    analysis.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    config = _load(args)
    log_config = configure_logging(config)

    if args.command == "analyze":
        return _analyze(args, config)
    return _serve(args, config, log_config)


if __name__ == "__main__":
    raise SystemExit(start())
