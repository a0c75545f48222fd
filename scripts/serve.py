"""Run the Knotable HTTP API with uvicorn.

Usage:
    uv run python scripts/serve.py
    uv run python scripts/serve.py --host 0.0.0.0 --port 8080
    uv run python scripts/serve.py --reload
"""

from __future__ import annotations

import argparse
import sys

import uvicorn

from knotable.config import Settings, get_settings

APP_PATH = "knotable.api.app:app"


def parse_args(
    settings: Settings,
    argv: list[str] | None = None,
) -> argparse.Namespace:
    """Parse CLI arguments; host and port default to API_HOST/API_PORT."""
    parser = argparse.ArgumentParser(description="Run the Knotable API")
    parser.add_argument("--host", default=settings.api_host)
    parser.add_argument("--port", type=int, default=settings.api_port)
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (development only)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Start uvicorn; logging is configured by the app lifespan."""
    settings = get_settings()
    args = parse_args(settings, argv)
    uvicorn.run(
        APP_PATH,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
