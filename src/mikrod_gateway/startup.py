"""
MikrodTech Gateway Startup Script
=================================

Starts the gateway (chat relay + speed-test probes) in-process with uvicorn.

Usage:
    python -m mikrod_gateway.startup --port 3000

Environment Variables:
    OPENROUTER_API_KEY    Credential for the completion provider
    KNOWLEDGE_BASE_PATH   Knowledge file (default: ./knowledge.json)
    PORT / HOST           Listen address (default: 0.0.0.0:3000)
    LOG_LEVEL             Root log level (default: INFO)
    OTEL_ENABLED          Print OpenTelemetry spans to stdout
"""

import argparse
import logging
import os
from typing import Optional, Sequence

import uvicorn

from .config import DEFAULT_HOST, DEFAULT_PORT, load_settings
from .env_validation import validate_environment

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Configure root logging from ``LOG_LEVEL`` (``--debug`` forces DEBUG)."""
    level_name = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def init_observability_if_enabled(enabled: bool) -> None:
    if not enabled:
        return
    from .observability import init_observability

    init_observability()
    print("✅ OpenTelemetry tracing enabled (console exporter)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MikrodTech Gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m mikrod_gateway.startup --port 3000
    python -m mikrod_gateway.startup --env-file /etc/mikrod/.env --debug
        """,
    )
    parser.add_argument(
        "--host",
        "-H",
        type=str,
        default=None,
        help=f"Host to bind to (default: $HOST or {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help=f"Port to listen on (default: $PORT or {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Dotenv file loaded before reading settings (default: .env)",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        default=os.getenv("MIKROD_DEBUG", "false").lower() == "true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the gateway."""
    args = build_parser().parse_args(argv)

    configure_logging(debug=args.debug)

    settings = load_settings(env_file=args.env_file)

    # Advisory only; never prevents startup
    env_result = validate_environment()
    if env_result.errors:
        logger.error("Environment validation found %d error(s)", len(env_result.errors))

    init_observability_if_enabled(settings.otel_enabled)

    from .gateway import create_app

    app = create_app(settings)

    host = args.host or settings.host
    port = args.port or settings.port

    print(f"🚀 MikrodTech gateway running on {host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if args.debug else "info",
    )


if __name__ == "__main__":
    main()
