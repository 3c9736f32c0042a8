"""
Preferred-Id Service - CLI Entry Point

Usage:
    python -m src.services.preferred_id [options]

Examples:
    # Start HTTP server against PostgreSQL (default)
    python -m src.services.preferred_id --port 8085

    # Serve NamingSystems from a Bundle file, no database
    python -m src.services.preferred_id --backend memory --bundle naming-systems.json
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from src.common.logging import configure_sanitized_logging

from .config import PreferredIdServiceConfig


def setup_logging(level: str) -> None:
    """Configure logging."""
    configure_sanitized_logging(
        level=getattr(logging, level.upper()),
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Preferred-Id Service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # HTTP options
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind (default: from config or 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind (default: from config or 8080)",
    )

    # Search backend options
    parser.add_argument(
        "--backend",
        choices=["postgres", "memory"],
        default=None,
        help="Search backend (default: from config or postgres)",
    )
    parser.add_argument(
        "--postgres-url",
        default=None,
        help="PostgreSQL connection URL",
    )
    parser.add_argument(
        "--bundle",
        default=None,
        help="FHIR Bundle JSON file for the memory backend",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Log level (default: info)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PreferredIdServiceConfig:
    """Build configuration from args and environment."""
    overrides = {}

    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.backend:
        overrides["search_backend"] = args.backend
    if args.postgres_url:
        overrides["postgres_url"] = args.postgres_url
    if args.bundle:
        overrides["bundle_path"] = args.bundle
        overrides.setdefault("search_backend", "memory")
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()

    return PreferredIdServiceConfig(**overrides)


async def run_http(config: PreferredIdServiceConfig) -> None:
    """Run HTTP server."""
    from .transports.http import run_http_server

    await run_http_server(config)


def main() -> None:
    """Main entry point."""
    args = parse_args()
    setup_logging(args.log_level)

    config = build_config(args)
    logger = logging.getLogger(__name__)

    logger.info(f"Starting Preferred-Id Service ({config.search_backend} backend)")

    try:
        asyncio.run(run_http(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
