"""
Entry point for the Public Health Gateway Dash application.

Usage:
    python run_dash.py
    python run_dash.py --port 8060 --api-base-url http://backend:5000
    python run_dash.py --debug -v

Settings default to config/gateway.toml; command-line flags take precedence.
"""

import argparse
import logging
import sys
from pathlib import Path

from config import get_gateway_config
from core.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Public Health Gateway web app.")
    parser.add_argument("--host", help="Interface to bind (default from config)")
    parser.add_argument("--port", type=int, help="Port to listen on (default from config)")
    parser.add_argument("--api-base-url", help="Backend REST API base URL")
    parser.add_argument("--debug", action="store_true", help="Enable Dash debug mode")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config = get_gateway_config()
    if args.api_base_url:
        # The shared client is built lazily from this cached config
        config.api.base_url = args.api_base_url.rstrip("/")

    errors = config.validate()
    if errors:
        setup_logging()
        for error in errors:
            logger.error(error)
        return 1

    setup_logging(
        level=logging.DEBUG if args.verbose else config.logging.level,
        log_dir=Path(config.logging.log_dir),
        file_logging=config.logging.file_logging,
    )

    from gateway_app.app import app

    logger.info("Using backend at %s", config.api.base_url)
    app.run(
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        debug=args.debug or config.server.debug,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
