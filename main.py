"""
Main entrypoint: Initia2Aptos bridge API server.

Reads settings from env (and .env), applies CLI overrides, builds the
FastAPI app for that configuration and serves it with uvicorn.

Env: PORT, HOST, CHAIN_ID, INITIA_ENDPOINT, APTOS_CHAIN_ID, CACHE_ENABLED,
CACHE_DURATION, DEBUG, LOG_ERRORS, REQUEST_TIMEOUT_SEC, LOG_LEVEL.

Examples:
    python main.py --endpoint https://rest.testnet.initia.xyz --chain-id initiation-2
    python main.py -p 8080 --no-cache
"""

from __future__ import annotations

import argparse
import os
import sys

# Configure structured JSON logging before other imports that may log
from initia2aptos.bridge_logging import get_logger

logger = get_logger("main")


def build_parser() -> argparse.ArgumentParser:
    from initia2aptos import __version__

    parser = argparse.ArgumentParser(
        prog="initia2aptos",
        description="Initia2Aptos Bridge API",
    )
    parser.add_argument("-V", "--version", action="version", version=__version__)
    parser.add_argument("-p", "--port", type=int, help="Port to run the server on (default 3000)")
    parser.add_argument("--host", help="Interface to bind (default 0.0.0.0)")
    parser.add_argument("-c", "--chain-id", help="Initia chain id (default echelon-1)")
    parser.add_argument("-e", "--endpoint", help="Initia REST endpoint")
    parser.add_argument("--aptos-chain-id", type=int, help="Numeric chain id reported in ledger info")
    parser.add_argument(
        "--cache",
        dest="cache_enabled",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable the upstream response cache",
    )
    parser.add_argument("--cache-duration", help='Cache TTL, e.g. "5 minutes", "1 hour", "1 day"')
    parser.add_argument("--timeout", dest="request_timeout_sec", type=float, help="Upstream HTTP timeout (seconds)")
    parser.add_argument("--debug", action="store_true", default=None, help="Log every request")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI flags, build the app and run it under uvicorn."""
    args = build_parser().parse_args(argv)

    from initia2aptos.config import get_settings

    try:
        config = get_settings().with_overrides(
            port=args.port,
            host=args.host,
            chain_id=args.chain_id,
            endpoint=args.endpoint,
            aptos_chain_id=args.aptos_chain_id,
            cache_enabled=args.cache_enabled,
            cache_duration=args.cache_duration,
            request_timeout_sec=args.request_timeout_sec,
            debug=args.debug,
        )
    except ValueError as e:
        logger.error("main_config_error", error=str(e))
        sys.exit(2)

    from initia2aptos.api_server.server import create_app
    import uvicorn

    app = create_app(config)
    logger.info(
        "main_server_starting",
        host=config.host,
        port=config.port,
        endpoint=config.endpoint,
        chain_id=config.chain_id,
    )
    uvicorn.run(app, host=config.host, port=config.port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
