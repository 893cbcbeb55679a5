"""CLI entry point for the PantryRun browser relay."""
import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from src.browser.launcher import DEFAULT_CDP_PORT, ChromeLauncher
from src.core.config import Settings
from src.core.logging import setup_logging
from src.relay.server import create_app


def main() -> int:
    """Run the relay HTTP server."""
    parser = argparse.ArgumentParser(
        description="Expose a running Chrome tab as an HTTP automation relay"
    )
    parser.add_argument(
        "--config", "-c",
        default="config/relay.yaml",
        help="Path to relay YAML config (default: config/relay.yaml)"
    )
    parser.add_argument("--host", help="Bind address (overrides config)")
    parser.add_argument("--port", "-p", type=int, help="Listen port (overrides config)")
    parser.add_argument(
        "--cdp-endpoint",
        help="Chrome debug endpoint, e.g. http://127.0.0.1:9222"
    )
    parser.add_argument(
        "--launch-chrome",
        action="store_true",
        help="Start Chrome with remote debugging before serving"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")

    args = parser.parse_args()

    settings = Settings.from_yaml(Path(args.config))
    level = "DEBUG" if args.debug else settings.log_level
    setup_logging(level, log_file=args.log_file)
    logger = logging.getLogger(__name__)

    logger.info("=== PantryRun Browser Relay ===")

    if args.launch_chrome:
        launcher = ChromeLauncher(port=DEFAULT_CDP_PORT)
        try:
            endpoint = launcher.start()
        except FileNotFoundError as e:
            logger.error(str(e))
            return 1
        if endpoint is None:
            logger.error("Chrome did not start with remote debugging enabled")
            return 1
        settings.cdp_endpoint = endpoint

    if args.cdp_endpoint:
        settings.cdp_endpoint = args.cdp_endpoint
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port

    if not settings.cdp_endpoint:
        logger.warning("CDP_ENDPOINT not set; browser commands will fail until it is")

    app = create_app(settings)
    logger.info(f"Relay listening on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
