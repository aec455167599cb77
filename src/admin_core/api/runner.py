#!/usr/bin/env python3
"""FastAPI server runner."""

import argparse

import uvicorn

from admin_core.api.app import create_app
from admin_core.config.loader import load_config
from admin_core.logging.setup import configure_from, get_logger

logger = get_logger("api")


def main(config_path: str | None = None):
    """Run the FastAPI server."""
    config = load_config(config_path)
    configure_from(config.logging)

    logger.info("api_server_starting", host=config.server.host, port=config.server.port)

    try:
        uvicorn.run(
            create_app(config),
            host=config.server.host,
            port=config.server.port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("api_server_failed", error=str(e))
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Admin operations API server")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    args = parser.parse_args()
    main(config_path=args.config)
