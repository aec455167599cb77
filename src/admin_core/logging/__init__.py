"""Structured logging."""

from admin_core.logging.setup import configure_from, get_logger, setup_logging

__all__ = ["configure_from", "get_logger", "setup_logging"]
