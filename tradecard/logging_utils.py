"""Logging configuration for the bot."""

from __future__ import annotations

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure logging with console output."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Avoid duplicate handlers on re-init
    root.handlers.clear()
    root.addHandler(handler)

    # httpx logs every request URL, which includes the bot token
    for noisy in ("httpx", "httpcore", "telegram", "PIL"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
