"""Trading Card Bot entry point.

Telegram bot that renders a trading card image from a ticker, an initial
investment, a final amount and a chain (SOL or ETH).

Usage:
    python main.py [configs/bot.yaml]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal

from tradecard.config import load_config
from tradecard.logging_utils import configure_logging
from tradecard.telegram_bot import TradingCardBot

logger = logging.getLogger(__name__)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Trading Card Telegram Bot")
    parser.add_argument(
        "config_file",
        nargs="?",
        default=None,
        help="Optional path to a YAML configuration file",
    )
    args = parser.parse_args()

    config = load_config(args.config_file)
    configure_logging(config.log_level)

    mode = "webhook" if config.webhook.enabled else "polling"
    logger.info("Starting trading card bot in %s mode...", mode)

    bot = TradingCardBot(config)

    # Signal handling for graceful shutdown
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received...")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    await bot.start()
    logger.info("Bot is running!")

    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down...")
        await bot.stop()
        logger.info("Shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
