"""Telegram bot: command handling and card delivery.

Handles /start, /help and /gen_card. Runs either as a webhook listener (when
an external URL is configured) or with long polling.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
from telegram import BotCommand, Update
from telegram.ext import Application, CommandHandler, ContextTypes

from .assets import AssetResolver
from .card_renderer import build_trading_card
from .config import BotConfig
from .formatter import (
    USAGE,
    format_fetching_message,
    format_help_message,
    format_price_summary,
    format_render_error,
    format_usage_error,
    format_welcome_message,
)
from .models import TradeInputError, parse_trade_args
from .price import fetch_price

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand("gen_card", f"Generate a trading card: {USAGE}"),
    BotCommand("help", "Show help information"),
]


class TradingCardBot:
    """Telegram bot that renders trading cards on request."""

    def __init__(self, config: BotConfig) -> None:
        self._config = config
        self._resolver = AssetResolver(config.render.assets_dir)
        self._http: httpx.AsyncClient | None = None
        self._app = Application.builder().token(config.telegram.bot_token).build()
        self._app.add_handler(CommandHandler("start", self._cmd_start))
        self._app.add_handler(CommandHandler("help", self._cmd_help))
        self._app.add_handler(CommandHandler("gen_card", self._cmd_gen_card))

    @property
    def webhook_path(self) -> str:
        return f"bot{self._config.telegram.bot_token}"

    async def start(self) -> None:
        """Start receiving updates via webhook or polling."""
        self._http = httpx.AsyncClient(timeout=self._config.price.timeout_seconds)
        await self._app.initialize()
        await self._app.start()

        webhook = self._config.webhook
        if webhook.enabled:
            await self._app.updater.start_webhook(
                listen=webhook.listen,
                port=webhook.port,
                url_path=self.webhook_path,
                webhook_url=f"{webhook.external_url}/{self.webhook_path}",
            )
            logger.info("Webhook listening on %s:%d", webhook.listen, webhook.port)
        else:
            await self._app.updater.start_polling()
            logger.info("Telegram bot polling started")

        await self._register_commands()

    async def stop(self) -> None:
        """Stop the Telegram bot."""
        try:
            await self._app.updater.stop()
            await self._app.stop()
            await self._app.shutdown()
            logger.info("Telegram bot stopped")
        except Exception as e:
            logger.error("Error stopping Telegram bot: %s", e)
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def _register_commands(self) -> None:
        try:
            await self._app.bot.set_my_commands(BOT_COMMANDS)
        except Exception as e:
            logger.error("Failed to update command menu: %s", e)

    # --- Command Handlers ---

    async def _cmd_start(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        if not update.message:
            return
        await update.message.reply_text(format_welcome_message())

    async def _cmd_help(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        if not update.message:
            return
        await update.message.reply_text(format_help_message())

    async def _cmd_gen_card(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /gen_card TICKER INITIAL FINAL CURRENCY."""
        if not update.message:
            return

        try:
            args = parse_trade_args(context.args or [])
        except TradeInputError as e:
            await update.message.reply_text(format_usage_error(str(e)))
            return

        await update.message.reply_text(format_fetching_message(args.chain.value))

        try:
            price = await fetch_price(args.chain, self._config.price, self._http)
            trade = args.with_price(price)
            card = await asyncio.to_thread(build_trading_card, trade, self._resolver)
            await update.message.reply_photo(photo=card)
            await update.message.reply_text(format_price_summary(trade))
        except Exception:
            logger.exception("Error generating card for %s", args.ticker)
            await update.message.reply_text(format_render_error())
