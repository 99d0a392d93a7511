"""Tests for the Telegram command handlers."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from PIL import Image

from tradecard.card_renderer import CARD_H, CARD_W
from tradecard.config import BotConfig, RenderConfig, TelegramConfig, WebhookConfig
from tradecard.models import Chain
from tradecard.telegram_bot import TradingCardBot


def _make_config(assets_dir: Path, external_url: str | None = None) -> BotConfig:
    return BotConfig(
        telegram=TelegramConfig(bot_token="123456:TEST-token"),
        webhook=WebhookConfig(external_url=external_url),
        render=RenderConfig(assets_dir=str(assets_dir)),
    )


def _make_update() -> MagicMock:
    update = MagicMock()
    update.message.reply_text = AsyncMock()
    update.message.reply_photo = AsyncMock()
    return update


def _make_context(args: list[str] | None) -> MagicMock:
    context = MagicMock()
    context.args = args
    return context


def _mock_app() -> MagicMock:
    app = MagicMock()
    for name in ("initialize", "start", "stop", "shutdown"):
        setattr(app, name, AsyncMock())
    for name in ("start_polling", "start_webhook", "stop"):
        setattr(app.updater, name, AsyncMock())
    app.bot.set_my_commands = AsyncMock()
    return app


def _replies(update: MagicMock) -> list[str]:
    return [c.args[0] for c in update.message.reply_text.await_args_list]


@pytest.fixture
def bot(full_assets_dir: Path) -> TradingCardBot:
    return TradingCardBot(_make_config(full_assets_dir))


class TestInfoCommands:
    @pytest.mark.asyncio
    async def test_start(self, bot: TradingCardBot) -> None:
        update = _make_update()
        await bot._cmd_start(update, _make_context(None))
        assert "Welcome" in _replies(update)[0]

    @pytest.mark.asyncio
    async def test_help(self, bot: TradingCardBot) -> None:
        update = _make_update()
        await bot._cmd_help(update, _make_context(None))
        assert "/gen_card" in _replies(update)[0]

    @pytest.mark.asyncio
    async def test_no_message_ignored(self, bot: TradingCardBot) -> None:
        update = MagicMock()
        update.message = None
        await bot._cmd_help(update, _make_context(None))
        await bot._cmd_gen_card(update, _make_context(["A", "1", "2", "SOL"]))


class TestGenCard:
    @pytest.mark.asyncio
    async def test_generates_card(self, bot: TradingCardBot) -> None:
        update = _make_update()
        with patch("tradecard.telegram_bot.fetch_price", AsyncMock(return_value=150.0)) as fp:
            await bot._cmd_gen_card(update, _make_context(["bonk", "1000", "2500", "sol"]))

        assert fp.await_args.args[0] is Chain.SOL
        replies = _replies(update)
        assert replies[0] == "Fetching current SOL price and generating your trading card..."
        assert "Current SOL price: $150.00 USD" in replies[1]

        update.message.reply_photo.assert_awaited_once()
        photo = update.message.reply_photo.await_args.kwargs["photo"]
        assert isinstance(photo, io.BytesIO)
        assert Image.open(photo).size == (CARD_W, CARD_H)

    @pytest.mark.asyncio
    async def test_missing_args(self, bot: TradingCardBot) -> None:
        update = _make_update()
        with patch("tradecard.telegram_bot.fetch_price", AsyncMock()) as fp:
            await bot._cmd_gen_card(update, _make_context(["BONK", "1000"]))

        fp.assert_not_awaited()
        update.message.reply_photo.assert_not_awaited()
        assert "Example: /gen_card BONK 1000 2500 SOL" in _replies(update)[0]

    @pytest.mark.asyncio
    async def test_invalid_chain(self, bot: TradingCardBot) -> None:
        update = _make_update()
        await bot._cmd_gen_card(update, _make_context(["BONK", "1000", "2500", "BTC"]))
        assert "SOL or ETH" in _replies(update)[0]
        update.message.reply_photo.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_render_failure_replies_with_error(self, bot: TradingCardBot) -> None:
        update = _make_update()
        with patch("tradecard.telegram_bot.fetch_price", AsyncMock(return_value=3500.0)), \
                patch("tradecard.telegram_bot.build_trading_card", side_effect=RuntimeError("boom")):
            await bot._cmd_gen_card(update, _make_context(["TRUMP", "1000", "500", "ETH"]))

        update.message.reply_photo.assert_not_awaited()
        assert _replies(update)[-1].startswith("Sorry, there was an error")


class TestStartup:
    def test_webhook_path_uses_token(self, bot: TradingCardBot) -> None:
        assert bot.webhook_path == "bot123456:TEST-token"

    @pytest.mark.asyncio
    async def test_polling_mode(self, full_assets_dir: Path) -> None:
        bot = TradingCardBot(_make_config(full_assets_dir))
        app = _mock_app()
        app.bot.set_my_commands.side_effect = RuntimeError("offline")
        bot._app = app

        await bot.start()

        app.updater.start_polling.assert_awaited_once()
        app.updater.start_webhook.assert_not_awaited()
        # Command menu failure is logged, not raised
        app.bot.set_my_commands.assert_awaited_once()

        await bot.stop()
        app.shutdown.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_webhook_mode(self, full_assets_dir: Path) -> None:
        bot = TradingCardBot(_make_config(full_assets_dir, "https://cards.example.com"))
        app = _mock_app()
        bot._app = app

        await bot.start()

        app.updater.start_polling.assert_not_awaited()
        kwargs = app.updater.start_webhook.await_args.kwargs
        assert kwargs["listen"] == "0.0.0.0"
        assert kwargs["port"] == 10000
        assert kwargs["url_path"] == "bot123456:TEST-token"
        assert kwargs["webhook_url"] == "https://cards.example.com/bot123456:TEST-token"
        await bot.stop()
