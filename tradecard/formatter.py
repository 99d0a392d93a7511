"""Display-string formatting for the card and for Telegram replies.

Card values:
  - format_usd() / format_signed_usd(): ``$1,234.56`` style currency
  - format_quantity(): fixed-decimal token amounts and ROI

Reply texts for the bot commands live at the bottom of the module.
"""

from __future__ import annotations

from typing import Literal

from .models import TradeInput

QuantityKind = Literal["profit", "amount", "roi"]

_QUANTITY_DECIMALS: dict[str, int] = {
    "profit": 3,
    "amount": 1,
    "roi": 2,
}

USAGE = "/gen_card TICKER INITIAL_INVESTMENT FINAL_AMOUNT CURRENCY"
EXAMPLE = "/gen_card BONK 1000 2500 SOL"


# ---------------------------------------------------------------------------
#  Card values
# ---------------------------------------------------------------------------


def format_usd(value: float, sign: str = "") -> str:
    """Format as ``{sign}$X,XXX.XX``. Pass the absolute value with a sign."""
    return f"{sign}${value:,.2f}"


def format_signed_usd(value: float, positive: bool | None = None) -> str:
    """Format value as +$X.XX or -$X.XX.

    The sign follows ``positive`` when given, otherwise ``value >= 0``.
    """
    if positive is None:
        positive = value >= 0
    sign = "+" if positive else "-"
    return format_usd(abs(value), sign)


def format_quantity(value: float, kind: QuantityKind) -> str:
    decimals = _QUANTITY_DECIMALS[kind]
    return f"{value:.{decimals}f}"


# ---------------------------------------------------------------------------
#  Bot replies
# ---------------------------------------------------------------------------


def format_welcome_message() -> str:
    return (
        "Welcome to the Trading Card Generator! \U0001f680\n\n"
        "Use the /gen_card command with the following format:\n"
        f"{USAGE}\n\n"
        f"Example: {EXAMPLE}\n\n"
        "CURRENCY can be either SOL or ETH."
    )


def format_help_message() -> str:
    return (
        "This bot creates a stylized trading card with your trade details. \U0001f4c8\n\n"
        "Commands:\n"
        f"{USAGE} - Generate a card with your trading details \U0001f5bc️\n"
        f"  Example: {EXAMPLE}\n\n"
        "/help - Show this help message \U0001f4a1"
    )


def format_usage_error(reason: str) -> str:
    """Validation failure reply, with usage appended."""
    return f"{reason}:\n{USAGE}\n\nExample: {EXAMPLE}"


def format_fetching_message(chain: str) -> str:
    return f"Fetching current {chain} price and generating your trading card..."


def format_price_summary(trade: TradeInput) -> str:
    """Plain-text follow-up sent after the card photo."""
    return (
        f"Current {trade.chain.value} price: ${trade.price:.2f} USD\n"
        f"Initial investment value: ${trade.initial_investment * trade.price:.2f}\n"
        f"Current value: ${trade.final_amount * trade.price:.2f}"
    )


def format_render_error() -> str:
    return "Sorry, there was an error generating your card. Please try again."
