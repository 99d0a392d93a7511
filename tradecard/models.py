"""Trade input models and chain definitions.

A card is rendered for exactly one ``TradeInput``. The chain decides which
logo asset is used, how that logo is sized next to a line of text, and which
coin is quoted for the USD price.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

MAX_TICKER_LENGTH = 10


class TradeInputError(ValueError):
    """Raised when user-supplied trade arguments violate the input contract."""


# ---------------------------------------------------------------------------
# Logo sizing strategies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FixedWidthSizing:
    """Scale to a fixed width, keeping the bitmap's aspect ratio."""

    width: float

    def size(self, bitmap_size: tuple[int, int], text_height: float) -> tuple[float, float]:
        bw, bh = bitmap_size
        return self.width, self.width * (bh / bw)


@dataclass(frozen=True)
class TextHeightSquareSizing:
    """Scale to a square whose side equals the text line height."""

    def size(self, bitmap_size: tuple[int, int], text_height: float) -> tuple[float, float]:
        return text_height, text_height


@dataclass(frozen=True)
class ChainInfo:
    logo_asset: str
    coin_id: str  # CoinGecko id
    fallback_price: float
    sizing: FixedWidthSizing | TextHeightSquareSizing


class Chain(str, Enum):
    SOL = "SOL"
    ETH = "ETH"

    @property
    def info(self) -> ChainInfo:
        return _CHAIN_INFO[self]

    @property
    def logo_asset(self) -> str:
        return self.info.logo_asset

    @property
    def coin_id(self) -> str:
        return self.info.coin_id

    @property
    def fallback_price(self) -> float:
        return self.info.fallback_price

    def logo_size(self, bitmap_size: tuple[int, int], text_height: float) -> tuple[float, float]:
        return self.info.sizing.size(bitmap_size, text_height)


_CHAIN_INFO: dict[Chain, ChainInfo] = {
    Chain.SOL: ChainInfo(
        logo_asset="sol",
        coin_id="solana",
        fallback_price=150.0,
        sizing=TextHeightSquareSizing(),
    ),
    Chain.ETH: ChainInfo(
        logo_asset="eth",
        coin_id="ethereum",
        fallback_price=3500.0,
        sizing=FixedWidthSizing(width=39),
    ),
}


@dataclass(frozen=True)
class TradeInput:
    """One render request. Assumed valid by the renderer."""

    ticker: str
    initial_investment: float
    final_amount: float
    chain: Chain
    price: float


@dataclass(frozen=True)
class TradeArgs:
    """Validated command arguments, before the price is known."""

    ticker: str
    initial_investment: float
    final_amount: float
    chain: Chain

    def with_price(self, price: float) -> TradeInput:
        return TradeInput(
            ticker=self.ticker,
            initial_investment=self.initial_investment,
            final_amount=self.final_amount,
            chain=self.chain,
            price=price,
        )


def _parse_number(raw: str) -> float:
    """Parse a float; unparseable input becomes NaN and fails range checks."""
    try:
        return float(raw)
    except ValueError:
        return math.nan


def parse_trade_args(args: list[str]) -> TradeArgs:
    """Validate ``/gen_card`` arguments: TICKER INITIAL FINAL CURRENCY.

    Raises TradeInputError with a message suitable for replying to the user.
    """
    if len(args) < 4:
        raise TradeInputError("Please provide all required parameters")

    ticker_raw, initial_raw, final_raw, chain_raw = args[:4]

    ticker = ticker_raw.strip().upper()
    if not ticker or len(ticker) > MAX_TICKER_LENGTH:
        raise TradeInputError(
            f"Please enter a valid ticker symbol (1-{MAX_TICKER_LENGTH} characters)"
        )

    initial = _parse_number(initial_raw)
    if not math.isfinite(initial) or initial <= 0:
        raise TradeInputError(
            "Please enter a valid positive number for your initial investment"
        )

    final = _parse_number(final_raw)
    if not math.isfinite(final) or final < 0:
        raise TradeInputError(
            "Please enter a valid non-negative number for your final amount"
        )

    try:
        chain = Chain(chain_raw.strip().upper())
    except ValueError:
        raise TradeInputError("Please choose either SOL or ETH for the currency") from None

    return TradeArgs(
        ticker=ticker,
        initial_investment=initial,
        final_amount=final,
        chain=chain,
    )
