"""Trading card image generator.

Renders one fixed 1600×1071 layout: ticker headline, profit/loss in USD,
token quantities with chain logos, and an investment panel. Draw steps run
in a fixed order on a single Surface; several steps position elements from
the measured width of text drawn just before them.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum

from PIL import Image, ImageDraw, ImageFont

from .assets import AssetHandle, AssetResolver
from .formatter import format_quantity, format_signed_usd, format_usd
from .metrics import DerivedMetrics, compute_metrics
from .models import Chain, TradeInput
from .text_metrics import FontSpec, measure

logger = logging.getLogger(__name__)

CARD_W = 1600
CARD_H = 1071

# ---------------------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------------------
C_FALLBACK_BG = (0,   0,   0)      # used when bg.png is missing
C_WHITE       = (255, 255, 255)
C_BLACK       = (0,   0,   0)
C_PROFIT      = (0,   255, 0)
C_LOSS        = (255, 0,   0)
C_PANEL_EDGE  = (129, 129, 129)    # #818181
C_PANEL_FILL  = (32,  32,  32)     # #202020
C_DIVIDER     = (145, 145, 145)    # #919191
C_MUTED       = (129, 129, 129)

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
F_LABEL_BOX  = FontSpec("Impact", 70, bold=True)
F_TICKER     = FontSpec("AntonSC", 132, bold=True)
F_HEADER     = FontSpec("GeistMono", 36)
F_PROFIT     = FontSpec("Impact", 152, bold=True)
F_QUANTITY   = FontSpec("Impact", 74, bold=True)
F_PANEL_LBL  = FontSpec("GeistMono", 28)
F_PANEL_LBLB = FontSpec("GeistMono", 28, bold=True)
F_AMOUNT     = FontSpec("Impact", 77, bold=True)
F_USD        = FontSpec("GeistMono", 26, bold=True)

PLACEHOLDER_GLYPH = "≡"
SEPARATOR_GLYPH = ">"

# Investment panel geometry
_AMOUNT_Y = 835
_INVESTED_X = 130
_FINAL_X = 440
_LOGO_GAP = 19
_SEP_W = 22
_SEP_H = 35
_SEP_TOP = 850
_SEP_FALLBACK = (352, 835)
_INVESTED_LOGO_FALLBACK = (272, 835)
_FINAL_LOGO_FALLBACK = (544, 835)


Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


class Surface:
    """Fixed-size RGB canvas owned by exactly one render call."""

    def __init__(self, width: int = CARD_W, height: int = CARD_H) -> None:
        self.image = Image.new("RGB", (width, height), C_FALLBACK_BG)
        self.draw = ImageDraw.Draw(self.image)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def encode(self) -> io.BytesIO:
        buf = io.BytesIO()
        self.image.save(buf, format="PNG", optimize=True)
        buf.seek(0)
        return buf


# ---------------------------------------------------------------------------
# Low-level drawing helpers
# ---------------------------------------------------------------------------

def _text(
    surface: Surface,
    x: float,
    y: float,
    text: str,
    font: Font,
    fill: tuple,
    anchor: str = "la",
) -> None:
    """Draw text; default anchor puts (x, y) at the left of the ascender line."""
    surface.draw.text((x, y), text, font=font, fill=fill, anchor=anchor)


def _stroke_rect(surface: Surface, x: int, y: int, w: int, h: int, color: tuple, width: int) -> None:
    """Stroke centred on the rectangle edge, half inside and half outside."""
    half = width // 2
    surface.draw.rectangle(
        [(x - half, y - half), (x + w + half, y + h + half)], outline=color, width=width
    )


def _fill_rect(surface: Surface, x: int, y: int, w: int, h: int, color: tuple) -> None:
    surface.draw.rectangle([(x, y), (x + w - 1, y + h - 1)], fill=color)


def _paste(surface: Surface, bitmap: Image.Image, x: float, y: float, w: float, h: float) -> None:
    """Scale ``bitmap`` to (w, h) and alpha-composite it at (x, y)."""
    size = (max(1, round(w)), max(1, round(h)))
    scaled = bitmap.resize(size, Image.Resampling.LANCZOS)
    surface.image.paste(scaled, (round(x), round(y)), scaled)


def _pnl_color(metrics: DerivedMetrics) -> tuple:
    return C_PROFIT if metrics.is_profitable else C_LOSS


# ---------------------------------------------------------------------------
# Logo slots
# ---------------------------------------------------------------------------

class SlotState(Enum):
    ASSET = "asset"
    GLYPH = "glyph"


@dataclass(frozen=True)
class LogoPlacement:
    state: SlotState
    x: float
    y: float


@dataclass(frozen=True)
class LogoSlot:
    """A chain logo position with a placeholder glyph to use instead.

    ``glyph_at`` is where the placeholder goes when the logo can't be drawn;
    None means reuse the computed logo position.
    """

    x: float
    y: float
    text_height: float
    glyph_at: tuple[float, float] | None = None
    glyph_anchor: str = "la"

    def render(
        self,
        surface: Surface,
        logo: AssetHandle,
        chain: Chain,
        glyph_font: Font,
        glyph_fill: tuple,
    ) -> LogoPlacement:
        if logo.found and logo.bitmap is not None:
            try:
                w, h = chain.logo_size(logo.bitmap.size, self.text_height)
                _paste(surface, logo.bitmap, self.x, self.y, w, h)
                return LogoPlacement(SlotState.ASSET, self.x, self.y)
            except (OSError, ValueError, ZeroDivisionError) as e:
                logger.warning("Failed to draw %s logo: %s", chain.value, e)

        gx, gy = self.glyph_at if self.glyph_at is not None else (self.x, self.y)
        _text(surface, gx, gy, PLACEHOLDER_GLYPH, glyph_font, glyph_fill, anchor=self.glyph_anchor)
        return LogoPlacement(SlotState.GLYPH, gx, gy)


# ---------------------------------------------------------------------------
# Draw steps, in render order
# ---------------------------------------------------------------------------

def _draw_background(surface: Surface, resolver: AssetResolver) -> None:
    bg = resolver.resolve("background")
    if bg.found and bg.bitmap is not None:
        _paste(surface, bg.bitmap, 0, 0, *surface.size)
    else:
        _fill_rect(surface, 0, 0, *surface.size, C_FALLBACK_BG)


def _draw_label_box(surface: Surface, resolver: AssetResolver) -> None:
    _stroke_rect(surface, 1192, 848, 321, 125, C_WHITE, width=5)
    _fill_rect(surface, 1194, 850, 317, 121, C_BLACK)
    _text(surface, 1352, 937, "MUGSHOT", resolver.font(F_LABEL_BOX), C_WHITE, anchor="ms")


def _draw_ticker(surface: Surface, resolver: AssetResolver, ticker: str) -> None:
    _text(surface, 112, 63, f"${ticker}", resolver.font(F_TICKER), C_WHITE)


def _draw_section_header(surface: Surface, resolver: AssetResolver) -> None:
    _text(surface, 125, 299, "PROFIT/LOSS", resolver.font(F_HEADER), C_WHITE)


def _draw_profit_amount(surface: Surface, resolver: AssetResolver, metrics: DerivedMetrics) -> None:
    _text(
        surface, 61, 346, format_signed_usd(metrics.profit_usd, metrics.is_profitable),
        resolver.font(F_PROFIT), _pnl_color(metrics),
    )


def _draw_quantity_row(
    surface: Surface,
    resolver: AssetResolver,
    metrics: DerivedMetrics,
    chain: Chain,
    logo: AssetHandle,
) -> LogoPlacement:
    """Profit quantity with the chain logo right after it.

    The slot shows the raw token profit, not a percentage.
    """
    font = resolver.font(F_QUANTITY)
    x, mid_y = 119, 577
    text = format_quantity(metrics.profit_quantity, "profit")
    _text(surface, x, mid_y, text, font, C_WHITE, anchor="lm")

    text_h = F_QUANTITY.line_height
    slot = LogoSlot(
        x=x + measure(text, font) + 20,
        y=mid_y - text_h / 2,
        text_height=text_h,
    )
    return slot.render(surface, logo, chain, font, C_WHITE)


def _draw_investment_panel(surface: Surface) -> None:
    _stroke_rect(surface, 70, 736, 671, 261, C_PANEL_EDGE, width=5)
    _fill_rect(surface, 73, 738, 665, 257, C_PANEL_FILL)

    _stroke_rect(surface, 70, 998, 671, 12, C_DIVIDER, width=5)
    _fill_rect(surface, 70, 998, 671, 12, C_DIVIDER)


def _draw_labels_row(surface: Surface, resolver: AssetResolver, metrics: DerivedMetrics) -> None:
    font = resolver.font(F_PANEL_LBL)
    _text(surface, _INVESTED_X, 780, "INVESTED", font, C_WHITE)

    sold = f"SOLD {format_quantity(metrics.roi, 'roi')}"
    _text(surface, _FINAL_X, 780, sold, font, C_WHITE)
    suffix_x = _FINAL_X + measure(sold, font)
    _text(surface, suffix_x, 780, "X ROI", resolver.font(F_PANEL_LBLB), C_WHITE)


def _draw_invested_amount(
    surface: Surface,
    resolver: AssetResolver,
    trade: TradeInput,
    logo: AssetHandle,
) -> LogoPlacement:
    font = resolver.font(F_AMOUNT)
    text = format_quantity(trade.initial_investment, "amount")
    _text(surface, _INVESTED_X, _AMOUNT_Y, text, font, C_WHITE)

    text_h = F_AMOUNT.line_height
    slot = LogoSlot(
        x=_INVESTED_X + measure(text, font) + _LOGO_GAP,
        y=_AMOUNT_Y + text_h * 0.35,
        text_height=text_h,
        glyph_at=_INVESTED_LOGO_FALLBACK,
    )
    return slot.render(surface, logo, trade.chain, font, C_WHITE)


def _draw_separator(
    surface: Surface,
    resolver: AssetResolver,
    invested_logo: LogoPlacement,
) -> None:
    """Arrow between the two amounts, centred in the gap after the first logo.

    Without a drawn first logo there is no gap to centre in, so the plain
    glyph goes to its fixed coordinate.
    """
    text_h = F_AMOUNT.line_height
    if invested_logo.state is SlotState.ASSET:
        sep = resolver.resolve("separator")
        if sep.found and sep.bitmap is not None:
            logo_right = invested_logo.x + text_h
            gap = _FINAL_X - logo_right
            x = logo_right + gap / 2 - _SEP_W / 2
            y = _SEP_TOP + text_h / 2 - _SEP_H / 2
            _paste(surface, sep.bitmap, x, y, _SEP_W, _SEP_H)
            return

    _text(surface, *_SEP_FALLBACK, SEPARATOR_GLYPH, resolver.font(F_AMOUNT), C_WHITE)


def _draw_final_amount(
    surface: Surface,
    resolver: AssetResolver,
    trade: TradeInput,
    metrics: DerivedMetrics,
    logo: AssetHandle,
) -> LogoPlacement:
    font = resolver.font(F_AMOUNT)
    color = _pnl_color(metrics)
    text = format_quantity(trade.final_amount, "amount")
    _text(surface, _FINAL_X, _AMOUNT_Y, text, font, color)

    slot = LogoSlot(
        x=_FINAL_X + measure(text, font) + _LOGO_GAP,
        y=_AMOUNT_Y + F_AMOUNT.line_height * 0.35,
        text_height=F_AMOUNT.line_height,
        glyph_at=_FINAL_LOGO_FALLBACK,
    )
    return slot.render(surface, logo, trade.chain, font, color)


def _draw_usd_row(surface: Surface, resolver: AssetResolver, metrics: DerivedMetrics) -> None:
    font = resolver.font(F_USD)
    _text(surface, _INVESTED_X, 927, format_usd(metrics.initial_usd), font, C_MUTED)
    _text(surface, _FINAL_X, 927, format_usd(metrics.final_usd), font, C_MUTED)


# ---------------------------------------------------------------------------
# Card builder
# ---------------------------------------------------------------------------

def _render_trading_card(trade: TradeInput, resolver: AssetResolver) -> Surface:
    metrics = compute_metrics(trade)
    surface = Surface()

    _draw_background(surface, resolver)
    _draw_label_box(surface, resolver)
    _draw_ticker(surface, resolver, trade.ticker)
    _draw_section_header(surface, resolver)
    _draw_profit_amount(surface, resolver, metrics)

    logo = resolver.resolve("logo", trade.chain)
    _draw_quantity_row(surface, resolver, metrics, trade.chain, logo)

    _draw_investment_panel(surface)
    _draw_labels_row(surface, resolver, metrics)

    invested_logo = _draw_invested_amount(surface, resolver, trade, logo)
    _draw_separator(surface, resolver, invested_logo)
    _draw_final_amount(surface, resolver, trade, metrics, logo)

    _draw_usd_row(surface, resolver, metrics)

    return surface


def build_trading_card(trade: TradeInput, resolver: AssetResolver | None = None) -> io.BytesIO:
    """Generate the PNG trading card for ``trade``.

    Missing or unreadable assets degrade to fallbacks; the result is always a
    CARD_W×CARD_H PNG. Returns BytesIO seeked to 0.
    """
    if resolver is None:
        resolver = AssetResolver()

    logger.info(
        "Rendering card for $%s (%s, price %.2f)", trade.ticker, trade.chain.value, trade.price
    )
    return _render_trading_card(trade, resolver).encode()
