"""Derived financial quantities for a trading card."""

from __future__ import annotations

from dataclasses import dataclass

from .models import TradeInput


@dataclass(frozen=True)
class DerivedMetrics:
    profit_quantity: float
    profit_usd: float
    roi: float
    initial_usd: float
    final_usd: float
    is_profitable: bool


def compute_metrics(trade: TradeInput) -> DerivedMetrics:
    """Compute display metrics. ``initial_investment`` must be > 0."""
    profit_quantity = trade.final_amount - trade.initial_investment
    initial_usd = trade.initial_investment * trade.price
    final_usd = trade.final_amount * trade.price

    return DerivedMetrics(
        profit_quantity=profit_quantity,
        profit_usd=final_usd - initial_usd,
        roi=trade.final_amount / trade.initial_investment,
        initial_usd=initial_usd,
        final_usd=final_usd,
        is_profitable=profit_quantity >= 0,
    )
