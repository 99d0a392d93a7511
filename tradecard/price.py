"""USD price lookup for the card's chain.

Quotes come from the CoinGecko simple-price endpoint. Any failure (network,
HTTP status, unexpected payload) is logged and replaced by the chain's
configured fallback price, so card generation never blocks on the quote.
"""

from __future__ import annotations

import logging
import math

import httpx

from .config import PriceConfig
from .models import Chain

logger = logging.getLogger(__name__)


def fallback_price(chain: Chain, config: PriceConfig) -> float:
    return config.fallback_prices.get(chain.value, chain.fallback_price)


async def fetch_price(
    chain: Chain,
    config: PriceConfig,
    client: httpx.AsyncClient | None = None,
) -> float:
    """Fetch the current USD price for ``chain``, or its fallback on failure."""
    params = {"ids": chain.coin_id, "vs_currencies": "usd"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.timeout_seconds) as own_client:
                resp = await own_client.get(config.api_url, params=params)
        else:
            resp = await client.get(config.api_url, params=params, timeout=config.timeout_seconds)
        resp.raise_for_status()
        price = float(resp.json()[chain.coin_id]["usd"])
    except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
        fallback = fallback_price(chain, config)
        logger.error(
            "Error fetching %s price: %s; using fallback %.2f", chain.value, e, fallback
        )
        return fallback

    if not math.isfinite(price) or price <= 0:
        fallback = fallback_price(chain, config)
        logger.error("Invalid %s price %r; using fallback %.2f", chain.value, price, fallback)
        return fallback

    return price
