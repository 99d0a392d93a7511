"""Shared test fixtures for trading card tests."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from tradecard.assets import AssetResolver
from tradecard.models import Chain, TradeInput

# Solid colours that never appear elsewhere on the card
BG_COLOR = (40, 60, 90)
LOGO_COLOR = (0, 0, 255)
SEPARATOR_COLOR = (255, 0, 255)

_ENV_KEYS = ("BOT_TOKEN", "RENDER_EXTERNAL_URL", "PORT")


def _write_png(path: Path, size: tuple[int, int], color: tuple) -> None:
    Image.new("RGBA", size, color + (255,)).save(path, format="PNG")


@pytest.fixture(autouse=True)
def clean_env():
    """Run every test without the bot's env vars set."""
    env = {k: v for k, v in os.environ.items() if k not in _ENV_KEYS}
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def profit_trade() -> TradeInput:
    return TradeInput(
        ticker="BONK",
        initial_investment=1000,
        final_amount=2500,
        chain=Chain.SOL,
        price=150,
    )


@pytest.fixture
def loss_trade() -> TradeInput:
    return TradeInput(
        ticker="TRUMP",
        initial_investment=1000,
        final_amount=500,
        chain=Chain.ETH,
        price=3500,
    )


@pytest.fixture
def small_sol_trade() -> TradeInput:
    """Short amounts keep the investment panel text clear of the separator gap."""
    return TradeInput(
        ticker="WIF",
        initial_investment=1,
        final_amount=2.5,
        chain=Chain.SOL,
        price=150,
    )


@pytest.fixture
def full_assets_dir(tmp_path: Path) -> Path:
    """Assets dir with every bitmap present (no fonts)."""
    assets = tmp_path / "assets"
    assets.mkdir()
    _write_png(assets / "bg.png", (800, 536), BG_COLOR)
    _write_png(assets / "sol.png", (64, 64), LOGO_COLOR)
    # 1:2 aspect so fixed-width sizing is observable
    _write_png(assets / "eth.png", (20, 40), LOGO_COLOR)
    _write_png(assets / "stroke.png", (22, 35), SEPARATOR_COLOR)
    return assets


@pytest.fixture
def empty_assets_dir(tmp_path: Path) -> Path:
    assets = tmp_path / "empty-assets"
    assets.mkdir()
    return assets


@pytest.fixture
def full_resolver(full_assets_dir: Path) -> AssetResolver:
    return AssetResolver(full_assets_dir)


@pytest.fixture
def empty_resolver(empty_assets_dir: Path) -> AssetResolver:
    return AssetResolver(empty_assets_dir)
