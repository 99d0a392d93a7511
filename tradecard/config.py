"""Configuration models and YAML loader.

The bot token can be provided via the ``BOT_TOKEN`` environment variable and
webhook settings via ``RENDER_EXTERNAL_URL`` / ``PORT``.  Values in the YAML
file are used as fallback; env vars always take precedence.  The YAML file
itself is optional; with env vars alone the defaults below apply.
"""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_PRICE_API = "https://api.coingecko.com/api/v3/simple/price"


class TelegramConfig(BaseModel):
    bot_token: str = ""

    @model_validator(mode="before")
    @classmethod
    def _resolve_env_vars(cls, values: dict) -> dict:  # type: ignore[override]
        """Override bot_token from env var if set."""
        env_token = os.environ.get("BOT_TOKEN")
        if env_token:
            values["bot_token"] = env_token
        return values

    @model_validator(mode="after")
    def _check_required(self) -> "TelegramConfig":
        if not self.bot_token:
            raise ValueError(
                "bot_token is required: set BOT_TOKEN env var "
                "or provide it in the YAML config"
            )
        return self


class WebhookConfig(BaseModel):
    """Webhook mode is used when ``external_url`` is set; polling otherwise."""

    external_url: str | None = None
    listen: str = "0.0.0.0"
    port: int = 10000

    @model_validator(mode="before")
    @classmethod
    def _resolve_env_vars(cls, values: dict) -> dict:  # type: ignore[override]
        env_url = os.environ.get("RENDER_EXTERNAL_URL")
        env_port = os.environ.get("PORT")
        if env_url:
            values["external_url"] = env_url
        if env_port:
            values["port"] = env_port
        return values

    @field_validator("external_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().rstrip("/")
        return v or None

    @property
    def enabled(self) -> bool:
        return self.external_url is not None


class PriceConfig(BaseModel):
    api_url: str = DEFAULT_PRICE_API
    timeout_seconds: float = 10.0
    fallback_prices: dict[str, float] = {"SOL": 150.0, "ETH": 3500.0}


class RenderConfig(BaseModel):
    assets_dir: str = "assets"


class BotConfig(BaseModel):
    telegram: TelegramConfig
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    price: PriceConfig = PriceConfig()
    render: RenderConfig = RenderConfig()
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def load_config(path: str | Path | None = None) -> BotConfig:
    """Load and validate bot configuration, optionally from a YAML file."""
    raw: dict = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

    # Sections may be omitted entirely when env vars supply the values
    for section in ("telegram", "webhook"):
        if raw.get(section) is None:
            raw[section] = {}

    return BotConfig(**raw)
