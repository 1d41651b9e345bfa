"""Configuration loading and validation using Pydantic."""

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from pvdot.models import Interval, IntervalWindow


class StrategyConfig(BaseModel):
    interval: Interval = "1h"
    window: int = Field(default=20, ge=1)
    base_currency: str
    quote_currencies: list[str] = Field(min_length=1)
    threshold: Decimal = Field(default=Decimal(0), ge=0)
    ignore_locked: bool = False
    # max notional (in base currency) per order, 0 means unbounded
    max_amount: Decimal = Field(default=Decimal(0), ge=0)
    dry_run: bool = True
    verbose: bool = False

    @field_validator("base_currency")
    @classmethod
    def upper_base(cls, v):
        return v.strip().upper()

    @field_validator("quote_currencies")
    @classmethod
    def upper_quotes(cls, v):
        return [c.strip().upper() for c in v]

    @model_validator(mode="after")
    def base_not_quoted(self):
        if self.base_currency in self.quote_currencies:
            raise ValueError(
                f"base_currency '{self.base_currency}' must not be listed in quote_currencies"
            )
        return self

    @property
    def interval_window(self) -> IntervalWindow:
        return IntervalWindow(interval=self.interval, window=self.window)

    @property
    def symbols(self) -> list[str]:
        """Trading pairs, one per quote currency (e.g. BTCUSD)."""
        return [c + self.base_currency for c in self.quote_currencies]


class WeightsConfig(BaseModel):
    """Target allocation source."""

    source: Literal["static"] = "static"
    targets: dict[str, Decimal] = Field(default_factory=dict)

    @field_validator("targets")
    @classmethod
    def non_negative(cls, v):
        upper = {}
        for currency, weight in v.items():
            if weight < 0:
                raise ValueError(f"target weight for {currency} must be >= 0")
            upper[currency.strip().upper()] = weight
        return upper


class TradingConfig(BaseModel):
    paper: bool = True
    poll_interval_seconds: int = Field(default=30, ge=1)


class ProvidersConfig(BaseModel):
    exchange: Literal["alpaca-paper", "alpaca-live"] = "alpaca-paper"
    notifier: Literal["log", "slack"] = "log"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    trade_log: str
    decision_log: str
    app_log: str
    max_bytes: int = 10485760
    backup_count: int = 5


class AppConfig(BaseModel):
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    strategy: StrategyConfig
    weights: WeightsConfig = Field(default_factory=WeightsConfig)
    trading: TradingConfig = Field(default_factory=TradingConfig)
    logging: LoggingConfig

    @model_validator(mode="after")
    def targets_match_currencies(self):
        if self.weights.source != "static":
            return self
        known = {self.strategy.base_currency, *self.strategy.quote_currencies}
        unknown = sorted(set(self.weights.targets) - known)
        if unknown:
            raise ValueError(
                f"weights.targets has currencies not in base/quote currencies: {unknown}"
            )
        if sum(self.weights.targets.values(), Decimal(0)) <= 0:
            raise ValueError("weights.targets must sum to a positive value")
        return self


class Secrets(BaseSettings):
    """Loaded from .env file automatically."""

    alpaca_api_key: str
    alpaca_secret_key: str
    slack_webhook_url: Optional[str] = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def load_config(config_path: Path = Path("config/settings.yaml")) -> AppConfig:
    """Load and validate application configuration from YAML."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)

    return AppConfig(**raw)
