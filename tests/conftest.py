"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pvdot.config import AppConfig, Secrets
from pvdot.models import Balance, Kline, Order
from pvdot.notify import Notifier
from pvdot.trading.base import ExchangeProvider
from pvdot.trading.broker import OrderError


class FakeExchange(ExchangeProvider):
    """In-memory exchange recording every call."""

    def __init__(self, prices=None, balances=None):
        self.prices: dict[str, Decimal] = dict(prices or {})
        self.balances: dict[str, Balance] = dict(balances or {})
        self.bars: list[Kline] = []
        self.price_queries: list[str] = []
        self.submitted: list[list[Order]] = []
        self.submit_error: OrderError | None = None

    def query_last_price(self, symbol: str) -> Decimal:
        self.price_queries.append(symbol)
        if symbol not in self.prices:
            raise ConnectionError(f"no ticker for {symbol}")
        return self.prices[symbol]

    def get_balances(self) -> dict[str, Balance]:
        return dict(self.balances)

    def submit_orders(self, orders: list[Order]) -> list[str]:
        self.submitted.append(list(orders))
        if self.submit_error is not None:
            raise self.submit_error
        return [f"order-{i}" for i in range(len(orders))]

    def get_bars(self, symbols: list[str], interval: str, limit: int) -> list[Kline]:
        return [b for b in self.bars if b.symbol in symbols]


class RecordingNotifier(Notifier):
    def __init__(self):
        self.messages: list[str] = []

    def notify(self, message: str, **fields) -> None:
        self.messages.append(message)


def make_kline(symbol="BTCUSDT", start=None, close="100", volume="10", interval="1h") -> Kline:
    start = start or datetime(2026, 10, 1, tzinfo=timezone.utc)
    price = Decimal(close)
    return Kline(
        symbol=symbol,
        interval=interval,
        start_time=start,
        open=price,
        high=price,
        low=price,
        close=price,
        volume=Decimal(volume),
    )


def hours(n: int) -> timedelta:
    return timedelta(hours=n)


@pytest.fixture
def test_config() -> AppConfig:
    """Provide a test configuration with safe defaults."""
    return AppConfig(
        strategy={
            "interval": "1h",
            "window": 5,
            "base_currency": "USDT",
            "quote_currencies": ["BTC"],
            "threshold": "0.05",
            "ignore_locked": False,
            "max_amount": "0",
            "dry_run": False,
        },
        weights={
            "source": "static",
            "targets": {"BTC": "0.6", "USDT": "0.4"},
        },
        trading={
            "paper": True,
            "poll_interval_seconds": 30,
        },
        logging={
            "level": "DEBUG",
            "trade_log": "/tmp/test_pvdot_trades.log",
            "decision_log": "/tmp/test_pvdot_decisions.log",
            "app_log": "/tmp/test_pvdot.log",
        },
    )


@pytest.fixture
def mock_secrets() -> Secrets:
    """Provide fake API keys for unit tests."""
    return Secrets(
        alpaca_api_key="test-alpaca-key",
        alpaca_secret_key="test-alpaca-secret",
    )


@pytest.fixture
def half_btc_exchange() -> FakeExchange:
    """BTC at 100 USDT; 5 BTC + 500 USDT puts BTC at weight 0.5 of 1000."""
    return FakeExchange(
        prices={"BTCUSDT": Decimal("100")},
        balances={
            "BTC": Balance(currency="BTC", available=Decimal("5")),
            "USDT": Balance(currency="USDT", available=Decimal("500")),
        },
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
