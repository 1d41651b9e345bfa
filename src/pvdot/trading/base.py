"""Abstract base class for exchange providers."""

from abc import ABC, abstractmethod
from decimal import Decimal

from pvdot.models import Balance, Kline, Order


class ExchangeProvider(ABC):
    """Interface for prices, balances, market data and order execution."""

    @abstractmethod
    def query_last_price(self, symbol: str) -> Decimal:
        """Last trade price of a pair such as BTCUSD."""
        ...

    @abstractmethod
    def get_balances(self) -> dict[str, Balance]:
        """Balances keyed by currency."""
        ...

    @abstractmethod
    def submit_orders(self, orders: list[Order]) -> list[str]:
        """Submit orders. Returns order IDs, raises OrderError on failure."""
        ...

    @abstractmethod
    def get_bars(self, symbols: list[str], interval: str, limit: int) -> list[Kline]:
        """Most recent closed bars per symbol, oldest first."""
        ...
