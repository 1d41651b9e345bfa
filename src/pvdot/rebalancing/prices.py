"""Price resolution for the currencies of a target allocation."""

from decimal import Decimal
from typing import Iterable, NoReturn

import structlog

from pvdot.models import PriceMap
from pvdot.notify import Notifier
from pvdot.trading.base import ExchangeProvider

logger = structlog.get_logger(__name__)


class PriceResolutionError(Exception):
    """Raised when a price lookup fails. Aborts the current tick."""

    def __init__(self, symbol: str, cause: Exception | str, partial: PriceMap):
        super().__init__(f"query ticker error for {symbol}: {cause}")
        self.symbol = symbol
        self.cause = cause
        self.partial = partial


class PriceResolver:
    """Looks up the last trade price of each currency in the base currency."""

    def __init__(self, exchange: ExchangeProvider, notifier: Notifier):
        self._exchange = exchange
        self._notifier = notifier

    def resolve(self, currencies: Iterable[str], base_currency: str) -> PriceMap:
        """Resolve prices, stopping at the first failed lookup.

        The base currency is priced at exactly 1 without a lookup. Any
        lookup error or non-positive price raises PriceResolutionError with
        the prices resolved so far; the remaining currencies are skipped.
        """
        prices: PriceMap = {}

        for currency in sorted(currencies):
            if currency == base_currency:
                prices[currency] = Decimal(1)
                continue

            symbol = currency + base_currency
            try:
                price = self._exchange.query_last_price(symbol)
            except Exception as e:
                self._fail(symbol, e, prices)

            if price <= 0:
                self._fail(symbol, f"non-positive last price {price}", prices)

            prices[currency] = price

        return prices

    def _fail(self, symbol: str, cause: Exception | str, prices: PriceMap) -> NoReturn:
        error = PriceResolutionError(symbol, cause, dict(prices))
        self._notifier.notify(f"query ticker error: {cause}", symbol=symbol)
        logger.error("prices.query_ticker_error", symbol=symbol, error=str(cause))
        if isinstance(cause, Exception):
            raise error from cause
        raise error
