"""Alpaca crypto interface for prices, balances, bars and order execution."""

from datetime import datetime, timedelta, timezone
from decimal import ROUND_DOWN, Decimal

import structlog
from alpaca.data.historical import CryptoHistoricalDataClient
from alpaca.data.requests import CryptoBarsRequest, CryptoLatestTradeRequest
from alpaca.data.timeframe import TimeFrame, TimeFrameUnit
from alpaca.trading.client import TradingClient
from alpaca.trading.enums import OrderSide as AlpacaOrderSide
from alpaca.trading.enums import TimeInForce
from alpaca.trading.requests import MarketOrderRequest
from tenacity import retry, stop_after_attempt, wait_exponential

from pvdot.config import AppConfig, Secrets
from pvdot.models import Balance, Kline, Order, OrderSide, interval_seconds
from pvdot.trading.base import ExchangeProvider

logger = structlog.get_logger(__name__)

# Alpaca accepts crypto quantities with up to 9 decimal places
QTY_STEP = Decimal("0.000000001")

_TIMEFRAME_UNITS = {"m": TimeFrameUnit.Minute, "h": TimeFrameUnit.Hour, "d": TimeFrameUnit.Day}


class OrderError(Exception):
    """Raised when one or more orders are rejected or fail."""

    def __init__(self, message: str, order_ids: list[str] | None = None):
        super().__init__(message)
        self.order_ids = order_ids or []


def to_timeframe(interval: str) -> TimeFrame:
    """Convert an interval such as '15m' to an Alpaca TimeFrame."""
    return TimeFrame(int(interval[:-1]), _TIMEFRAME_UNITS[interval[-1]])


class AlpacaExchangeProvider(ExchangeProvider):
    """Handles all interactions with the Alpaca trading and crypto data APIs."""

    def __init__(self, config: AppConfig, secrets: Secrets):
        self._base_currency = config.strategy.base_currency
        self._client = TradingClient(
            api_key=secrets.alpaca_api_key,
            secret_key=secrets.alpaca_secret_key,
            paper=config.trading.paper,
        )
        self._data_client = CryptoHistoricalDataClient(
            api_key=secrets.alpaca_api_key,
            secret_key=secrets.alpaca_secret_key,
        )

    def to_pair(self, symbol: str) -> str:
        """BTCUSD -> BTC/USD."""
        if "/" in symbol or not symbol.endswith(self._base_currency):
            return symbol
        return f"{symbol[: -len(self._base_currency)]}/{self._base_currency}"

    def from_pair(self, pair: str) -> str:
        """BTC/USD -> BTCUSD."""
        return pair.replace("/", "")

    def query_last_price(self, symbol: str) -> Decimal:
        pair = self.to_pair(symbol)
        trades = self._data_client.get_crypto_latest_trade(
            CryptoLatestTradeRequest(symbol_or_symbols=pair)
        )
        return Decimal(str(trades[pair].price))

    def get_balances(self) -> dict[str, Balance]:
        """Base currency cash plus one balance per open crypto position."""
        account = self._client.get_account()
        cash = Decimal(str(account.cash))
        buying_power = Decimal(str(account.non_marginable_buying_power or 0))
        available = max(min(buying_power, cash), Decimal(0))

        balances = {
            self._base_currency: Balance(
                currency=self._base_currency,
                available=available,
                locked=max(cash - available, Decimal(0)),
            )
        }

        for p in self._client.get_all_positions():
            symbol = self.from_pair(p.symbol)
            if not symbol.endswith(self._base_currency):
                continue
            currency = symbol[: -len(self._base_currency)]
            qty = Decimal(str(p.qty))
            qty_available = Decimal(str(p.qty_available)) if p.qty_available is not None else qty
            balances[currency] = Balance(
                currency=currency,
                available=qty_available,
                locked=max(qty - qty_available, Decimal(0)),
            )

        return balances

    def submit_orders(self, orders: list[Order]) -> list[str]:
        """Submit every order, then raise OrderError if any of them failed."""
        order_ids: list[str] = []
        failures: list[str] = []

        for order in orders:
            try:
                order_id = self._submit_order(order)
            except Exception as e:
                logger.error(
                    "broker.order_failed",
                    symbol=order.symbol,
                    side=order.side.value,
                    error=str(e),
                )
                failures.append(f"{order.symbol}: {e}")
                continue
            if order_id is not None:
                order_ids.append(order_id)

        if failures:
            raise OrderError(
                f"{len(failures)} of {len(orders)} orders failed: {'; '.join(failures)}",
                order_ids=order_ids,
            )
        return order_ids

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(min=1, max=10), reraise=True)
    def _submit_order(self, order: Order) -> str | None:
        qty = order.quantity.quantize(QTY_STEP, rounding=ROUND_DOWN)
        if qty <= 0:
            logger.warning(
                "broker.order_below_precision",
                symbol=order.symbol,
                quantity=str(order.quantity),
            )
            return None

        request = MarketOrderRequest(
            symbol=self.to_pair(order.symbol),
            qty=float(qty),
            side=AlpacaOrderSide.BUY if order.side == OrderSide.BUY else AlpacaOrderSide.SELL,
            time_in_force=TimeInForce.GTC,
        )

        submitted = self._client.submit_order(request)

        logger.info(
            "broker.order_submitted",
            order_id=str(submitted.id),
            symbol=order.symbol,
            qty=str(qty),
            side=order.side.value,
        )

        return str(submitted.id)

    def get_bars(self, symbols: list[str], interval: str, limit: int) -> list[Kline]:
        """Last ``limit`` closed bars per symbol, oldest first."""
        seconds = interval_seconds(interval)
        now = datetime.now(timezone.utc)
        pairs = [self.to_pair(s) for s in symbols]

        bar_set = self._data_client.get_crypto_bars(
            CryptoBarsRequest(
                symbol_or_symbols=pairs,
                timeframe=to_timeframe(interval),
                start=now - timedelta(seconds=seconds * (limit + 1)),
            )
        )

        klines: list[Kline] = []
        for pair in pairs:
            closed = [
                bar for bar in bar_set.data.get(pair, [])
                if bar.timestamp + timedelta(seconds=seconds) <= now
            ]
            for bar in closed[-limit:]:
                klines.append(
                    Kline(
                        symbol=self.from_pair(pair),
                        interval=interval,
                        start_time=bar.timestamp,
                        open=Decimal(str(bar.open)),
                        high=Decimal(str(bar.high)),
                        low=Decimal(str(bar.low)),
                        close=Decimal(str(bar.close)),
                        volume=Decimal(str(bar.volume)),
                    )
                )
        return klines
