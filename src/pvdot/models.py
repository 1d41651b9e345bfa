"""Domain models for the pvdot rebalancing system."""

from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

Interval = Literal["1m", "5m", "15m", "30m", "1h", "2h", "4h", "6h", "12h", "1d"]

_INTERVAL_UNITS = {"m": 60, "h": 3600, "d": 86400}

# currency -> value maps used throughout a rebalancing tick
WeightMap = dict[str, Decimal]
PriceMap = dict[str, Decimal]
QuantityMap = dict[str, Decimal]


def interval_seconds(interval: str) -> int:
    """Convert an interval such as '15m' or '4h' to seconds."""
    return int(interval[:-1]) * _INTERVAL_UNITS[interval[-1]]


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "market"


class Order(BaseModel):
    """A market order produced by the rebalancing engine."""

    symbol: str
    side: OrderSide
    type: OrderType = OrderType.MARKET
    quantity: Decimal = Field(gt=0)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.type.value.upper()} {self.side.value.upper()} {self.quantity} {self.symbol}"


class Balance(BaseModel):
    """Account balance of a single currency."""

    currency: str
    available: Decimal = Field(default=Decimal(0), ge=0)
    locked: Decimal = Field(default=Decimal(0), ge=0)

    model_config = {"frozen": True}

    @property
    def total(self) -> Decimal:
        return self.available + self.locked


class IntervalWindow(BaseModel):
    interval: Interval = "1h"
    window: int = Field(default=20, ge=1)


class Kline(BaseModel):
    """A closed candle for one trading pair."""

    symbol: str
    interval: Interval
    start_time: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal = Field(ge=0)

    model_config = {"frozen": True}

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(seconds=interval_seconds(self.interval))
