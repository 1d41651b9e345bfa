"""Abstract base class for target weight sources."""

from abc import ABC, abstractmethod
from collections import deque

from pvdot.models import IntervalWindow, Kline, WeightMap


class WeightError(Exception):
    """Raised when a weight source cannot produce usable target weights."""


class WeightSet(ABC):
    """Produces target weights, fed with closed bars of the traded pairs.

    Keeps the last ``window`` bars per symbol for implementations that
    derive weights from recent price/volume history.
    """

    def __init__(self, interval_window: IntervalWindow):
        self.interval_window = interval_window
        self._history: dict[str, deque[Kline]] = {}

    def update(self, kline: Kline) -> None:
        """Record a closed bar."""
        bars = self._history.setdefault(
            kline.symbol, deque(maxlen=self.interval_window.window)
        )
        if bars and kline.start_time <= bars[-1].start_time:
            return
        bars.append(kline)

    def history(self, symbol: str) -> list[Kline]:
        return list(self._history.get(symbol, ()))

    def last_bar_time(self, symbol: str):
        bars = self._history.get(symbol)
        return bars[-1].start_time if bars else None

    @abstractmethod
    def target_weights(self) -> WeightMap:
        """Target weight per currency, including the base currency."""
        ...
