"""Fixed target allocation from configuration."""

from decimal import Decimal

from pvdot.models import IntervalWindow, WeightMap
from pvdot.weights.base import WeightSet


class StaticWeightSet(WeightSet):
    """Returns the same configured weights on every tick."""

    def __init__(self, interval_window: IntervalWindow, targets: dict[str, Decimal]):
        super().__init__(interval_window)
        self._targets = dict(targets)

    def target_weights(self) -> WeightMap:
        return dict(self._targets)
