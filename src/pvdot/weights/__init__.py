"""Target weight sources."""

from pvdot.weights.base import WeightError, WeightSet
from pvdot.weights.static import StaticWeightSet

__all__ = [
    "WeightError",
    "WeightSet",
    "StaticWeightSet",
]
