"""Rebalancing module for weight-targeted crypto portfolios."""

from pvdot.rebalancing.engine import RebalanceEngine, adjust_quantity_by_max_amount
from pvdot.rebalancing.prices import PriceResolutionError, PriceResolver
from pvdot.rebalancing.quantities import resolve_quantities
from pvdot.rebalancing.rebalancer import RebalanceResult, Rebalancer
from pvdot.rebalancing.vector import elementwise_product, normalize, total

__all__ = [
    "RebalanceEngine",
    "adjust_quantity_by_max_amount",
    "PriceResolutionError",
    "PriceResolver",
    "resolve_quantities",
    "RebalanceResult",
    "Rebalancer",
    "elementwise_product",
    "normalize",
    "total",
]
