"""Rebalancing decision core - turn weight deviations into market orders."""

from dataclasses import dataclass
from decimal import Decimal

import structlog

from pvdot.logging_config import get_decision_logger
from pvdot.models import Order, OrderSide, OrderType, PriceMap, QuantityMap, WeightMap
from pvdot.rebalancing.vector import elementwise_product, normalize, total


def adjust_quantity_by_max_amount(quantity: Decimal, price: Decimal, max_amount: Decimal) -> Decimal:
    """Shrink quantity so that quantity * price does not exceed max_amount."""
    if quantity * price > max_amount:
        return max_amount / price
    return quantity


@dataclass
class RebalancePlan:
    """Orders for one tick and the portfolio value they were sized against."""

    orders: list[Order]
    total_value: Decimal


class RebalanceEngine:
    """Decides which orders move the portfolio back toward its target weights.

    Stateless: every call to ``generate_orders`` works on fresh maps built
    from its arguments.
    """

    def __init__(
        self,
        base_currency: str,
        threshold: Decimal,
        max_amount: Decimal = Decimal(0),
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._base_currency = base_currency
        self._threshold = threshold
        self._max_amount = max_amount
        self._log = logger or get_decision_logger()

    def market_values(self, target_weights: WeightMap, prices: PriceMap, quantities: QuantityMap) -> dict[str, Decimal]:
        """Value of each held currency in the base currency, keyed like target_weights."""
        values = elementwise_product(prices, quantities)
        return {c: values.get(c, Decimal(0)) for c in target_weights}

    def generate_orders(
        self,
        target_weights: WeightMap,
        prices: PriceMap,
        quantities: QuantityMap,
    ) -> list[Order]:
        """Generate market orders for currencies that drifted past the threshold."""
        return self.plan(target_weights, prices, quantities).orders

    def plan(
        self,
        target_weights: WeightMap,
        prices: PriceMap,
        quantities: QuantityMap,
    ) -> RebalancePlan:
        """Compute the portfolio value and the orders that rebalance it.

        Args:
            target_weights: Target weight per currency, including the base currency
            prices: Price per currency in the base currency, covering every target key
            quantities: Held quantity per currency

        Returns:
            RebalancePlan with orders sorted by currency; the base currency is never traded
        """
        market_values = self.market_values(target_weights, prices, quantities)
        total_value = total(market_values)

        self._log.info("engine.total_value", total_value=str(total_value))

        if total_value == 0:
            self._log.warning("engine.empty_portfolio", currencies=sorted(market_values))
            return RebalancePlan(orders=[], total_value=total_value)

        current_weights = normalize(market_values)
        orders: list[Order] = []

        for currency in sorted(target_weights):
            if currency == self._base_currency:
                continue

            order = self._decide(
                currency,
                target_weights[currency],
                current_weights[currency],
                prices[currency],
                total_value,
            )
            if order is not None:
                orders.append(order)

        return RebalancePlan(orders=orders, total_value=total_value)

    def _decide(
        self,
        currency: str,
        target_weight: Decimal,
        current_weight: Decimal,
        price: Decimal,
        total_value: Decimal,
    ) -> Order | None:
        symbol = currency + self._base_currency
        self._log.info(
            "engine.weights",
            symbol=symbol,
            price=str(price),
            current_weight=str(current_weight),
            target_weight=str(target_weight),
        )

        deviation = target_weight - current_weight
        if abs(deviation) < self._threshold:
            self._log.info(
                "engine.order_skipped_below_threshold",
                symbol=symbol,
                deviation=str(deviation),
                threshold=str(self._threshold),
            )
            return None

        quantity = deviation * total_value / price
        side = OrderSide.BUY
        if quantity < 0:
            side = OrderSide.SELL
            quantity = abs(quantity)

        if self._max_amount > 0:
            quantity = adjust_quantity_by_max_amount(quantity, price, self._max_amount)
            self._log.info(
                "engine.quantity_capped",
                symbol=symbol,
                side=side.value,
                quantity=str(quantity),
                price=str(price),
                max_amount=str(self._max_amount),
            )

        # zero threshold with zero deviation
        if quantity == 0:
            return None

        return Order(symbol=symbol, side=side, type=OrderType.MARKET, quantity=quantity)
