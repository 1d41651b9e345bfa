"""Rebalancing tick - weights, prices and balances in, orders out."""

import sys
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import ValidationError

from pvdot.config import AppConfig
from pvdot.logging_config import get_trade_logger
from pvdot.models import Order, WeightMap
from pvdot.notify import Notifier
from pvdot.rebalancing.engine import RebalanceEngine
from pvdot.rebalancing.prices import PriceResolutionError, PriceResolver
from pvdot.rebalancing.quantities import resolve_quantities
from pvdot.rebalancing.vector import ONE, normalize, total
from pvdot.trading.base import ExchangeProvider
from pvdot.trading.broker import OrderError
from pvdot.weights.base import WeightError, WeightSet

logger = structlog.get_logger(__name__)

STATUS_SUBMITTED = "submitted"
STATUS_DRY_RUN = "dry_run"
STATUS_NO_ORDERS = "no_orders"
STATUS_WEIGHT_ERROR = "weight_error"
STATUS_PRICE_ERROR = "price_error"
STATUS_BALANCE_ERROR = "balance_error"
STATUS_SUBMIT_ERROR = "submit_error"
STATUS_TICK_ERROR = "tick_error"

SUCCESS_STATUSES = (STATUS_SUBMITTED, STATUS_DRY_RUN, STATUS_NO_ORDERS)


@dataclass
class RebalanceResult:
    """Outcome of a single rebalancing tick."""

    status: str
    orders: list[Order] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)
    error: Optional[str] = None
    total_value: Optional[Decimal] = None

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS_STATUSES


class Rebalancer:
    """Runs one rebalancing tick at a time.

    Callers must not invoke ``rebalance`` concurrently; the main loop awaits
    each tick before polling for the next bar.
    """

    def __init__(
        self,
        config: AppConfig,
        weight_set: WeightSet,
        exchange: ExchangeProvider,
        notifier: Notifier,
        engine: RebalanceEngine | None = None,
    ):
        self._strategy = config.strategy
        self._weight_set = weight_set
        self._exchange = exchange
        self._notifier = notifier
        self._prices = PriceResolver(exchange, notifier)
        self._engine = engine or RebalanceEngine(
            base_currency=self._strategy.base_currency,
            threshold=self._strategy.threshold,
            max_amount=self._strategy.max_amount,
        )
        self._trade_log = get_trade_logger()

    def target_weights(self) -> WeightMap:
        """Target weights from the weight set, normalized to sum to 1."""
        weights = self._weight_set.target_weights()
        weight_sum = total(weights)
        if weight_sum <= 0:
            raise WeightError(f"target weights must sum to a positive value, got {weight_sum}")
        if weight_sum != ONE:
            logger.warning(
                "rebalancer.target_weights_renormalized",
                weight_sum=str(weight_sum),
            )
        return normalize(weights)

    def rebalance(self) -> RebalanceResult:
        """Run one tick. Per-tick failures are reported in the result, never raised."""
        try:
            target_weights = self.target_weights()
        except WeightError as e:
            logger.error("rebalancer.weight_error", error=str(e))
            self._notifier.notify(f"target weight error: {e}")
            return RebalanceResult(status=STATUS_WEIGHT_ERROR, error=str(e))

        try:
            prices = self._prices.resolve(target_weights, self._strategy.base_currency)
        except PriceResolutionError as e:
            logger.error(
                "rebalancer.price_error",
                symbol=e.symbol,
                resolved=sorted(e.partial),
                error=str(e),
            )
            return RebalanceResult(status=STATUS_PRICE_ERROR, error=str(e))

        try:
            balances = self._exchange.get_balances()
        except Exception as e:
            logger.error("rebalancer.balance_error", error=str(e))
            self._notifier.notify(f"query balances error: {e}")
            return RebalanceResult(status=STATUS_BALANCE_ERROR, error=str(e))

        quantities = resolve_quantities(balances, target_weights, self._strategy.ignore_locked)
        plan = self._engine.plan(target_weights, prices, quantities)
        orders, total_value = plan.orders, plan.total_value
        for order in orders:
            self._trade_log.info(
                "rebalancer.order_generated",
                symbol=order.symbol,
                side=order.side.value,
                type=order.type.value,
                quantity=str(order.quantity),
                dry_run=self._strategy.dry_run,
            )

        if not orders:
            logger.info("rebalancer.no_orders", total_value=str(total_value))
            return RebalanceResult(status=STATUS_NO_ORDERS, total_value=total_value)

        if self._strategy.dry_run:
            logger.info("rebalancer.dry_run", orders=len(orders))
            return RebalanceResult(status=STATUS_DRY_RUN, orders=orders, total_value=total_value)

        try:
            order_ids = self._exchange.submit_orders(orders)
        except OrderError as e:
            logger.error("rebalancer.submit_order_error", orders=len(orders), error=str(e))
            self._notifier.notify(f"submit order error: {e}")
            return RebalanceResult(
                status=STATUS_SUBMIT_ERROR,
                orders=orders,
                order_ids=e.order_ids,
                error=str(e),
                total_value=total_value,
            )

        logger.info("rebalancer.orders_submitted", orders=len(orders), order_ids=order_ids)
        return RebalanceResult(
            status=STATUS_SUBMITTED,
            orders=orders,
            order_ids=order_ids,
            total_value=total_value,
        )


def main() -> int:
    """Run a single rebalancing tick and exit."""
    from pvdot.config import Secrets, load_config
    from pvdot.logging_config import configure_logging
    from pvdot.providers import create_exchange_provider, create_notifier, create_weight_set

    try:
        config = load_config()
    except (OSError, ValidationError) as e:
        print(f"Invalid configuration: {e}")
        return 1

    try:
        secrets = Secrets()
    except Exception as e:
        print(f"Failed to load secrets from .env: {e}")
        print("Ensure .env exists with ALPACA_API_KEY, ALPACA_SECRET_KEY")
        return 1

    configure_logging(config.logging, verbose=config.strategy.verbose)

    rebalancer = Rebalancer(
        config,
        weight_set=create_weight_set(config),
        exchange=create_exchange_provider(config, secrets),
        notifier=create_notifier(config, secrets),
    )
    result = rebalancer.rebalance()
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
