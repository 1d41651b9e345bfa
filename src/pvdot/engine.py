"""Main event loop: poll closed bars, feed the weight set, rebalance."""

import asyncio
import signal as signal_mod
from datetime import datetime, timezone

import structlog

from pvdot.config import AppConfig, Secrets
from pvdot.notify import Notifier
from pvdot.providers import create_exchange_provider, create_notifier, create_weight_set
from pvdot.rebalancing.rebalancer import STATUS_TICK_ERROR, RebalanceResult, Rebalancer
from pvdot.trading.base import ExchangeProvider
from pvdot.weights.base import WeightSet

logger = structlog.get_logger(__name__)


class PVDotEngine:
    """Runs one rebalancing tick per newly closed bar window."""

    def __init__(
        self,
        config: AppConfig,
        secrets: Secrets,
        *,
        exchange: ExchangeProvider | None = None,
        notifier: Notifier | None = None,
        weight_set: WeightSet | None = None,
    ):
        self._config = config
        self._strategy = config.strategy
        self._exchange = exchange or create_exchange_provider(config, secrets)
        self._notifier = notifier or create_notifier(config, secrets)
        self._weight_set = weight_set or create_weight_set(config)
        self._rebalancer = Rebalancer(config, self._weight_set, self._exchange, self._notifier)
        self._running = False
        self._tick_count = 0

    async def start(self) -> None:
        """Start the engine. Runs until shutdown signal received."""
        logger.info(
            "pvdot.starting",
            interval=self._strategy.interval,
            window=self._strategy.window,
            base_currency=self._strategy.base_currency,
            quote_currencies=self._strategy.quote_currencies,
            threshold=str(self._strategy.threshold),
            max_amount=str(self._strategy.max_amount),
            dry_run=self._strategy.dry_run,
            paper=self._config.trading.paper,
            exchange=self._config.providers.exchange,
        )

        self._running = True
        self._register_signal_handlers()
        self.warm_up()

        try:
            while self._running:
                self.poll()
                # Sleep until next poll, but check for shutdown every second
                for _ in range(self._config.trading.poll_interval_seconds):
                    if not self._running:
                        break
                    await asyncio.sleep(1)
        except asyncio.CancelledError:
            logger.info("pvdot.cancelled")
        finally:
            logger.info("pvdot.stopped", ticks=self._tick_count)

    def warm_up(self) -> int:
        """Feed the weight set with the last ``window`` closed bars per symbol."""
        try:
            fed = self._feed_bars(self._strategy.window)
        except Exception as e:
            logger.error("pvdot.warm_up_failed", error=str(e))
            return 0
        logger.info("pvdot.warmed_up", bars=fed)
        return fed

    def poll(self) -> RebalanceResult | None:
        """Check for newly closed bars and rebalance once if any arrived."""
        try:
            fed = self._feed_bars(2)
        except Exception as e:
            logger.error("pvdot.bar_poll_failed", error=str(e))
            return None

        if fed == 0:
            logger.debug("pvdot.no_new_bars")
            return None

        return self.tick()

    def tick(self) -> RebalanceResult:
        """Single rebalancing tick."""
        self._tick_count += 1
        tick_start = datetime.now(timezone.utc)

        try:
            result = self._rebalancer.rebalance()
        except Exception as e:
            logger.error("pvdot.tick_failed", tick=self._tick_count, error=str(e), exc_info=True)
            self._notifier.notify(f"rebalance tick failed: {e}")
            result = RebalanceResult(status=STATUS_TICK_ERROR, error=str(e))

        logger.info(
            "pvdot.tick_complete",
            tick=self._tick_count,
            status=result.status,
            orders=len(result.orders),
            duration_ms=int((datetime.now(timezone.utc) - tick_start).total_seconds() * 1000),
        )
        return result

    def _feed_bars(self, limit: int) -> int:
        """Feed bars newer than the last seen one per symbol. Returns how many were new."""
        bars = self._exchange.get_bars(self._strategy.symbols, self._strategy.interval, limit)
        fed = 0
        for bar in sorted(bars, key=lambda b: b.start_time):
            last = self._weight_set.last_bar_time(bar.symbol)
            if last is not None and bar.start_time <= last:
                continue
            self._weight_set.update(bar)
            fed += 1
        return fed

    def _register_signal_handlers(self) -> None:
        """Register SIGINT/SIGTERM handlers for graceful shutdown."""
        loop = asyncio.get_event_loop()
        for sig in (signal_mod.SIGINT, signal_mod.SIGTERM):
            loop.add_signal_handler(sig, self._request_shutdown)

    def _request_shutdown(self) -> None:
        """Signal the main loop to stop."""
        logger.info("pvdot.shutdown_requested")
        self._running = False
