"""Provider factory: creates the right implementation based on config."""

from pvdot.config import AppConfig, Secrets
from pvdot.notify import LogNotifier, Notifier, SlackNotifier
from pvdot.trading.base import ExchangeProvider
from pvdot.weights.base import WeightSet

EXCHANGE_PROVIDERS = {
    "alpaca-paper": "pvdot.trading.broker:AlpacaExchangeProvider",
    "alpaca-live": "pvdot.trading.broker:AlpacaExchangeProvider",
}

WEIGHT_SETS = {
    "static": "pvdot.weights.static:StaticWeightSet",
}


def _import_class(path: str):
    """Import a class from a 'module:ClassName' string."""
    module_path, class_name = path.split(":")
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_exchange_provider(config: AppConfig, secrets: Secrets) -> ExchangeProvider:
    """Create an exchange provider based on config.providers.exchange."""
    name = config.providers.exchange
    if name not in EXCHANGE_PROVIDERS:
        raise ValueError(
            f"Unknown exchange provider: '{name}'. Available: {list(EXCHANGE_PROVIDERS.keys())}"
        )
    if name == "alpaca-live" and config.trading.paper:
        raise ValueError("exchange 'alpaca-live' requires trading.paper = false")
    cls = _import_class(EXCHANGE_PROVIDERS[name])
    return cls(config, secrets)


def create_weight_set(config: AppConfig) -> WeightSet:
    """Create the target weight source based on config.weights.source."""
    name = config.weights.source
    if name not in WEIGHT_SETS:
        raise ValueError(
            f"Unknown weight source: '{name}'. Available: {list(WEIGHT_SETS.keys())}"
        )
    cls = _import_class(WEIGHT_SETS[name])
    return cls(config.strategy.interval_window, config.weights.targets)


def create_notifier(config: AppConfig, secrets: Secrets) -> Notifier:
    """Create a notifier based on config.providers.notifier."""
    name = config.providers.notifier
    if name == "log":
        return LogNotifier()
    if name == "slack":
        if not secrets.slack_webhook_url:
            raise ValueError("notifier 'slack' requires SLACK_WEBHOOK_URL")
        return SlackNotifier(secrets.slack_webhook_url)
    raise ValueError(f"Unknown notifier: '{name}'. Available: ['log', 'slack']")
