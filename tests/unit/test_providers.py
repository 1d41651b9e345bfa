"""Tests for provider factory."""

from unittest.mock import patch

import pytest

from pvdot.notify import LogNotifier, Notifier, SlackNotifier
from pvdot.providers import create_exchange_provider, create_notifier, create_weight_set
from pvdot.trading.base import ExchangeProvider
from pvdot.trading.broker import AlpacaExchangeProvider
from pvdot.weights.base import WeightSet
from pvdot.weights.static import StaticWeightSet


class TestProviderFactory:
    def test_create_exchange_provider_alpaca(self, test_config, mock_secrets):
        with patch("pvdot.trading.broker.TradingClient"), \
                patch("pvdot.trading.broker.CryptoHistoricalDataClient"):
            provider = create_exchange_provider(test_config, mock_secrets)
        assert isinstance(provider, ExchangeProvider)
        assert isinstance(provider, AlpacaExchangeProvider)

    def test_live_exchange_requires_live_trading(self, test_config, mock_secrets):
        test_config.providers.exchange = "alpaca-live"
        with pytest.raises(ValueError, match="paper"):
            create_exchange_provider(test_config, mock_secrets)

    def test_unknown_exchange_provider_raises(self, test_config, mock_secrets):
        test_config.providers.exchange = "unknown"
        with pytest.raises(ValueError, match="Unknown exchange provider"):
            create_exchange_provider(test_config, mock_secrets)

    def test_create_static_weight_set(self, test_config):
        ws = create_weight_set(test_config)
        assert isinstance(ws, WeightSet)
        assert isinstance(ws, StaticWeightSet)
        assert ws.interval_window.window == 5
        assert ws.target_weights() == test_config.weights.targets

    def test_unknown_weight_source_raises(self, test_config):
        test_config.weights.source = "unknown"
        with pytest.raises(ValueError, match="Unknown weight source"):
            create_weight_set(test_config)

    def test_create_log_notifier(self, test_config, mock_secrets):
        notifier = create_notifier(test_config, mock_secrets)
        assert isinstance(notifier, Notifier)
        assert isinstance(notifier, LogNotifier)

    def test_slack_notifier_requires_webhook(self, test_config, mock_secrets):
        test_config.providers.notifier = "slack"
        with pytest.raises(ValueError, match="SLACK_WEBHOOK_URL"):
            create_notifier(test_config, mock_secrets)

    def test_create_slack_notifier(self, test_config, mock_secrets):
        test_config.providers.notifier = "slack"
        mock_secrets.slack_webhook_url = "https://hooks.slack.test/abc"
        assert isinstance(create_notifier(test_config, mock_secrets), SlackNotifier)
