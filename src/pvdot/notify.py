"""Operator notifications for per-tick failures."""

from abc import ABC, abstractmethod

import requests
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = structlog.get_logger(__name__)


class Notifier(ABC):
    """Interface for delivering operator-facing messages."""

    @abstractmethod
    def notify(self, message: str, **fields) -> None:
        """Deliver a message. Must not raise on delivery failure."""
        ...


class LogNotifier(Notifier):
    """Writes notifications to the application log."""

    def notify(self, message: str, **fields) -> None:
        logger.warning("notify.message", message=message, **fields)


class SlackNotifier(Notifier):
    """Posts notifications to a Slack incoming webhook."""

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._session = requests.Session()

    def notify(self, message: str, **fields) -> None:
        text = message
        if fields:
            details = ", ".join(f"{k}={v}" for k, v in sorted(fields.items()))
            text = f"{message} ({details})"
        try:
            self._post({"text": text})
        except requests.RequestException as e:
            logger.error("notify.delivery_failed", message=message, error=str(e))

    @retry(
        retry=retry_if_exception_type(requests.exceptions.Timeout),
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        reraise=True,
    )
    def _post(self, payload: dict) -> None:
        response = self._session.post(self._webhook_url, json=payload, timeout=self._timeout)
        response.raise_for_status()
