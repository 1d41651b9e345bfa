"""Structured logging configuration with multiple output streams."""

import logging
import logging.handlers
from pathlib import Path

import structlog

from pvdot.config import LoggingConfig

TRADE_LOGGER = "pvdot.trades"
DECISION_LOGGER = "pvdot.decisions"


def _rotating_handler(path: str, config: LoggingConfig, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Set up structured logging with console + file outputs.

    ``verbose`` forces DEBUG level so per-currency decisions show up on the
    console as well as in the decision log.
    """
    for log_path in [config.app_log, config.trade_log, config.decision_log]:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )
    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=True),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    level = "DEBUG" if verbose else config.level.upper()
    root_logger.setLevel(getattr(logging, level))

    # Alpaca's HTTP stack logs request URLs at DEBUG
    for noisy_logger in ["urllib3", "requests"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(_rotating_handler(config.app_log, config, json_formatter))

    trade_logger = logging.getLogger(TRADE_LOGGER)
    trade_logger.addHandler(_rotating_handler(config.trade_log, config, json_formatter))
    trade_logger.propagate = True

    decision_logger = logging.getLogger(DECISION_LOGGER)
    decision_logger.addHandler(_rotating_handler(config.decision_log, config, json_formatter))
    decision_logger.propagate = True


def get_trade_logger() -> structlog.stdlib.BoundLogger:
    """Get the trade-specific logger."""
    return structlog.get_logger(TRADE_LOGGER)


def get_decision_logger() -> structlog.stdlib.BoundLogger:
    """Get the decision-specific logger."""
    return structlog.get_logger(DECISION_LOGGER)
