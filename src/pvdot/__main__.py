"""Entry point: python -m pvdot"""

import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from pvdot.config import Secrets, load_config
from pvdot.engine import PVDotEngine
from pvdot.logging_config import configure_logging


def main():
    try:
        config = load_config(Path("config/settings.yaml"))
    except (OSError, ValidationError) as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    try:
        secrets = Secrets()
    except Exception as e:
        print(f"Failed to load secrets from .env: {e}")
        print("Ensure .env exists with ALPACA_API_KEY, ALPACA_SECRET_KEY")
        sys.exit(1)

    configure_logging(config.logging, verbose=config.strategy.verbose)

    engine = PVDotEngine(config, secrets)
    asyncio.run(engine.start())


if __name__ == "__main__":
    main()
