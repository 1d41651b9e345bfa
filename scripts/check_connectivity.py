"""Verify connectivity to the Alpaca trading and crypto data APIs."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from pvdot.config import AppConfig, Secrets, load_config
from pvdot.trading.broker import AlpacaExchangeProvider


def check_account(exchange: AlpacaExchangeProvider, config: AppConfig) -> bool:
    """Verify trading credentials by listing balances."""
    print("Checking Alpaca trading API...")
    try:
        balances = exchange.get_balances()
        for currency, balance in sorted(balances.items()):
            print(f"  {currency}: available {balance.available}, locked {balance.locked}")
        print(f"  Paper trading: {'Yes' if config.trading.paper else 'No'}")
        print("  Trading API: OK")
        return True
    except Exception as e:
        print(f"  Trading API: FAILED - {e}")
        return False


def check_prices(exchange: AlpacaExchangeProvider, config: AppConfig) -> bool:
    """Verify crypto market data access for every configured pair."""
    print("\nChecking Alpaca crypto data API...")
    ok = True
    for symbol in config.strategy.symbols:
        try:
            price = exchange.query_last_price(symbol)
            print(f"  {symbol}: {price}")
        except Exception as e:
            print(f"  {symbol}: FAILED - {e}")
            ok = False
    if ok:
        print("  Crypto data API: OK")
    return ok


def main():
    print("=" * 50)
    print("pvdot - API Connectivity Check")
    print("=" * 50)

    config = load_config()
    try:
        secrets = Secrets()
    except Exception as e:
        print(f"\nFailed to load .env file: {e}")
        print("Make sure .env exists with ALPACA_API_KEY, ALPACA_SECRET_KEY")
        sys.exit(1)

    exchange = AlpacaExchangeProvider(config, secrets)
    results = [
        check_account(exchange, config),
        check_prices(exchange, config),
    ]

    print("\n" + "=" * 50)
    if all(results):
        print("All checks passed. Ready to rebalance.")
    else:
        print("Some checks failed. Fix the issues above.")
        sys.exit(1)


if __name__ == "__main__":
    main()
