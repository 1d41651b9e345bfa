"""Held-quantity resolution from account balances."""

from decimal import Decimal
from typing import Iterable, Mapping

from pvdot.models import Balance, QuantityMap


def resolve_quantities(
    balances: Mapping[str, Balance],
    currencies: Iterable[str],
    ignore_locked: bool,
) -> QuantityMap:
    """Quantity held per currency.

    With ``ignore_locked`` the total balance (available + locked) is used,
    otherwise only the available part. Missing currencies count as zero.
    """
    quantities: QuantityMap = {}
    for currency in currencies:
        balance = balances.get(currency)
        if balance is None:
            quantities[currency] = Decimal(0)
        elif ignore_locked:
            quantities[currency] = balance.total
        else:
            quantities[currency] = balance.available
    return quantities
