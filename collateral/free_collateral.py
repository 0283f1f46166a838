"""
free_collateral.py - Free collateral across currencies

Combines an account's cash balances with the npv and requirement of its
portfolio:

    net_available[c] = cash_balance[c] + npv[c] - requirement[c]

and converts each currency into the base currency to give a single
aggregate. A positive balance converts at the exchange rate. A negative
balance converts at the rate times the currency's haircut, so shortfalls in
volatile currencies weigh more than the same surplus would.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from .core import DECIMALS, MissingExchangeRate, Requirement
from .requirements import aggregate_by_currency


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """
    Conversion from a currency into the base currency.

    Attributes:
        rate: Base currency per unit of the currency, DECIMALS == 1.0
        haircut: Multiplier on negative balances, at least DECIMALS
    """
    rate: int
    haircut: int = DECIMALS

    def __post_init__(self):
        if self.rate <= 0:
            raise ValueError(f"rate must be positive, got {self.rate}")
        if self.haircut < DECIMALS:
            raise ValueError(f"haircut must be at least {DECIMALS}, got {self.haircut}")

    def convert(self, amount: int) -> int:
        """Convert an amount into the base currency, rounding toward zero."""
        if amount >= 0:
            return amount * self.rate // DECIMALS
        return -(-amount * self.rate * self.haircut // (DECIMALS * DECIMALS))


@dataclass(frozen=True, slots=True)
class FreeCollateral:
    """
    Free collateral of an account.

    Attributes:
        aggregate: Sum of all currencies in the base currency
        net_available: Net available amount per currency, in that currency
    """
    aggregate: int
    net_available: Dict[int, int] = field(default_factory=dict)

    @property
    def is_collateralized(self) -> bool:
        return self.aggregate >= 0


def free_collateral(
    requirements: Sequence[Requirement],
    cash_balances: Mapping[int, int],
    exchange_rates: Mapping[int, ExchangeRate],
    base_currency: int = 0,
) -> FreeCollateral:
    """
    Compute an account's free collateral.

    Args:
        requirements: Requirement records of the account's portfolio
        cash_balances: Cash balance per currency (may be negative)
        exchange_rates: Rate into the base currency per non-base currency
        base_currency: Currency the aggregate is expressed in

    Raises:
        MissingExchangeRate: a non-base currency with a balance has no rate
    """
    by_currency = aggregate_by_currency(requirements)

    net_available: Dict[int, int] = {}
    for currency in set(cash_balances) | set(by_currency):
        net = cash_balances.get(currency, 0)
        summary = by_currency.get(currency)
        if summary is not None:
            net += summary.npv - summary.requirement
        net_available[currency] = net

    aggregate = 0
    for currency, net in net_available.items():
        if currency == base_currency:
            aggregate += net
            continue
        if net == 0:
            continue
        rate: Optional[ExchangeRate] = exchange_rates.get(currency)
        if rate is None:
            raise MissingExchangeRate(
                f"no exchange rate from currency {currency} to base currency {base_currency}"
            )
        aggregate += rate.convert(net)

    return FreeCollateral(aggregate=aggregate, net_available=net_available)
