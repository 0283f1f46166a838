"""
risk_framework.py - Collateral requirement entry point

Wires the pipeline together:

    portfolio -> partition_portfolio -> directory.resolve_instrument_groups
              -> build_cash_ladders -> aggregate_requirements

compute_requirements() is a pure function of its inputs. RiskFramework wraps
it around a directory and adds optional diagnostic output and account lookup.
Any failure aborts the whole computation.
"""

from __future__ import annotations
from decimal import Decimal, localcontext
from typing import Iterable, List, Mapping, Sequence

from .cash_ladder import build_cash_ladders, filter_active_trades
from .core import (
    InstrumentGroupDirectory, PortfolioStore, Requirement, Trade,
    UnknownInstrumentGroup,
)
from .free_collateral import ExchangeRate, FreeCollateral, free_collateral
from .partition import partition_portfolio
from .requirements import aggregate_requirements


def compute_requirements(
    portfolio: Iterable[Trade],
    block_now: int,
    haircut: int,
    directory: InstrumentGroupDirectory,
) -> List[Requirement]:
    """
    Compute one collateral requirement record per instrument group.

    Args:
        portfolio: Unmatured trades, in any order
        block_now: Current block number
        haircut: Multiplier on cash ladder shortfalls, DECIMALS == 100%
        directory: Resolves the portfolio's instrument groups

    Returns:
        Requirement records ordered by instrument group id

    Raises:
        EmptyPortfolio, MaturedOrUnderflow, DivisionByZero, NarrowingOverflow,
        HaircutOverflow, AccumulatorOverflow, UnknownInstrumentGroup
    """
    trades, group_ids = partition_portfolio(portfolio)
    groups = directory.resolve_instrument_groups(group_ids)
    if len(groups) != len(group_ids):
        raise UnknownInstrumentGroup(
            f"directory resolved {len(groups)} groups for ids {group_ids}"
        )

    ladders, npv = build_cash_ladders(trades, groups, block_now)
    return aggregate_requirements(ladders, npv, haircut)


def _fmt(amount: int, decimals: int) -> str:
    """Scale an integer amount down by 10**decimals without scientific notation."""
    with localcontext() as ctx:
        ctx.prec = 80
        value = (Decimal(amount) / (Decimal(10) ** decimals)).normalize()
    if value == value.to_integral_value():
        return str(int(value))
    return format(value, 'f')


def format_requirements(requirements: Sequence[Requirement], decimals: int = 18) -> str:
    """
    Render requirement records as a text table.

    Amounts are shown scaled down by 10**decimals.
    """
    header = f"{'group':>5} {'ccy':>4} {'npv':>20} {'requirement':>20}  ladder"
    lines = [header, "-" * len(header)]
    for r in requirements:
        ladder = ", ".join(_fmt(b, decimals) for b in r.cash_ladder)
        lines.append(
            f"{r.instrument_group_id:>5} {r.currency:>4} {_fmt(r.npv, decimals):>20} "
            f"{_fmt(r.requirement, decimals):>20}  [{ladder}]"
        )
    return "\n".join(lines)


class RiskFramework:
    """
    Requirement calculator bound to an instrument group directory.

    The haircut is an argument of every call, not state of the framework.

    Example:
        risk = RiskFramework(directory)
        requirements = risk.compute_requirements(trades, block_now=1_000, haircut=DECIMALS)
    """

    def __init__(self, directory: InstrumentGroupDirectory, verbose: bool = False):
        """
        Args:
            directory: Resolves instrument group ids
            verbose: Print a summary of each computation (default: False)
        """
        self.directory = directory
        self.verbose = verbose

    def compute_requirements(
        self,
        portfolio: Iterable[Trade],
        block_now: int,
        haircut: int,
    ) -> List[Requirement]:
        trades = list(portfolio)
        try:
            requirements = compute_requirements(trades, block_now, haircut, self.directory)
        except Exception as e:
            if self.verbose:
                print(f"✗ FAILED: {len(trades)} trades at block {block_now}: "
                      f"{type(e).__name__}: {e}")
            raise

        if self.verbose:
            total = sum(r.requirement for r in requirements)
            print(f"✓ {len(trades)} trades, {len(requirements)} groups at block {block_now}: "
                  f"total requirement {_fmt(total, 18)} (haircut {_fmt(haircut, 18)})")
        return requirements

    def requirements_for_account(
        self,
        store: PortfolioStore,
        account: str,
        block_now: int,
        haircut: int,
    ) -> List[Requirement]:
        """
        Requirements for an account's unmatured trades.

        Matured trades are awaiting settlement and are left out. An account
        with no unmatured trades has no requirements.
        """
        trades = filter_active_trades(store.get_trades(account), block_now)
        if not trades:
            if self.verbose:
                print(f"  {account}: no active trades at block {block_now}")
            return []
        return self.compute_requirements(trades, block_now, haircut)

    def free_collateral_for_account(
        self,
        store: PortfolioStore,
        account: str,
        block_now: int,
        haircut: int,
        cash_balances: Mapping[int, int],
        exchange_rates: Mapping[int, ExchangeRate],
        base_currency: int = 0,
    ) -> FreeCollateral:
        requirements = self.requirements_for_account(store, account, block_now, haircut)
        fc = free_collateral(requirements, cash_balances, exchange_rates, base_currency)
        if self.verbose:
            status = "collateralized" if fc.is_collateralized else "UNDERCOLLATERALIZED"
            print(f"  {account}: free collateral {_fmt(fc.aggregate, 18)} ({status})")
        return fc

    def __repr__(self):
        return f"RiskFramework(directory={self.directory!r})"
