"""
sources.py - In-memory collaborators for the risk framework

Provides simple implementations of the protocols the computation consumes:
- StaticMarketOracle: market totals keyed by maturity
- StaticInstrumentGroupDirectory: instrument groups keyed by id
- InMemoryPortfolioStore: trades keyed by account

These are suitable for tests, simulations and batch jobs where the data has
already been loaded. Production callers may supply any object satisfying
the protocols in collateral.core.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .core import (
    DEFAULT_MAX_TRADES,
    InstrumentGroup, MarketTotals, PortfolioTooLarge, Trade, TradeKey,
    UnknownInstrumentGroup,
)
from .safe_math import to_uint128


class StaticMarketOracle:
    """
    Market oracle backed by a fixed map of maturity -> MarketTotals.

    Maturities that were never set report an empty market (all zeros), which
    the liquidity claim calculation rejects as zero liquidity.
    """

    def __init__(self, totals: Optional[Mapping[int, MarketTotals]] = None):
        self.totals: Dict[int, MarketTotals] = dict(totals or {})

    def get_market_totals(self, maturity: int) -> MarketTotals:
        return self.totals.get(maturity, MarketTotals(0, 0, 0))

    def update_totals(self, maturity: int, totals: MarketTotals) -> None:
        self.totals[maturity] = totals

    def __repr__(self):
        return f"StaticMarketOracle({len(self.totals)} maturities)"


class StaticInstrumentGroupDirectory:
    """Instrument group directory backed by an in-memory map."""

    def __init__(self, groups: Iterable[InstrumentGroup] = ()):
        self.groups: Dict[int, InstrumentGroup] = {}
        for g in groups:
            self.register_group(g)

    def register_group(self, group: InstrumentGroup) -> None:
        """Add or replace a group."""
        self.groups[group.id] = group

    def resolve_instrument_groups(self, group_ids: Sequence[int]) -> List[InstrumentGroup]:
        missing = [gid for gid in group_ids if gid not in self.groups]
        if missing:
            raise UnknownInstrumentGroup(f"unknown instrument group ids: {missing}")
        return [self.groups[gid] for gid in group_ids]

    def __repr__(self):
        return f"StaticInstrumentGroupDirectory(groups={sorted(self.groups)})"


class InMemoryPortfolioStore:
    """
    Per-account trade store.

    Adding a trade whose key matches an existing trade increases that trade's
    notional instead of creating a second position.
    """

    def __init__(self, max_trades: int = DEFAULT_MAX_TRADES):
        if max_trades <= 0:
            raise ValueError(f"max_trades must be positive, got {max_trades}")
        self.max_trades = max_trades
        self._trades: Dict[str, List[Trade]] = {}

    def get_trades(self, account: str) -> List[Trade]:
        return list(self._trades.get(account, []))

    def accounts(self) -> Set[str]:
        return {a for a, trades in self._trades.items() if trades}

    def add_trade(self, account: str, trade: Trade) -> Trade:
        """
        Add a trade to an account, aggregating with a matching position.

        Returns:
            The trade as now held by the account

        Raises:
            PortfolioTooLarge: the account already holds max_trades positions
            NarrowingOverflow: the aggregated notional exceeds uint128
        """
        trades = self._trades.setdefault(account, [])
        key = trade.key
        for i, existing in enumerate(trades):
            if existing.key == key:
                merged = replace(existing, notional=to_uint128(existing.notional + trade.notional))
                trades[i] = merged
                return merged

        if len(trades) >= self.max_trades:
            raise PortfolioTooLarge(
                f"account {account} already holds {len(trades)} trades (max {self.max_trades})"
            )
        trades.append(trade)
        return trade

    def remove_trade(self, account: str, key: TradeKey, notional: Optional[int] = None) -> None:
        """
        Reduce or remove a position.

        Args:
            account: Account holding the trade
            key: Identifying attributes of the trade
            notional: Amount to remove; None removes the whole position

        Raises:
            KeyError: the account holds no trade with this key
            ValueError: notional is not positive or exceeds the position
        """
        if notional is not None and notional <= 0:
            raise ValueError(f"notional to remove must be positive, got {notional}")
        trades = self._trades.get(account, [])
        for i, existing in enumerate(trades):
            if existing.key != key:
                continue
            if notional is None or notional == existing.notional:
                del trades[i]
            elif notional > existing.notional:
                raise ValueError(
                    f"cannot remove {notional} from position of {existing.notional}"
                )
            else:
                trades[i] = replace(existing, notional=existing.notional - notional)
            return
        raise KeyError(f"account {account} holds no trade {key}")

    def __repr__(self):
        total = sum(len(t) for t in self._trades.values())
        return f"InMemoryPortfolioStore({len(self.accounts())} accounts, {total} trades)"
