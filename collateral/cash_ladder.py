"""
cash_ladder.py - Per instrument group cash ladders

A cash ladder bins the expected cash flows of an instrument group's trades
into periods of `period_size` blocks, starting at the current block:

    bucket j covers [block_now + j * period_size, block_now + (j + 1) * period_size)

Trades contribute by swap type:
    CASH_PAYER       bucket -= notional   (obligation)
    CASH_RECEIVER    bucket += notional   (entitlement)
    LIQUIDITY_TOKEN  bucket += future cash claim, npv += collateral claim
    anything else    no effect

Building expects the portfolio sorted so that each group's trades are
contiguous (see partition.partition_portfolio) and all trades unmatured.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .core import (
    InstrumentGroup, MaturedOrUnderflow, PortfolioNotContiguous, SwapType, Trade,
)
from .liquidity import liquidity_claim
from .safe_math import add_int256, sub_int256, to_int128


@dataclass
class CashLadder:
    """
    Net cash flow per maturity period for one instrument group.

    Attributes:
        id: Instrument group id
        currency: Currency of the group
        buckets: Signed net cash flow per period, length num_periods
    """
    id: int
    currency: int
    buckets: List[int] = field(default_factory=list)

    @classmethod
    def empty(cls, group: InstrumentGroup) -> CashLadder:
        return cls(id=group.id, currency=group.currency, buckets=[0] * group.num_periods)

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self.buckets)


def active_maturities(block_now: int, period_size: int, num_periods: int) -> List[int]:
    """
    Maturity blocks of the markets currently open for trading.

    Maturities fall on period boundaries; the first one is the next boundary
    strictly after block_now. Only maturities that map into a ladder of
    num_periods buckets are listed, so on a boundary block the last period
    is not yet open.

    Example:
        >>> active_maturities(130, 100, 3)
        [200, 300, 400]
        >>> active_maturities(100, 100, 3)
        [200, 300]
    """
    if period_size <= 0:
        raise ValueError(f"period_size must be positive, got {period_size}")
    base = block_now - block_now % period_size
    last = block_now + period_size * num_periods - 1
    maturities = [base + period_size * (i + 1) for i in range(num_periods)]
    return [m for m in maturities if m <= last]


def filter_active_trades(portfolio: Iterable[Trade], block_now: int) -> List[Trade]:
    """Drop trades that have matured at block_now."""
    return [t for t in portfolio if t.maturity > block_now]


def bucket_offset(trade: Trade, group: InstrumentGroup, block_now: int) -> int:
    """
    Index of the ladder bucket a trade's maturity falls into.

    Raises:
        MaturedOrUnderflow: the trade has matured or matures past the ladder
    """
    maturity = trade.maturity
    if maturity <= block_now:
        raise MaturedOrUnderflow(
            f"{trade!r} matured at block {maturity} (current block {block_now})"
        )
    offset = (maturity - block_now) // group.period_size
    if offset >= group.num_periods:
        raise MaturedOrUnderflow(
            f"{trade!r} maturity {maturity} is beyond the {group.num_periods}-period ladder "
            f"of group {group.id}"
        )
    return offset


def build_cash_ladders(
    portfolio: Sequence[Trade],
    groups: Sequence[InstrumentGroup],
    block_now: int,
) -> Tuple[List[CashLadder], List[int]]:
    """
    Fold a sorted portfolio into one cash ladder and one npv per group.

    Args:
        portfolio: Trades with each group's trades contiguous
        groups: Resolved instrument groups, in the order their trades appear
        block_now: Current block number

    Returns:
        (ladders, npv), one element per group

    Raises:
        PortfolioNotContiguous: trades do not follow the order of groups
        MaturedOrUnderflow: a trade has matured or is out of ladder range
        DivisionByZero: a liquidity token's market has zero liquidity
        NarrowingOverflow: a notional or claim does not fit its amount type
        AccumulatorOverflow: a bucket or npv overflows int256
    """
    ladders = [CashLadder.empty(g) for g in groups]
    npv = [0] * len(groups)

    g = -1
    for trade in portfolio:
        if g < 0 or trade.instrument_group_id != ladders[g].id:
            g += 1
            if g >= len(ladders) or ladders[g].id != trade.instrument_group_id:
                raise PortfolioNotContiguous(
                    f"{trade!r} is out of order for groups {[grp.id for grp in groups]}"
                )

        group = groups[g]
        offset = bucket_offset(trade, group, block_now)
        buckets = ladders[g].buckets

        if trade.swap_type == SwapType.LIQUIDITY_TOKEN:
            totals = group.discount_rate_oracle.get_market_totals(trade.maturity)
            collateral_claim, future_cash_claim = liquidity_claim(trade, totals)
            npv[g] = add_int256(npv[g], collateral_claim)
            buckets[offset] = add_int256(buckets[offset], future_cash_claim)
        elif trade.swap_type == SwapType.CASH_PAYER:
            buckets[offset] = sub_int256(buckets[offset], to_int128(trade.notional))
        elif trade.swap_type == SwapType.CASH_RECEIVER:
            buckets[offset] = add_int256(buckets[offset], to_int128(trade.notional))

    return ladders, npv
