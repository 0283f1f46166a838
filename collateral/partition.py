"""
partition.py - Portfolio partitioning by instrument group

The cash ladder builder finds group boundaries with one linear scan, so the
trades of each group must be contiguous. Partitioning always re-sorts rather
than trusting the caller's order.
"""

from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple

from .core import EmptyPortfolio, Trade


def sort_key(trade: Trade) -> Tuple[int, int, int, int]:
    return (trade.instrument_group_id, trade.swap_type, trade.start_block, trade.duration)


def partition_portfolio(portfolio: Iterable[Trade]) -> Tuple[List[Trade], List[int]]:
    """
    Sort a portfolio so each instrument group is contiguous.

    Args:
        portfolio: Trades in any order

    Returns:
        (sorted_trades, group_ids) where group_ids lists each distinct group
        once, in the order its trades appear in sorted_trades

    Raises:
        EmptyPortfolio: portfolio has no trades
    """
    trades = sorted(portfolio, key=sort_key)
    if not trades:
        raise EmptyPortfolio("cannot compute requirements for an empty portfolio")

    group_ids: List[int] = []
    for t in trades:
        if not group_ids or group_ids[-1] != t.instrument_group_id:
            group_ids.append(t.instrument_group_id)

    return trades, group_ids


def is_contiguous(trades: Sequence[Trade]) -> bool:
    """True if no instrument group reappears after another group's trades."""
    seen = set()
    previous = None
    for t in trades:
        gid = t.instrument_group_id
        if gid != previous:
            if gid in seen:
                return False
            seen.add(gid)
            previous = gid
    return True
