"""
liquidity.py - Liquidity token claims

A liquidity token is a pro-rata share of a market maturity's pooled
collateral and future cash:

    collateral_claim  = total_collateral  * notional / total_liquidity
    future_cash_claim = total_future_cash * notional / total_liquidity

The collateral claim is certain value and counts toward npv. The future cash
claim only becomes collateral after a trade against the market, so it is
placed in the cash ladder instead.
"""

from __future__ import annotations
from typing import Tuple

from .core import DivisionByZero, MarketTotals, Trade
from .safe_math import mul_div, to_uint128


def liquidity_claim(trade: Trade, totals: MarketTotals) -> Tuple[int, int]:
    """
    Split a liquidity token trade into its collateral and future cash claims.

    Args:
        trade: A LIQUIDITY_TOKEN trade
        totals: Market totals at the trade's maturity

    Returns:
        (collateral_claim, future_cash_claim), both uint128

    Raises:
        ValueError: trade is not a liquidity token
        DivisionByZero: the market has no liquidity outstanding
        NarrowingOverflow: a claim does not fit in uint128
    """
    if not trade.is_liquidity_token:
        raise ValueError(f"liquidity_claim requires a liquidity token trade, got {trade!r}")
    if totals.total_liquidity == 0:
        raise DivisionByZero(
            f"market at maturity {trade.maturity} has zero liquidity; cannot value {trade!r}"
        )

    collateral_claim = mul_div(totals.total_collateral, trade.notional, totals.total_liquidity)
    future_cash_claim = mul_div(totals.total_future_cash, trade.notional, totals.total_liquidity)

    return to_uint128(collateral_claim), to_uint128(future_cash_claim)
