"""
helpers.py - Test helpers for collateral tests

Trade factories and a recording MarketOracle, shared by unit, conformance
and functional tests.

Block layout used throughout: BLOCK_NOW sits mid-period, so the four active
maturities 11_000, 12_000, 13_000 and 14_000 land in buckets 0..3.
"""

from typing import List

from collateral import DECIMALS, MarketTotals, StaticMarketOracle, SwapType, Trade


PERIOD_SIZE = 1_000
NUM_PERIODS = 4
BLOCK_NOW = 10_500

DAI = 1
USDC = 2

HALF = DECIMALS // 2


def maturity_of(bucket: int) -> int:
    """Maturity block that lands in the given bucket at BLOCK_NOW."""
    return 11_000 + bucket * PERIOD_SIZE


def make_trade(swap_type: int, notional: int, bucket: int = 0, group: int = 1,
               instrument: int = 0) -> Trade:
    maturity = maturity_of(bucket)
    return Trade(
        instrument_group_id=group,
        instrument_id=instrument,
        swap_type=swap_type,
        start_block=maturity - 4 * PERIOD_SIZE,
        duration=4 * PERIOD_SIZE,
        notional=notional,
    )


def payer(notional: int, bucket: int = 0, group: int = 1) -> Trade:
    return make_trade(SwapType.CASH_PAYER, notional, bucket, group)


def receiver(notional: int, bucket: int = 0, group: int = 1) -> Trade:
    return make_trade(SwapType.CASH_RECEIVER, notional, bucket, group)


def liquidity(notional: int, bucket: int = 0, group: int = 1) -> Trade:
    return make_trade(SwapType.LIQUIDITY_TOKEN, notional, bucket, group)


class RecordingOracle(StaticMarketOracle):
    """StaticMarketOracle that records every maturity it is asked about."""

    def __init__(self, totals=None):
        super().__init__(totals)
        self.queries: List[int] = []

    def get_market_totals(self, maturity: int) -> MarketTotals:
        self.queries.append(maturity)
        return super().get_market_totals(maturity)
