"""
conftest.py - Shared pytest fixtures for collateral tests

Provides common fixtures used across unit, conformance and functional tests:
- Market totals for every active maturity
- A recording market oracle
- DAI and USDC instrument groups and a directory holding both
"""

import pytest
from typing import Dict

from collateral import InstrumentGroup, MarketTotals, StaticInstrumentGroupDirectory

from tests.helpers import (
    DAI, USDC, NUM_PERIODS, PERIOD_SIZE, RecordingOracle, maturity_of,
)


@pytest.fixture
def market_totals() -> Dict[int, MarketTotals]:
    """Every active maturity: 1000 collateral, 2000 future cash, 500 liquidity."""
    return {
        maturity_of(b): MarketTotals(total_future_cash=2_000, total_liquidity=500, total_collateral=1_000)
        for b in range(NUM_PERIODS)
    }


@pytest.fixture
def oracle(market_totals) -> RecordingOracle:
    return RecordingOracle(market_totals)


@pytest.fixture
def dai_group(oracle) -> InstrumentGroup:
    return InstrumentGroup(id=1, currency=DAI, period_size=PERIOD_SIZE,
                           num_periods=NUM_PERIODS, discount_rate_oracle=oracle)


@pytest.fixture
def usdc_group(oracle) -> InstrumentGroup:
    """Two-period group: only buckets 0 and 1 are in range."""
    return InstrumentGroup(id=2, currency=USDC, period_size=PERIOD_SIZE,
                           num_periods=2, discount_rate_oracle=oracle)


@pytest.fixture
def directory(dai_group, usdc_group) -> StaticInstrumentGroupDirectory:
    return StaticInstrumentGroupDirectory([dai_group, usdc_group])
