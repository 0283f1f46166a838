"""
collateral - Collateral Requirement Engine

Computes the collateral an account needs to hold against a portfolio of
fixed-maturity trades, by instrument group and currency.

Usage:
    from collateral import (
        DECIMALS, InstrumentGroup, MarketTotals, RiskFramework, SwapType, Trade,
        StaticInstrumentGroupDirectory, StaticMarketOracle,
    )

    oracle = StaticMarketOracle({2_000: MarketTotals(2_000, 500, 1_000)})
    directory = StaticInstrumentGroupDirectory([
        InstrumentGroup(id=1, currency=1, period_size=1_000, num_periods=4,
                        discount_rate_oracle=oracle),
    ])

    trades = [
        Trade(1, 0, SwapType.CASH_PAYER, 1_000, 1_000, 100),
        Trade(1, 0, SwapType.LIQUIDITY_TOKEN, 1_000, 1_000, 100),
    ]
    risk = RiskFramework(directory)
    requirements = risk.compute_requirements(trades, block_now=1_500, haircut=DECIMALS)
"""

# Core types
from .core import (
    Trade,
    TradeKey,
    SwapType,
    InstrumentGroup,
    MarketTotals,
    Requirement,
    MarketOracle,
    InstrumentGroupDirectory,
    PortfolioStore,
    RiskError,
    EmptyPortfolio,
    MaturedOrUnderflow,
    DivisionByZero,
    IntegerOverflow,
    NarrowingOverflow,
    HaircutOverflow,
    AccumulatorOverflow,
    UnknownInstrumentGroup,
    PortfolioNotContiguous,
    InvalidTokenId,
    MissingExchangeRate,
    PortfolioTooLarge,
    DECIMALS,
    DEFAULT_MAX_TRADES,
    UINT128_MAX,
    INT128_MAX,
    INT256_MAX,
    INT256_MIN,
)

# Token ids
from .token_id import encode_trade_id, decode_trade_id, is_liquidity_token_id

# Checked arithmetic
from .safe_math import to_uint128, to_int128, mul_div

# Pipeline stages
from .partition import partition_portfolio, is_contiguous
from .liquidity import liquidity_claim
from .cash_ladder import (
    CashLadder,
    active_maturities,
    filter_active_trades,
    bucket_offset,
    build_cash_ladders,
)
from .requirements import (
    CurrencyRequirement,
    ladder_requirement,
    aggregate_requirements,
    aggregate_by_currency,
)

# Free collateral
from .free_collateral import ExchangeRate, FreeCollateral, free_collateral

# Entry point
from .risk_framework import RiskFramework, compute_requirements, format_requirements

# In-memory collaborators
from .sources import StaticMarketOracle, StaticInstrumentGroupDirectory, InMemoryPortfolioStore

__all__ = [
    # Core types
    "Trade",
    "TradeKey",
    "SwapType",
    "InstrumentGroup",
    "MarketTotals",
    "Requirement",
    "MarketOracle",
    "InstrumentGroupDirectory",
    "PortfolioStore",
    # Exceptions
    "RiskError",
    "EmptyPortfolio",
    "MaturedOrUnderflow",
    "DivisionByZero",
    "IntegerOverflow",
    "NarrowingOverflow",
    "HaircutOverflow",
    "AccumulatorOverflow",
    "UnknownInstrumentGroup",
    "PortfolioNotContiguous",
    "InvalidTokenId",
    "MissingExchangeRate",
    "PortfolioTooLarge",
    # Constants
    "DECIMALS",
    "DEFAULT_MAX_TRADES",
    "UINT128_MAX",
    "INT128_MAX",
    "INT256_MAX",
    "INT256_MIN",
    # Token ids
    "encode_trade_id",
    "decode_trade_id",
    "is_liquidity_token_id",
    # Checked arithmetic
    "to_uint128",
    "to_int128",
    "mul_div",
    # Pipeline stages
    "partition_portfolio",
    "is_contiguous",
    "liquidity_claim",
    "CashLadder",
    "active_maturities",
    "filter_active_trades",
    "bucket_offset",
    "build_cash_ladders",
    "CurrencyRequirement",
    "ladder_requirement",
    "aggregate_requirements",
    "aggregate_by_currency",
    # Free collateral
    "ExchangeRate",
    "FreeCollateral",
    "free_collateral",
    # Entry point
    "RiskFramework",
    "compute_requirements",
    "format_requirements",
    # In-memory collaborators
    "StaticMarketOracle",
    "StaticInstrumentGroupDirectory",
    "InMemoryPortfolioStore",
]
