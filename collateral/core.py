"""
Core types for the collateral requirement engine.

This module provides the foundational data structures and protocols:
1. Protocols: MarketOracle, InstrumentGroupDirectory, PortfolioStore
2. Immutable data structures: Trade, TradeKey, InstrumentGroup, MarketTotals, Requirement
3. Exceptions: RiskError and the failure types of a requirement computation
4. Constants: fixed-point scale, integer width bounds, swap type tags

All amounts are plain Python ints in the smallest unit of their currency.
Width bounds model the fixed-width amounts the ledger stores; crossing one
is always an error, never a silent wraparound.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Protocol, Sequence, Tuple, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# Fixed-point scale for haircuts and exchange rates: DECIMALS == 100%.
DECIMALS = 10 ** 18

# Integer width bounds.
UINT8_MAX = 2 ** 8 - 1
UINT16_MAX = 2 ** 16 - 1
UINT32_MAX = 2 ** 32 - 1
UINT128_MAX = 2 ** 128 - 1
UINT256_MAX = 2 ** 256 - 1
INT128_MIN = -(2 ** 127)
INT128_MAX = 2 ** 127 - 1
INT256_MIN = -(2 ** 255)
INT256_MAX = 2 ** 255 - 1

# Default cap on the number of trades a single account may hold.
DEFAULT_MAX_TRADES = 10


class SwapType(IntEnum):
    """
    Recognized swap type tags.

    The tag occupies the low byte of a token id. Any other 8-bit value is
    still a valid tag for a Trade but has no cash ladder effect.
    """
    CASH_PAYER = 0x98
    CASH_RECEIVER = 0xA8
    LIQUIDITY_TOKEN = 0xAC


# ============================================================================
# EXCEPTIONS
# ============================================================================

class RiskError(Exception):
    """Base exception for all requirement computation errors."""
    pass


class EmptyPortfolio(RiskError):
    """Raised when a computation is requested over zero trades."""
    pass


class MaturedOrUnderflow(RiskError):
    """Raised when a trade has matured or its maturity falls outside the ladder."""
    pass


class DivisionByZero(RiskError):
    """Raised when a market reports zero liquidity for a liquidity claim."""
    pass


class IntegerOverflow(RiskError):
    """Raised when an integer result does not fit its target width."""
    pass


class NarrowingOverflow(IntegerOverflow):
    """Raised when a wide value cannot be narrowed to a fixed-width amount exactly."""
    pass


class HaircutOverflow(IntegerOverflow):
    """Raised when a haircut requirement overflows the unsigned result type."""
    pass


class AccumulatorOverflow(IntegerOverflow):
    """Raised when a cash ladder bucket or npv accumulator overflows."""
    pass


class UnknownInstrumentGroup(RiskError):
    """Raised when the directory cannot resolve an instrument group id."""
    pass


class PortfolioNotContiguous(RiskError):
    """Raised when trades of one instrument group are not contiguous."""
    pass


class InvalidTokenId(RiskError):
    """Raised when a token id does not decode to valid trade attributes."""
    pass


class MissingExchangeRate(RiskError):
    """Raised when a currency has no exchange rate to the base currency."""
    pass


class PortfolioTooLarge(RiskError):
    """Raised when adding a trade would exceed an account's trade limit."""
    pass


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be int, got {type(value).__name__}")
    if value < low or value > high:
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class TradeKey:
    """
    The attributes of a trade that identify it (everything but the notional).

    This is what a token id encodes. Two trades with the same key are the
    same position and aggregate into one.
    """
    instrument_group_id: int
    instrument_id: int
    swap_type: int
    start_block: int
    duration: int

    def __post_init__(self):
        _check_range("instrument_group_id", self.instrument_group_id, 0, UINT8_MAX)
        _check_range("instrument_id", self.instrument_id, 0, UINT16_MAX)
        _check_range("swap_type", self.swap_type, 0, UINT8_MAX)
        _check_range("start_block", self.start_block, 0, UINT32_MAX)
        _check_range("duration", self.duration, 0, UINT32_MAX)


@dataclass(frozen=True, slots=True)
class Trade:
    """
    A single fixed-maturity position.

    Attributes:
        instrument_group_id: Group the trade belongs to (uint8)
        instrument_id: Instrument within the group (uint16)
        swap_type: Tag selecting the kind of position (uint8, see SwapType)
        start_block: Block at which the trade started (uint32)
        duration: Blocks from start to maturity (uint32)
        notional: Amount of the position (uint128)
    """
    instrument_group_id: int
    instrument_id: int
    swap_type: int
    start_block: int
    duration: int
    notional: int

    def __post_init__(self):
        _check_range("instrument_group_id", self.instrument_group_id, 0, UINT8_MAX)
        _check_range("instrument_id", self.instrument_id, 0, UINT16_MAX)
        _check_range("swap_type", self.swap_type, 0, UINT8_MAX)
        _check_range("start_block", self.start_block, 0, UINT32_MAX)
        _check_range("duration", self.duration, 0, UINT32_MAX)
        _check_range("notional", self.notional, 0, UINT128_MAX)

    @property
    def maturity(self) -> int:
        return self.start_block + self.duration

    @property
    def key(self) -> TradeKey:
        return TradeKey(
            instrument_group_id=self.instrument_group_id,
            instrument_id=self.instrument_id,
            swap_type=self.swap_type,
            start_block=self.start_block,
            duration=self.duration,
        )

    @property
    def is_liquidity_token(self) -> bool:
        return self.swap_type == SwapType.LIQUIDITY_TOKEN

    def __repr__(self) -> str:
        try:
            tag = SwapType(self.swap_type).name
        except ValueError:
            tag = f"0x{self.swap_type:02x}"
        return (f"Trade(group={self.instrument_group_id}, instrument={self.instrument_id}, "
                f"{tag}, maturity={self.maturity}, notional={self.notional})")


@dataclass(frozen=True, slots=True)
class MarketTotals:
    """
    Aggregate state of one market maturity, as reported by its oracle.

    Attributes:
        total_future_cash: Future cash held by the market
        total_liquidity: Liquidity tokens issued by the market
        total_collateral: Collateral held by the market
    """
    total_future_cash: int
    total_liquidity: int
    total_collateral: int

    def __post_init__(self):
        _check_range("total_future_cash", self.total_future_cash, 0, UINT128_MAX)
        _check_range("total_liquidity", self.total_liquidity, 0, UINT128_MAX)
        _check_range("total_collateral", self.total_collateral, 0, UINT128_MAX)


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class MarketOracle(Protocol):
    """
    Read-only view of a market for one instrument group.

    The computation depends only on this protocol; a concrete oracle may be
    backed by anything that can report totals at a maturity.
    """

    def get_market_totals(self, maturity: int) -> MarketTotals:
        """Return the market totals for the given maturity block."""
        ...


@dataclass(frozen=True, slots=True)
class InstrumentGroup:
    """
    Resolved metadata for an instrument group.

    Attributes:
        id: Instrument group identifier (uint8)
        currency: Currency id that all trades in the group are denominated in
        period_size: Blocks covered by one cash ladder bucket
        num_periods: Number of buckets in the group's cash ladder
        discount_rate_oracle: Market oracle for the group's maturities
    """
    id: int
    currency: int
    period_size: int
    num_periods: int
    discount_rate_oracle: MarketOracle = field(compare=False, repr=False)

    def __post_init__(self):
        _check_range("id", self.id, 0, UINT8_MAX)
        _check_range("currency", self.currency, 0, UINT16_MAX)
        _check_range("period_size", self.period_size, 1, UINT32_MAX)
        _check_range("num_periods", self.num_periods, 1, UINT32_MAX)

    def max_maturity(self, block_now: int) -> int:
        """Last maturity block that still falls into this group's ladder."""
        return block_now + self.period_size * self.num_periods - 1


@runtime_checkable
class InstrumentGroupDirectory(Protocol):
    """Resolves instrument group ids to their metadata."""

    def resolve_instrument_groups(self, group_ids: Sequence[int]) -> List[InstrumentGroup]:
        """
        Resolve groups in the order requested, one entry per id.

        Raises UnknownInstrumentGroup if any id is not known.
        """
        ...


@runtime_checkable
class PortfolioStore(Protocol):
    """Read access to the trades held by each account."""

    def get_trades(self, account: str) -> List[Trade]:
        """Return the account's trades (empty list for an unknown account)."""
        ...


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True, slots=True)
class Requirement:
    """
    Collateral requirement for one instrument group.

    Attributes:
        currency: Currency the amounts are denominated in
        npv: Certain value held in liquidity token collateral claims
        cash_ladder: Snapshot of the group's ladder buckets
        requirement: Collateral needed to cover the ladder's shortfalls
        instrument_group_id: Group the record was computed for
    """
    currency: int
    npv: int
    cash_ladder: Tuple[int, ...]
    requirement: int
    instrument_group_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currency": self.currency,
            "npv": self.npv,
            "cash_ladder": list(self.cash_ladder),
            "requirement": self.requirement,
            "instrument_group_id": self.instrument_group_id,
        }
