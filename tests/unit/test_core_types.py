"""
test_core_types.py - Unit tests for core data structures

Tests:
- Trade: creation, range validation, immutability, derived fields
- InstrumentGroup / MarketTotals: validation
- Requirement: to_dict
- Exception hierarchy and protocol conformance
"""

import pytest
from dataclasses import FrozenInstanceError

from collateral import (
    Trade, TradeKey, SwapType, InstrumentGroup, MarketTotals, Requirement,
    MarketOracle, InstrumentGroupDirectory, PortfolioStore,
    RiskError, IntegerOverflow, NarrowingOverflow, HaircutOverflow, AccumulatorOverflow,
    EmptyPortfolio, MaturedOrUnderflow, DivisionByZero,
    StaticMarketOracle, StaticInstrumentGroupDirectory, InMemoryPortfolioStore,
    UINT128_MAX,
)


class TestTradeCreation:
    """Tests for Trade creation and validation."""

    def test_create_valid_trade(self):
        trade = Trade(1, 2, SwapType.CASH_PAYER, 1_000, 500, 100)
        assert trade.instrument_group_id == 1
        assert trade.instrument_id == 2
        assert trade.swap_type == SwapType.CASH_PAYER
        assert trade.maturity == 1_500
        assert trade.notional == 100

    def test_key_excludes_notional(self):
        a = Trade(1, 2, SwapType.CASH_PAYER, 1_000, 500, 100)
        b = Trade(1, 2, SwapType.CASH_PAYER, 1_000, 500, 999)
        assert a.key == b.key
        assert a.key == TradeKey(1, 2, SwapType.CASH_PAYER, 1_000, 500)

    def test_unrecognized_swap_type_is_representable(self):
        trade = Trade(1, 0, 0x01, 0, 10, 5)
        assert trade.swap_type == 0x01
        assert not trade.is_liquidity_token
        assert "0x01" in repr(trade)

    def test_is_liquidity_token(self):
        assert Trade(1, 0, SwapType.LIQUIDITY_TOKEN, 0, 10, 5).is_liquidity_token
        assert not Trade(1, 0, SwapType.CASH_RECEIVER, 0, 10, 5).is_liquidity_token

    def test_max_notional_accepted(self):
        trade = Trade(1, 0, SwapType.CASH_RECEIVER, 0, 10, UINT128_MAX)
        assert trade.notional == UINT128_MAX

    @pytest.mark.parametrize("field_name, kwargs", [
        ("instrument_group_id", dict(instrument_group_id=256)),
        ("instrument_id", dict(instrument_id=2 ** 16)),
        ("swap_type", dict(swap_type=-1)),
        ("start_block", dict(start_block=2 ** 32)),
        ("duration", dict(duration=-5)),
        ("notional", dict(notional=UINT128_MAX + 1)),
        ("notional", dict(notional=-1)),
    ])
    def test_out_of_range_fields_rejected(self, field_name, kwargs):
        base = dict(instrument_group_id=1, instrument_id=0, swap_type=SwapType.CASH_PAYER,
                    start_block=0, duration=10, notional=1)
        base.update(kwargs)
        with pytest.raises(ValueError, match=field_name):
            Trade(**base)

    def test_non_int_rejected(self):
        with pytest.raises(ValueError, match="notional must be int"):
            Trade(1, 0, SwapType.CASH_PAYER, 0, 10, 1.5)
        with pytest.raises(ValueError, match="instrument_group_id must be int"):
            Trade(True, 0, SwapType.CASH_PAYER, 0, 10, 1)

    def test_trade_is_immutable(self):
        trade = Trade(1, 0, SwapType.CASH_PAYER, 0, 10, 1)
        with pytest.raises(FrozenInstanceError):
            trade.notional = 2


class TestInstrumentGroup:
    """Tests for InstrumentGroup validation."""

    def test_period_size_must_be_positive(self):
        with pytest.raises(ValueError, match="period_size"):
            InstrumentGroup(1, 1, 0, 4, StaticMarketOracle())

    def test_num_periods_must_be_positive(self):
        with pytest.raises(ValueError, match="num_periods"):
            InstrumentGroup(1, 1, 100, 0, StaticMarketOracle())

    def test_max_maturity(self):
        group = InstrumentGroup(1, 1, 100, 4, StaticMarketOracle())
        assert group.max_maturity(1_000) == 1_399

    def test_oracle_excluded_from_equality(self):
        a = InstrumentGroup(1, 1, 100, 4, StaticMarketOracle())
        b = InstrumentGroup(1, 1, 100, 4, StaticMarketOracle())
        assert a == b


class TestMarketTotals:

    def test_negative_totals_rejected(self):
        with pytest.raises(ValueError, match="total_liquidity"):
            MarketTotals(total_future_cash=0, total_liquidity=-1, total_collateral=0)


class TestRequirement:

    def test_group_id_required(self):
        with pytest.raises(TypeError):
            Requirement(currency=1, npv=0, cash_ladder=(), requirement=0)

    def test_to_dict(self):
        r = Requirement(currency=1, npv=200, cash_ladder=(-100, 50), requirement=50,
                        instrument_group_id=3)
        assert r.to_dict() == {
            "currency": 1,
            "npv": 200,
            "cash_ladder": [-100, 50],
            "requirement": 50,
            "instrument_group_id": 3,
        }


class TestExceptionHierarchy:

    @pytest.mark.parametrize("exc", [
        EmptyPortfolio, MaturedOrUnderflow, DivisionByZero, IntegerOverflow,
    ])
    def test_all_errors_are_risk_errors(self, exc):
        assert issubclass(exc, RiskError)

    @pytest.mark.parametrize("exc", [NarrowingOverflow, HaircutOverflow, AccumulatorOverflow])
    def test_overflows_share_a_base(self, exc):
        assert issubclass(exc, IntegerOverflow)


class TestProtocols:

    def test_static_sources_satisfy_protocols(self):
        assert isinstance(StaticMarketOracle(), MarketOracle)
        assert isinstance(StaticInstrumentGroupDirectory(), InstrumentGroupDirectory)
        assert isinstance(InMemoryPortfolioStore(), PortfolioStore)
