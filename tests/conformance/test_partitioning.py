"""
Partitioning Conformance Tests

INVARIANT: After partitioning, trades sharing an instrument group are
contiguous, and nothing is added or lost.

    ∀ p: is_contiguous(partition_portfolio(p).trades)
    ∀ p: multiset(partition_portfolio(p).trades) == multiset(p)
"""

from collections import Counter

from hypothesis import given, settings
from hypothesis import strategies as st

from collateral import SwapType, Trade, is_contiguous, partition_portfolio
from collateral.partition import sort_key


@st.composite
def trades(draw):
    return Trade(
        instrument_group_id=draw(st.integers(0, 5)),
        instrument_id=draw(st.integers(0, 3)),
        swap_type=draw(st.sampled_from([int(t) for t in SwapType] + [0x01])),
        start_block=draw(st.integers(0, 1_000)),
        duration=draw(st.integers(0, 1_000)),
        notional=draw(st.integers(0, 10 ** 6)),
    )


portfolios = st.lists(trades(), min_size=1, max_size=40)


class TestPartitionInvariant:

    @given(portfolios)
    @settings(max_examples=200)
    def test_groups_contiguous(self, portfolio):
        sorted_trades, _ = partition_portfolio(portfolio)
        assert is_contiguous(sorted_trades)

    @given(portfolios)
    def test_no_trades_gained_or_lost(self, portfolio):
        sorted_trades, _ = partition_portfolio(portfolio)
        assert Counter(sorted_trades) == Counter(portfolio)

    @given(portfolios)
    def test_group_ids_distinct_and_complete(self, portfolio):
        _, group_ids = partition_portfolio(portfolio)
        assert len(group_ids) == len(set(group_ids))
        assert set(group_ids) == {t.instrument_group_id for t in portfolio}

    @given(portfolios)
    def test_order_independent(self, portfolio):
        forward, forward_ids = partition_portfolio(portfolio)
        backward, backward_ids = partition_portfolio(list(reversed(portfolio)))
        assert forward_ids == backward_ids
        assert [sort_key(t) for t in forward] == [sort_key(t) for t in backward]
