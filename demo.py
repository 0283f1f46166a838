#!/usr/bin/env python3
"""
demo.py - Walkthrough: Collateral Requirements Step by Step

Builds a small two-currency portfolio and follows it through the pipeline.
Press Enter to advance.

WHAT YOU'LL SEE:
  1: Markets      - Instrument groups, active maturities, market totals
  2: Trades       - Cash payers, receivers, liquidity tokens and their token ids
  3: Ladders      - Partitioning and cash ladders
  4: Requirements - Haircut applied to shortfalls, never netted
  5: Accounts     - Free collateral in a base currency
  6: Failures     - A matured trade aborts the whole computation

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

import sys
from dataclasses import dataclass

from collateral import (
    DECIMALS, SwapType, Trade, InstrumentGroup, MarketTotals,
    StaticMarketOracle, StaticInstrumentGroupDirectory, InMemoryPortfolioStore,
    ExchangeRate, RiskFramework, RiskError,
    active_maturities, build_cash_ladders, decode_trade_id, encode_trade_id,
    format_requirements, partition_portfolio,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the walkthrough. Modify these to experiment."""
    block_now: int = 10_500
    period_size: int = 1_000
    num_periods: int = 4
    haircut: int = DECIMALS // 2

    eth: int = 0
    dai: int = 1
    usdc: int = 2


CONFIG = DemoConfig()
ONE = DECIMALS
QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str):
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}\n")


def trade(group: int, swap_type: int, maturity: int, notional: int) -> Trade:
    duration = CONFIG.period_size * CONFIG.num_periods
    return Trade(group, 0, swap_type, maturity - duration, duration, notional)


# ============================================================================
# STEPS
# ============================================================================

def step_01_markets():
    step_header(1, "Markets")

    maturities = active_maturities(CONFIG.block_now, CONFIG.period_size, CONFIG.num_periods)
    print(f"Block {CONFIG.block_now}, active maturities: {maturities}")

    oracle = StaticMarketOracle({
        m: MarketTotals(total_future_cash=2_000 * ONE, total_liquidity=500 * ONE,
                        total_collateral=1_000 * ONE)
        for m in maturities
    })
    directory = StaticInstrumentGroupDirectory([
        InstrumentGroup(1, CONFIG.dai, CONFIG.period_size, CONFIG.num_periods, oracle),
        InstrumentGroup(2, CONFIG.usdc, CONFIG.period_size, 2, oracle),
    ])
    for gid, group in sorted(directory.groups.items()):
        print(f"  group {gid}: currency {group.currency}, {group.num_periods} periods, "
              f"last maturity {group.max_maturity(CONFIG.block_now)}")
    return maturities, directory


def step_02_trades(maturities):
    step_header(2, "Trades")

    portfolio = [
        trade(2, SwapType.CASH_PAYER, maturities[1], 10 * ONE),
        trade(1, SwapType.CASH_PAYER, maturities[0], 100 * ONE),
        trade(1, SwapType.CASH_RECEIVER, maturities[2], 50 * ONE),
        trade(1, SwapType.LIQUIDITY_TOKEN, maturities[1], 25 * ONE),
    ]
    for t in portfolio:
        token_id = encode_trade_id(t)
        print(f"  {t!r}")
        print(f"    token id 0x{token_id:024x} -> {decode_trade_id(token_id)}")
    return portfolio


def step_03_ladders(portfolio, directory):
    step_header(3, "Cash Ladders")

    trades, group_ids = partition_portfolio(portfolio)
    print(f"Groups in portfolio order: {group_ids}")
    groups = directory.resolve_instrument_groups(group_ids)
    ladders, npv = build_cash_ladders(trades, groups, CONFIG.block_now)
    for ladder, value in zip(ladders, npv):
        print(f"  group {ladder.id}: buckets {[b // ONE for b in ladder.buckets]}, npv {value // ONE}")


def step_04_requirements(portfolio, directory):
    step_header(4, "Requirements")

    risk = RiskFramework(directory, verbose=True)
    requirements = risk.compute_requirements(portfolio, CONFIG.block_now, CONFIG.haircut)
    print()
    print(format_requirements(requirements))
    print("\nPositive buckets do not offset negative ones in other periods.")


def step_05_accounts(portfolio, directory):
    step_header(5, "Free Collateral")

    store = InMemoryPortfolioStore()
    for t in portfolio:
        store.add_trade("alice", t)

    rates = {
        CONFIG.dai: ExchangeRate(rate=ONE // 100, haircut=ONE * 130 // 100),
        CONFIG.usdc: ExchangeRate(rate=ONE // 100),
    }
    risk = RiskFramework(directory, verbose=True)
    fc = risk.free_collateral_for_account(
        store, "alice", CONFIG.block_now, CONFIG.haircut,
        {CONFIG.eth: ONE // 10, CONFIG.dai: 20 * ONE}, rates, base_currency=CONFIG.eth,
    )
    for currency, net in sorted(fc.net_available.items()):
        print(f"  currency {currency}: net available {net / ONE:+.4f}")


def step_06_failures(portfolio, directory, maturities):
    step_header(6, "Failures")

    risk = RiskFramework(directory, verbose=True)
    late_block = maturities[0]
    try:
        risk.compute_requirements(portfolio, late_block, CONFIG.haircut)
    except RiskError:
        print("\nNo partial result: filter matured trades first.")

    store = InMemoryPortfolioStore()
    for t in portfolio:
        store.add_trade("alice", t)
    requirements = risk.requirements_for_account(store, "alice", late_block, CONFIG.haircut)
    print()
    print(format_requirements(requirements))


def main():
    maturities, directory = step_01_markets()
    wait_for_enter()
    portfolio = step_02_trades(maturities)
    wait_for_enter()
    step_03_ladders(portfolio, directory)
    wait_for_enter()
    step_04_requirements(portfolio, directory)
    wait_for_enter()
    step_05_accounts(portfolio, directory)
    wait_for_enter()
    step_06_failures(portfolio, directory, maturities)


if __name__ == "__main__":
    main()
