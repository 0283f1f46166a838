"""
requirements.py - Collateral requirements from cash ladders

Each negative bucket of a ladder is a shortfall that must be collateralized
on its own:

    requirement = sum(|bucket| * haircut // DECIMALS  for bucket < 0)

Positive buckets never offset negative ones.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .cash_ladder import CashLadder
from .core import DECIMALS, UINT128_MAX, UINT256_MAX, HaircutOverflow, Requirement
from .safe_math import add_int256


@dataclass(frozen=True, slots=True)
class CurrencyRequirement:
    """Requirement and npv summed over all groups in one currency."""
    currency: int
    npv: int
    requirement: int


def ladder_requirement(buckets: Sequence[int], haircut: int) -> int:
    """
    Haircut requirement of a single ladder.

    Raises:
        HaircutOverflow: the requirement does not fit in uint128
    """
    requirement = 0
    for bucket in buckets:
        if bucket >= 0:
            continue
        product = -bucket * haircut
        if product > UINT256_MAX:
            raise HaircutOverflow(f"{bucket} * {haircut} overflows uint256")
        requirement += product // DECIMALS
        if requirement > UINT128_MAX:
            raise HaircutOverflow(f"requirement {requirement} overflows uint128")
    return requirement


def aggregate_requirements(
    ladders: Sequence[CashLadder],
    npv: Sequence[int],
    haircut: int,
) -> List[Requirement]:
    """
    Produce one Requirement per instrument group.

    Args:
        ladders: Cash ladders from build_cash_ladders
        npv: Npv per group, same order as ladders
        haircut: Multiplier on shortfalls, DECIMALS == 100%

    Raises:
        ValueError: haircut is negative or ladders and npv differ in length
        HaircutOverflow: a requirement does not fit in uint128
    """
    if haircut < 0:
        raise ValueError(f"haircut must be non-negative, got {haircut}")
    if len(ladders) != len(npv):
        raise ValueError(f"got {len(ladders)} ladders but {len(npv)} npv values")

    return [
        Requirement(
            currency=ladder.currency,
            npv=npv[i],
            cash_ladder=ladder.snapshot(),
            requirement=ladder_requirement(ladder.buckets, haircut),
            instrument_group_id=ladder.id,
        )
        for i, ladder in enumerate(ladders)
    ]


def aggregate_by_currency(requirements: Sequence[Requirement]) -> Dict[int, CurrencyRequirement]:
    """Sum npv and requirement across groups that share a currency."""
    npv: Dict[int, int] = {}
    required: Dict[int, int] = {}
    for r in requirements:
        npv[r.currency] = add_int256(npv.get(r.currency, 0), r.npv)
        total = required.get(r.currency, 0) + r.requirement
        if total > UINT128_MAX:
            raise HaircutOverflow(f"currency {r.currency} requirement {total} overflows uint128")
        required[r.currency] = total

    return {
        c: CurrencyRequirement(currency=c, npv=npv[c], requirement=required[c])
        for c in npv
    }
