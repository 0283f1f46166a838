"""
token_id.py - Trade token identifier codec

Packs the identifying attributes of a trade into a single integer so that a
position can be referenced by one id (e.g. by a transfer or balance layer).

Layout, high bits to low:

    | group (8) | instrument (16) | start_block (32) | duration (32) | swap_type (8) |

The swap type sits in the low byte so a position can be classified with a
single mask. Both functions are pure.
"""

from __future__ import annotations
from typing import Union

from .core import InvalidTokenId, SwapType, Trade, TradeKey

_SWAP_TYPE_BITS = 8
_DURATION_BITS = 32
_START_BLOCK_BITS = 32
_INSTRUMENT_BITS = 16
_GROUP_BITS = 8

_DURATION_SHIFT = _SWAP_TYPE_BITS
_START_BLOCK_SHIFT = _DURATION_SHIFT + _DURATION_BITS
_INSTRUMENT_SHIFT = _START_BLOCK_SHIFT + _START_BLOCK_BITS
_GROUP_SHIFT = _INSTRUMENT_SHIFT + _INSTRUMENT_BITS

TOKEN_ID_BITS = _GROUP_SHIFT + _GROUP_BITS


def _mask(bits: int) -> int:
    return (1 << bits) - 1


def encode_trade_id(trade: Union[Trade, TradeKey]) -> int:
    """
    Encode a trade's identifying attributes into a token id.

    The notional is not part of the id. Field ranges are already enforced by
    Trade/TradeKey construction, so encoding cannot fail.
    """
    return (
        (trade.instrument_group_id << _GROUP_SHIFT)
        | (trade.instrument_id << _INSTRUMENT_SHIFT)
        | (trade.start_block << _START_BLOCK_SHIFT)
        | (trade.duration << _DURATION_SHIFT)
        | trade.swap_type
    )


def decode_trade_id(token_id: int) -> TradeKey:
    """
    Decode a token id back into trade attributes.

    Raises:
        InvalidTokenId: id is not an int, is negative or is wider than the layout
    """
    if not isinstance(token_id, int) or isinstance(token_id, bool):
        raise InvalidTokenId(f"token id must be int, got {type(token_id).__name__}")
    if token_id < 0 or token_id >> TOKEN_ID_BITS:
        raise InvalidTokenId(f"token id {token_id:#x} is outside the {TOKEN_ID_BITS}-bit layout")

    return TradeKey(
        instrument_group_id=(token_id >> _GROUP_SHIFT) & _mask(_GROUP_BITS),
        instrument_id=(token_id >> _INSTRUMENT_SHIFT) & _mask(_INSTRUMENT_BITS),
        swap_type=token_id & _mask(_SWAP_TYPE_BITS),
        start_block=(token_id >> _START_BLOCK_SHIFT) & _mask(_START_BLOCK_BITS),
        duration=(token_id >> _DURATION_SHIFT) & _mask(_DURATION_BITS),
    )


def swap_type_of(token_id: int) -> int:
    """Swap type tag of a token id, read from the low byte."""
    return decode_trade_id(token_id).swap_type


def is_liquidity_token_id(token_id: int) -> bool:
    return swap_type_of(token_id) == SwapType.LIQUIDITY_TOKEN
