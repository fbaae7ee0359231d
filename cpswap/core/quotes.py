"""
Read-only pricing helpers: swap previews, spot price, and slippage floors.

Nothing here mutates a pool; every output is derived from the same
``compute_output`` the engine uses, so a quote equals the executed amount
as long as reserves do not move in between.
"""

from __future__ import annotations

import logging
from fractions import Fraction

from ..errors import InsufficientLiquidity, InvalidAmount
from ..state.pools import PoolState, SwapDirection
from ..state.widths import require_int, require_u64
from .reserve_math import compute_output, fee_amount
from .types import SwapQuote


logger = logging.getLogger(__name__)

BPS_DENOM = 10_000


def price_impact_bps(amount_in: int, amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """
    Execution price shortfall vs. spot price, in basis points (floor, >= 0).

    Uses cross-multiplication to avoid division:
    ``10_000 - floor(amount_out * reserve_in * 10_000 / (amount_in * reserve_out))``.
    Includes the fee, so even an infinitesimal trade reports ~30 bps.
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("amount_in and reserves must be positive")
    ratio_bps = (amount_out * reserve_in * BPS_DENOM) // (amount_in * reserve_out)
    return max(0, BPS_DENOM - ratio_bps)


def quote_exact_in(pool: PoolState, direction: SwapDirection, amount_in: int) -> SwapQuote:
    """Preview an exact-in swap. Raises the same errors as the engine."""
    if amount_in == 0:
        raise InvalidAmount("amount_in must be positive")
    require_u64("amount_in", amount_in)

    reserve_in, reserve_out = pool.reserves_for(direction)
    amount_out = compute_output(amount_in, reserve_in, reserve_out)
    # Same checked reserve update the engine commits.
    after = pool.apply_swap(direction, amount_in, amount_out, pool.last_update_time)
    reserve_in_after, reserve_out_after = after.reserves_for(direction)
    quote = SwapQuote(
        direction=direction,
        amount_in=amount_in,
        amount_out=amount_out,
        fee_amount=fee_amount(amount_in),
        price_impact_bps=price_impact_bps(amount_in, amount_out, reserve_in, reserve_out),
        reserve_in_after=reserve_in_after,
        reserve_out_after=reserve_out_after,
    )
    logger.debug("quote %s: in=%d out=%d impact=%dbps", direction.value, amount_in, amount_out, quote.price_impact_bps)
    return quote


def spot_price(pool: PoolState, base_decimals: int = 0, quote_decimals: int = 0) -> Fraction:
    """
    Quote-asset price of one whole base unit, as an exact fraction.

    `*_decimals` convert integer base units to whole tokens, e.g. a 9-decimal
    base and a 6-decimal quote.
    """
    require_int("base_decimals", base_decimals)
    require_int("quote_decimals", quote_decimals)
    if base_decimals < 0 or quote_decimals < 0:
        raise ValueError("decimals must be non-negative")
    if pool.is_inert():
        raise InsufficientLiquidity(f"empty reserve: ({pool.base_reserve}, {pool.quote_reserve})")
    return Fraction(pool.quote_reserve * 10**base_decimals, pool.base_reserve * 10**quote_decimals)


def minimum_amount_out(amount_out: int, slippage_bps: int) -> int:
    """Slippage floor: ``floor(amount_out * (10_000 - slippage_bps) / 10_000)``."""
    require_u64("amount_out", amount_out)
    require_int("slippage_bps", slippage_bps)
    if not (0 <= slippage_bps <= BPS_DENOM):
        raise ValueError(f"slippage_bps must be in [0, {BPS_DENOM}]: {slippage_bps}")
    return (amount_out * (BPS_DENOM - slippage_bps)) // BPS_DENOM
