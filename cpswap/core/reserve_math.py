"""
Constant-product reserve math (fixed 0.3% fee).

Pure, integer-only functions. Intermediates are checked against a 128-bit
working width and fail with ``MathOverflow`` instead of growing unbounded.

Pricing:
    effective_in = amount_in * 997
    amount_out   = floor(effective_in * reserve_out / (reserve_in * 1000 + effective_in))

Floor division always rounds in favour of the pool, so together with the fee
the reserve product never decreases across a swap.
"""

from __future__ import annotations

from ..errors import InsufficientLiquidity
from ..state.widths import (
    U128_MAX,
    checked_add,
    checked_mul,
    require_int,
    require_u64,
)


FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


def compute_output(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Compute the output amount for an exact-in swap.

    Args:
        amount_in: Input amount (u64). Zero is rejected by the engine before this is called.
        reserve_in: Pool reserve of the input asset (u64).
        reserve_out: Pool reserve of the output asset (u64).

    Returns:
        amount_out, with ``0 <= amount_out < reserve_out``.

    Raises:
        InsufficientLiquidity: If either reserve is zero.
        MathOverflow: If any intermediate leaves the 128-bit working width.
    """
    require_u64("amount_in", amount_in)
    require_u64("reserve_in", reserve_in)
    require_u64("reserve_out", reserve_out)

    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity(f"empty reserve: ({reserve_in}, {reserve_out})")

    amount_in_with_fee = checked_mul(amount_in, FEE_NUMERATOR)
    numerator = checked_mul(amount_in_with_fee, reserve_out)
    denominator = checked_add(
        checked_mul(reserve_in, FEE_DENOMINATOR),
        amount_in_with_fee,
        limit=U128_MAX,
    )
    # reserve_in > 0, so the denominator is always positive.
    amount_out = numerator // denominator

    if amount_out >= reserve_out:
        raise InsufficientLiquidity(f"amount_out {amount_out} would drain reserve_out {reserve_out}")
    return amount_out


def fee_amount(amount_in: int) -> int:
    """Portion of `amount_in` withheld from pricing (floor of 0.3%)."""
    require_u64("amount_in", amount_in)
    return (amount_in * (FEE_DENOMINATOR - FEE_NUMERATOR)) // FEE_DENOMINATOR


def constant_product(reserve_a: int, reserve_b: int) -> int:
    """k = reserve_a * reserve_b (unbounded; used for invariant checks only)."""
    require_int("reserve_a", reserve_a)
    require_int("reserve_b", reserve_b)
    return reserve_a * reserve_b


def product_non_decreasing(
    before: tuple[int, int],
    after: tuple[int, int],
) -> bool:
    """True when the reserve product did not shrink across a transition."""
    return constant_product(*after) >= constant_product(*before)
