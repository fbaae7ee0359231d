# [TESTER] v1

from __future__ import annotations

import pytest

from cpswap.core.reserve_math import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    compute_output,
    constant_product,
    fee_amount,
    product_non_decreasing,
)
from cpswap.errors import ErrorKind, InsufficientLiquidity, MathOverflow
from cpswap.state.widths import (
    U64_MAX,
    checked_add,
    checked_mul,
    checked_sub,
    require_i64,
    require_u64,
)


def test_fee_constants_are_997_over_1000() -> None:
    assert (FEE_NUMERATOR, FEE_DENOMINATOR) == (997, 1000)


def test_compute_output_matches_closed_form() -> None:
    out = compute_output(1000, 1_000_000, 2_000_000)
    assert out == (997_000 * 2_000_000) // (1000 * 1_000_000 + 997_000)
    assert out == 1992


def test_compute_output_reverse_direction() -> None:
    assert compute_output(2000, 2_000_000, 1_000_000) == 996


def test_compute_output_can_round_to_zero() -> None:
    # Tiny trade against a deep input reserve: floor rounds the output away.
    assert compute_output(1, 1_000_000, 1) == 0


@pytest.mark.parametrize(
    "reserve_in,reserve_out",
    [(0, 1_000), (1_000, 0), (0, 0)],
)
def test_compute_output_rejects_empty_reserve(reserve_in: int, reserve_out: int) -> None:
    with pytest.raises(InsufficientLiquidity) as exc:
        compute_output(10, reserve_in, reserve_out)
    assert exc.value.kind is ErrorKind.INSUFFICIENT_LIQUIDITY


def test_compute_output_overflows_at_u64_extremes() -> None:
    with pytest.raises(MathOverflow):
        compute_output(U64_MAX, U64_MAX, U64_MAX)


def test_compute_output_rejects_out_of_range_inputs() -> None:
    with pytest.raises(MathOverflow):
        compute_output(U64_MAX + 1, 10, 10)
    with pytest.raises(MathOverflow):
        compute_output(-1, 10, 10)
    with pytest.raises(TypeError):
        compute_output(True, 10, 10)


def test_fee_amount_floor() -> None:
    assert fee_amount(1000) == 3
    assert fee_amount(333) == 0
    assert fee_amount(334) == 1


def test_product_helpers() -> None:
    assert constant_product(3, 7) == 21
    assert product_non_decreasing((10, 10), (11, 10))
    assert product_non_decreasing((10, 10), (10, 10))
    assert not product_non_decreasing((10, 10), (11, 9))


class TestCheckedWidths:
    def test_checked_add_at_limit(self):
        assert checked_add(U64_MAX - 1, 1) == U64_MAX
        with pytest.raises(MathOverflow):
            checked_add(U64_MAX, 1)

    def test_checked_sub_underflow_is_liquidity_error(self):
        assert checked_sub(5, 5) == 0
        with pytest.raises(InsufficientLiquidity):
            checked_sub(5, 6)

    def test_checked_mul_custom_limit(self):
        assert checked_mul(2, 3, limit=6) == 6
        with pytest.raises(MathOverflow):
            checked_mul(2, 4, limit=6)

    def test_require_u64_bounds(self):
        assert require_u64("x", 0) == 0
        assert require_u64("x", U64_MAX) == U64_MAX
        with pytest.raises(MathOverflow):
            require_u64("x", U64_MAX + 1)
        with pytest.raises(TypeError):
            require_u64("x", 1.0)  # type: ignore[arg-type]

    def test_require_i64_accepts_negative(self):
        assert require_i64("t", -(1 << 63)) == -(1 << 63)
        with pytest.raises(MathOverflow):
            require_i64("t", 1 << 63)
