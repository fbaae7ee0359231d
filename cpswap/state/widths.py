"""
Fixed-width integer domains.

Python ints never wrap, so values that live in fixed-width fields of the pool
record are checked against their declared width explicitly.
"""

from __future__ import annotations

from ..errors import InsufficientLiquidity, MathOverflow


U8_MAX = (1 << 8) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1


def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_u64(name: str, value: int) -> int:
    """Return ``value`` if it fits an unsigned 64-bit integer."""
    require_int(name, value)
    if value < 0 or value > U64_MAX:
        raise MathOverflow(f"{name} outside u64 range: {value}")
    return value


def require_i64(name: str, value: int) -> int:
    require_int(name, value)
    if value < I64_MIN or value > I64_MAX:
        raise MathOverflow(f"{name} outside i64 range: {value}")
    return value


def checked_add(a: int, b: int, *, limit: int = U64_MAX) -> int:
    out = a + b
    if out > limit:
        raise MathOverflow(f"addition overflow: {a} + {b}")
    return out


def checked_mul(a: int, b: int, *, limit: int = U128_MAX) -> int:
    out = a * b
    if out > limit:
        raise MathOverflow(f"multiplication overflow: {a} * {b}")
    return out


def checked_sub(a: int, b: int) -> int:
    """Unsigned subtraction. A negative result means the reserve cannot pay."""
    if b > a:
        raise InsufficientLiquidity(f"subtraction underflow: {a} - {b}")
    return a - b
