"""Exception types for the swap engine.

Every failure carries a machine-readable ``kind`` so callers (and the host
shell) can report a single aggregate failure without parsing messages.
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class ErrorKind(Enum):
    INVALID_AMOUNT = "InvalidAmount"
    INSUFFICIENT_LIQUIDITY = "InsufficientLiquidity"
    SLIPPAGE_EXCEEDED = "SlippageExceeded"
    MATH_OVERFLOW = "MathOverflow"
    TRANSFER_FAILED = "TransferFailed"
    POOL_EXISTS = "PoolExists"
    POOL_NOT_FOUND = "PoolNotFound"
    UNAUTHORIZED = "Unauthorized"


class SwapError(Exception):
    """Base class for terminal swap/pool failures."""

    kind: ErrorKind

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind.value)


class InvalidAmount(SwapError):
    """Raised when the requested input amount is zero."""

    kind = ErrorKind.INVALID_AMOUNT


class InsufficientLiquidity(SwapError):
    """Raised when a reserve is empty or would be driven below zero."""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY


class SlippageExceeded(SwapError):
    """Raised when the computed output is below the caller's floor."""

    kind = ErrorKind.SLIPPAGE_EXCEEDED

    def __init__(self, amount_out: int, minimum_amount_out: int) -> None:
        self.amount_out = amount_out
        self.minimum_amount_out = minimum_amount_out
        super().__init__(f"amount_out {amount_out} < minimum_amount_out {minimum_amount_out}")


class MathOverflow(SwapError):
    """Raised when a checked arithmetic step leaves its declared width."""

    kind = ErrorKind.MATH_OVERFLOW


class CustodyError(SwapError):
    """Base class for failures raised by a custody/transfer collaborator."""

    kind = ErrorKind.TRANSFER_FAILED


class PoolExists(SwapError):
    kind = ErrorKind.POOL_EXISTS


class PoolNotFound(SwapError):
    kind = ErrorKind.POOL_NOT_FOUND


class Unauthorized(SwapError):
    kind = ErrorKind.UNAUTHORIZED
