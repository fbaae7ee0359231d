"""
State for constant-product pools: reserve records, their binary layout, and
the in-memory custody ledger.
"""

from .custody import AccountFrozen, CustodyLedger, InsufficientBalance, UnauthorizedTransfer
from .layout import (
    POOL_ACCOUNT_SIZE,
    POOL_RECORD_SIZE,
    decode_pool,
    decode_pool_account,
    encode_pool,
    encode_pool_account,
)
from .pools import PoolState, SwapDirection

__all__ = [
    "AccountFrozen",
    "CustodyLedger",
    "InsufficientBalance",
    "UnauthorizedTransfer",
    "POOL_ACCOUNT_SIZE",
    "POOL_RECORD_SIZE",
    "decode_pool",
    "decode_pool_account",
    "encode_pool",
    "encode_pool_account",
    "PoolState",
    "SwapDirection",
]
