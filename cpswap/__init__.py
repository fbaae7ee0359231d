"""
cpswap: a two-asset constant-product swap pool with a fixed 0.3% fee.
"""

from .config import SwapConfig, configure_logging, load_config
from .core import SwapEngine, initialize_pool, quote_exact_in, spot_price
from .core.types import SwapEvent, SwapRequest, SwapResult
from .errors import (
    ErrorKind,
    InsufficientLiquidity,
    InvalidAmount,
    MathOverflow,
    SlippageExceeded,
    SwapError,
)
from .integration import SwapService
from .state import CustodyLedger, PoolState, SwapDirection

__version__ = "0.1.0"

__all__ = [
    "SwapConfig",
    "configure_logging",
    "load_config",
    "SwapEngine",
    "initialize_pool",
    "quote_exact_in",
    "spot_price",
    "SwapEvent",
    "SwapRequest",
    "SwapResult",
    "ErrorKind",
    "InsufficientLiquidity",
    "InvalidAmount",
    "MathOverflow",
    "SlippageExceeded",
    "SwapError",
    "SwapService",
    "CustodyLedger",
    "PoolState",
    "SwapDirection",
]
