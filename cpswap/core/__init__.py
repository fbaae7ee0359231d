"""
Core swap algorithms: reserve math, the swap engine, pool creation, quotes.
"""

from .engine import SwapEngine, emit_safely
from .lifecycle import initialize_pool
from .quotes import minimum_amount_out, price_impact_bps, quote_exact_in, spot_price
from .reserve_math import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    compute_output,
    constant_product,
    fee_amount,
    product_non_decreasing,
)
from .types import AuthorizationToken, SwapEvent, SwapQuote, SwapRequest, SwapResult

__all__ = [
    "SwapEngine",
    "emit_safely",
    "initialize_pool",
    "minimum_amount_out",
    "price_impact_bps",
    "quote_exact_in",
    "spot_price",
    "FEE_DENOMINATOR",
    "FEE_NUMERATOR",
    "compute_output",
    "constant_product",
    "fee_amount",
    "product_non_decreasing",
    "AuthorizationToken",
    "SwapEvent",
    "SwapQuote",
    "SwapRequest",
    "SwapResult",
]
