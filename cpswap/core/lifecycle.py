"""
Pool creation.
"""

from __future__ import annotations

import logging

from ..state.canonical import canonical_identity
from ..state.custody import Amount, AssetId, Identity
from ..state.pools import PoolState
from .interfaces import AddressDeriver


logger = logging.getLogger(__name__)


def initialize_pool(
    base_asset: AssetId,
    quote_asset: AssetId,
    initial_base: Amount,
    initial_quote: Amount,
    authority: Identity,
    now: int,
    *,
    deriver: AddressDeriver,
) -> PoolState:
    """
    Create the reserve record for a new asset pair.

    Reserves are seeded directly with the supplied amounts (no fee, no
    pricing). The derivation nonce is found once here and stored, so swaps
    can re-derive the pool address without searching again.

    Moving the seed deposits into custody and enforcing one pool per pair
    are the host's responsibility.

    Args:
        base_asset: Base asset identity
        quote_asset: Quote asset identity (must differ from base)
        initial_base: Initial base reserve (u64)
        initial_quote: Initial quote reserve (u64)
        authority: Pool creator
        now: Creation timestamp

    Returns:
        The new PoolState

    Raises:
        ValueError: If the assets are identical or an identity is malformed
        MathOverflow: If a reserve or timestamp is out of range
    """
    base_asset = canonical_identity(base_asset, name="base_asset")
    quote_asset = canonical_identity(quote_asset, name="quote_asset")
    if base_asset == quote_asset:
        raise ValueError(f"base and quote assets must differ: {base_asset}")

    address, nonce = deriver.find_pool_address(base_asset, quote_asset)

    pool = PoolState(
        base_asset=base_asset,
        quote_asset=quote_asset,
        base_reserve=initial_base,
        quote_reserve=initial_quote,
        authority=authority,
        derivation_nonce=nonce,
        last_update_time=now,
    )
    logger.info(
        "pool %s initialized: %s/%s reserves=(%d, %d) nonce=%d",
        address,
        base_asset,
        quote_asset,
        initial_base,
        initial_quote,
        nonce,
    )
    return pool
