"""
Pool state for a two-asset constant-product pool.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Tuple

from .widths import U8_MAX, checked_add, checked_sub, require_i64, require_u64
from .canonical import canonical_identity
from .custody import Amount, AssetId, Identity


@unique
class SwapDirection(Enum):
    """Which reserve receives the input."""
    BASE_TO_QUOTE = "base_to_quote"
    QUOTE_TO_BASE = "quote_to_base"


@dataclass(frozen=True)
class PoolState:
    """
    Persisted reserve record of one asset pair.

    Attributes:
        base_asset: Identity of the base asset
        quote_asset: Identity of the quote asset
        base_reserve: Pool holding of the base asset (u64)
        quote_reserve: Pool holding of the quote asset (u64)
        authority: Entity that created the pool (not required for swaps)
        derivation_nonce: Nonce used to re-derive the pool address (u8, fixed at creation)
        last_update_time: Unix timestamp of the most recent reserve mutation (i64)
    """
    base_asset: AssetId
    quote_asset: AssetId
    base_reserve: Amount
    quote_reserve: Amount
    authority: Identity
    derivation_nonce: int
    last_update_time: int

    def __post_init__(self):
        """Validate field domains."""
        # Normalize identities so equal pools compare (and encode) equal.
        object.__setattr__(self, "base_asset", canonical_identity(self.base_asset, name="base_asset"))
        object.__setattr__(self, "quote_asset", canonical_identity(self.quote_asset, name="quote_asset"))
        object.__setattr__(self, "authority", canonical_identity(self.authority, name="authority"))
        if self.base_asset == self.quote_asset:
            raise ValueError(f"base and quote assets must differ: {self.base_asset}")

        require_u64("base_reserve", self.base_reserve)
        require_u64("quote_reserve", self.quote_reserve)
        require_i64("last_update_time", self.last_update_time)

        nonce = self.derivation_nonce
        if not isinstance(nonce, int) or isinstance(nonce, bool) or not (0 <= nonce <= U8_MAX):
            raise ValueError(f"derivation_nonce must be in [0, {U8_MAX}]: {nonce!r}")

    def reserves_for(self, direction: SwapDirection) -> Tuple[Amount, Amount]:
        """Return (reserve_in, reserve_out) for a swap in `direction`."""
        if direction is SwapDirection.BASE_TO_QUOTE:
            return self.base_reserve, self.quote_reserve
        if direction is SwapDirection.QUOTE_TO_BASE:
            return self.quote_reserve, self.base_reserve
        raise ValueError(f"unknown swap direction: {direction!r}")

    def assets_for(self, direction: SwapDirection) -> Tuple[AssetId, AssetId]:
        """Return (asset_in, asset_out) for a swap in `direction`."""
        if direction is SwapDirection.BASE_TO_QUOTE:
            return self.base_asset, self.quote_asset
        if direction is SwapDirection.QUOTE_TO_BASE:
            return self.quote_asset, self.base_asset
        raise ValueError(f"unknown swap direction: {direction!r}")

    def constant_product(self) -> int:
        return self.base_reserve * self.quote_reserve

    def is_inert(self) -> bool:
        """A pool with an empty reserve rejects every swap."""
        return self.base_reserve == 0 or self.quote_reserve == 0

    def apply_swap(
        self,
        direction: SwapDirection,
        amount_in: Amount,
        amount_out: Amount,
        now: int,
    ) -> "PoolState":
        """
        Apply a validated swap delta and return the new state.

        Both reserves and the timestamp change in one `replace()`; `self` is
        never modified, so a failure leaves no partially updated record.

        Raises:
            MathOverflow: If the receiving reserve would exceed u64
            InsufficientLiquidity: If the paying reserve would go negative
        """
        require_u64("amount_in", amount_in)
        require_u64("amount_out", amount_out)
        require_i64("now", now)

        reserve_in, reserve_out = self.reserves_for(direction)
        new_reserve_in = checked_add(reserve_in, amount_in)
        new_reserve_out = checked_sub(reserve_out, amount_out)

        if direction is SwapDirection.BASE_TO_QUOTE:
            return replace(
                self,
                base_reserve=new_reserve_in,
                quote_reserve=new_reserve_out,
                last_update_time=now,
            )
        return replace(
            self,
            base_reserve=new_reserve_out,
            quote_reserve=new_reserve_in,
            last_update_time=now,
        )

    def __repr__(self) -> str:
        return (
            f"PoolState(assets=({self.base_asset[:10]}..., {self.quote_asset[:10]}...), "
            f"reserves=({self.base_reserve}, {self.quote_reserve}), "
            f"nonce={self.derivation_nonce}, updated={self.last_update_time})"
        )
