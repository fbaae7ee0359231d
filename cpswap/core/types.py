"""Data types for the swap engine.

All types are frozen dataclasses (immutable).

Units/conventions:
- amounts are integer base units of their asset (u64),
- timestamps are signed Unix seconds (i64),
- identities are 0x-prefixed 32-byte hex strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..state.pools import PoolState, SwapDirection


@dataclass(frozen=True)
class SwapRequest:
    """One caller's swap, already authorized by the host."""

    user: str
    direction: SwapDirection
    amount_in: int
    minimum_amount_out: int


@dataclass(frozen=True)
class SwapEvent:
    """Swap-completed notification record."""

    user: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int
    timestamp: int


@dataclass(frozen=True)
class SwapResult:
    """Post-state plus the notification record of a completed swap."""

    state: PoolState
    event: SwapEvent

    @property
    def amount_in(self) -> int:
        return self.event.amount_in

    @property
    def amount_out(self) -> int:
        return self.event.amount_out

    @property
    def timestamp(self) -> int:
        return self.event.timestamp


@dataclass(frozen=True)
class AuthorizationToken:
    """Capability to spend from a derived (keyless) pool address.

    The verifier re-derives `address` from `seeds + (nonce,)` under
    `program_id`; no private key exists for it. `tag` binds the token to the
    deriver that issued it, so callers cannot assemble one from public data.
    """

    address: str
    seeds: Tuple[bytes, ...]
    nonce: int
    program_id: str
    tag: bytes = b""


@dataclass(frozen=True)
class SwapQuote:
    """Side-effect-free preview of an exact-in swap."""

    direction: SwapDirection
    amount_in: int
    amount_out: int
    fee_amount: int
    price_impact_bps: int
    reserve_in_after: int
    reserve_out_after: int
