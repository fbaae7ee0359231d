"""
Swap engine: one exact-in swap against one pool.

``SwapEngine.swap(request, pool, now)`` is the single entry point. It:

1. Rejects a zero input (before any reserve is read).
2. Prices the swap with ``compute_output``.
3. Enforces the caller's slippage floor.
4. Computes the next ``PoolState`` (checked reserve update).
5. Moves both legs through the custody collaborator; the pool leg is
   authorized by a token re-derived from the pool's seeds.
6. Emits the swap-completed record (fire-and-forget) and returns
   ``SwapResult(state, event)``.

Steps 1-4 are pure, so every validation failure leaves custody untouched.
The engine holds no locks: the host serializes operations per pool and
commits the returned state together with the custody transfers, or neither.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..state.pools import PoolState, SwapDirection
from ..state.widths import require_i64, require_u64
from ..errors import InvalidAmount, SlippageExceeded
from .interfaces import AddressDeriver, Custody, Notifier
from .reserve_math import compute_output
from .types import SwapEvent, SwapRequest, SwapResult


logger = logging.getLogger(__name__)


def emit_safely(notifier: Optional[Notifier], event: SwapEvent) -> bool:
    """Deliver `event`; a failing notifier is logged and never fails the swap."""
    if notifier is None:
        return False
    try:
        notifier.notify(event)
    except Exception:
        logger.warning("swap notification failed for user %s", event.user, exc_info=True)
        return False
    return True


class SwapEngine:
    def __init__(
        self,
        *,
        custody: Custody,
        deriver: AddressDeriver,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._custody = custody
        self._deriver = deriver
        self._notifier = notifier

    def swap(self, request: SwapRequest, pool: PoolState, now: int) -> SwapResult:
        """Execute `request` against `pool` at time `now`.

        Raises:
            InvalidAmount: `amount_in` is zero.
            InsufficientLiquidity: A reserve is empty or cannot pay `amount_out`.
            SlippageExceeded: Output below `minimum_amount_out`.
            MathOverflow: A checked step left its width.
            CustodyError: A transfer failed (propagated unchanged).
        """
        if request.amount_in == 0:
            raise InvalidAmount("amount_in must be positive")
        require_u64("amount_in", request.amount_in)
        require_u64("minimum_amount_out", request.minimum_amount_out)
        require_i64("now", now)

        reserve_in, reserve_out = pool.reserves_for(request.direction)
        amount_out = compute_output(request.amount_in, reserve_in, reserve_out)

        if amount_out < request.minimum_amount_out:
            raise SlippageExceeded(amount_out, request.minimum_amount_out)

        next_state = pool.apply_swap(request.direction, request.amount_in, amount_out, now)

        asset_in, asset_out = pool.assets_for(request.direction)
        token = self._deriver.derive_and_sign(pool)
        self._custody.transfer(asset_in, request.amount_in, request.user, token.address, request.user)
        self._custody.transfer(asset_out, amount_out, token.address, request.user, token)

        event = SwapEvent(
            user=request.user,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=request.amount_in,
            amount_out=amount_out,
            timestamp=now,
        )
        logger.info(
            "swap %s: in=%d out=%d reserves=(%d, %d)",
            request.direction.value,
            request.amount_in,
            amount_out,
            next_state.base_reserve,
            next_state.quote_reserve,
        )
        emit_safely(self._notifier, event)
        return SwapResult(state=next_state, event=event)

    def swap_base_for_quote(
        self,
        pool: PoolState,
        user: str,
        amount_in: int,
        minimum_amount_out: int,
        now: int,
    ) -> SwapResult:
        request = SwapRequest(
            user=user,
            direction=SwapDirection.BASE_TO_QUOTE,
            amount_in=amount_in,
            minimum_amount_out=minimum_amount_out,
        )
        return self.swap(request, pool, now)

    def swap_quote_for_base(
        self,
        pool: PoolState,
        user: str,
        amount_in: int,
        minimum_amount_out: int,
        now: int,
    ) -> SwapResult:
        request = SwapRequest(
            user=user,
            direction=SwapDirection.QUOTE_TO_BASE,
            amount_in=amount_in,
            minimum_amount_out=minimum_amount_out,
        )
        return self.swap(request, pool, now)
