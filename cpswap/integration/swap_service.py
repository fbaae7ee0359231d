"""
In-process host for constant-product pools.

This is an imperative-shell wrapper around the functional core:
- Keeps one `PoolState` per asset pair and commits a new one only after the
  engine (and its custody transfers) fully succeeded.
- Serializes every operation with a single lock and runs it inside
  `custody.atomic()`, standing in for the ledger's commit-or-nothing
  transaction.
- Optionally verifies per-request BLS signatures.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Optional, Tuple, Union

from ..config import SwapConfig
from ..core.engine import SwapEngine
from ..core.interfaces import Clock, Notifier, TransactionalCustody
from ..core.lifecycle import initialize_pool
from ..core.quotes import quote_exact_in, spot_price
from ..core.types import SwapQuote, SwapRequest, SwapResult
from ..errors import PoolExists, PoolNotFound, SwapError
from ..state.canonical import canonical_identity
from ..state.layout import encode_pool_account
from ..state.pools import PoolState, SwapDirection
from .authorization import SwapAuthorizer
from .derivation import PoolAddressDeriver


logger = logging.getLogger(__name__)

PairKey = Tuple[str, str]
# Custody accounts are addressed by (owner, asset), as in the ledger.
CustodyKey = Tuple[str, str]


@dataclass(frozen=True)
class PoolInfo:
    pool: PoolState
    address: str
    base_custody: CustodyKey
    quote_custody: CustodyKey
    price: Optional[Fraction]


class SwapService:
    def __init__(
        self,
        config: SwapConfig,
        custody: TransactionalCustody,
        clock: Clock,
        *,
        deriver: Optional[PoolAddressDeriver] = None,
        notifier: Optional[Notifier] = None,
        authorizer: Optional[SwapAuthorizer] = None,
    ) -> None:
        self._config = config
        self._custody = custody
        self._clock = clock
        self._deriver = deriver or PoolAddressDeriver(config.program_id, config.pool_seed)
        if self._deriver.program_id != config.program_id:
            raise ValueError("deriver program_id does not match config")
        self._authorizer = authorizer or SwapAuthorizer(config.chain_id)
        self._engine = SwapEngine(custody=custody, deriver=self._deriver, notifier=notifier)
        self._pools: Dict[PairKey, PoolState] = {}
        self._lock = threading.RLock()

    @property
    def deriver(self) -> PoolAddressDeriver:
        return self._deriver

    @staticmethod
    def _key(base_asset: str, quote_asset: str) -> PairKey:
        return (
            canonical_identity(base_asset, name="base_asset"),
            canonical_identity(quote_asset, name="quote_asset"),
        )

    def create_pool(
        self,
        base_asset: str,
        quote_asset: str,
        initial_base: int,
        initial_quote: int,
        authority: str,
    ) -> PoolState:
        """Create a pool and move the seed deposits from `authority` into pool custody."""
        key = self._key(base_asset, quote_asset)
        authority = canonical_identity(authority, name="authority")
        with self._lock:
            if key in self._pools or (key[1], key[0]) in self._pools:
                raise PoolExists(f"pool already exists for {key[0]}/{key[1]}")
            pool = initialize_pool(
                key[0],
                key[1],
                initial_base,
                initial_quote,
                authority,
                self._clock.now(),
                deriver=self._deriver,
            )
            address = self._deriver.pool_address(pool)
            with self._custody.atomic():
                self._custody.transfer(pool.base_asset, initial_base, authority, address, authority)
                self._custody.transfer(pool.quote_asset, initial_quote, authority, address, authority)
            self._pools[key] = pool
            return pool

    def get_pool(self, base_asset: str, quote_asset: str) -> PoolState:
        key = self._key(base_asset, quote_asset)
        with self._lock:
            pool = self._pools.get(key)
        if pool is None:
            raise PoolNotFound(f"no pool for {key[0]}/{key[1]}")
        return pool

    def swap(
        self,
        user: str,
        base_asset: str,
        quote_asset: str,
        direction: Union[SwapDirection, str],
        amount_in: int,
        minimum_amount_out: int,
        *,
        pubkey: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> SwapResult:
        """
        Run one swap and commit the resulting pool state.

        Raises:
            PoolNotFound: No pool for the pair
            Unauthorized: Signatures are required and missing/invalid
            SwapError: Any engine or custody failure (state and balances unchanged)
        """
        key = self._key(base_asset, quote_asset)
        request = SwapRequest(
            user=canonical_identity(user, name="user"),
            direction=SwapDirection(direction),
            amount_in=amount_in,
            minimum_amount_out=minimum_amount_out,
        )
        with self._lock:
            pool = self._pools.get(key)
            if pool is None:
                raise PoolNotFound(f"no pool for {key[0]}/{key[1]}")
            try:
                if self._config.require_signatures:
                    self._authorizer.verify(
                        request,
                        self._deriver.pool_address(pool),
                        pubkey_hex=pubkey,
                        signature_hex=signature,
                    )
                with self._custody.atomic():
                    result = self._engine.swap(request, pool, self._clock.now())
            except SwapError as exc:
                logger.info("swap rejected (%s): %s", exc.kind.value, exc)
                raise
            self._pools[key] = result.state
            return result

    def quote(
        self,
        base_asset: str,
        quote_asset: str,
        direction: Union[SwapDirection, str],
        amount_in: int,
    ) -> SwapQuote:
        return quote_exact_in(self.get_pool(base_asset, quote_asset), SwapDirection(direction), amount_in)

    def current_price(
        self,
        base_asset: str,
        quote_asset: str,
        base_decimals: int = 0,
        quote_decimals: int = 0,
    ) -> Fraction:
        return spot_price(self.get_pool(base_asset, quote_asset), base_decimals, quote_decimals)

    def pool_info(self, base_asset: str, quote_asset: str) -> PoolInfo:
        pool = self.get_pool(base_asset, quote_asset)
        address = self._deriver.pool_address(pool)
        return PoolInfo(
            pool=pool,
            address=address,
            base_custody=(address, pool.base_asset),
            quote_custody=(address, pool.quote_asset),
            price=None if pool.is_inert() else spot_price(pool),
        )

    def pool_record(self, base_asset: str, quote_asset: str) -> bytes:
        """The pool's persisted account bytes."""
        return encode_pool_account(self.get_pool(base_asset, quote_asset))
