"""
In-memory custody ledger.

Reference implementation of the custody/transfer collaborator. Balances are
held per custody account, keyed by (owner, asset), the way associated token
accounts are addressed by owner and mint.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Tuple, Union

from ..errors import CustodyError


logger = logging.getLogger(__name__)

# Type aliases
Identity = str  # 32-byte hex string (0x...)
AssetId = str  # 32-byte hex string (0x...)
Amount = int  # Non-negative integer

# Verifies that a capability token authorizes spending from `owner`.
TokenVerifier = Callable[[object, Identity], bool]


class InsufficientBalance(CustodyError):
    """Raised when the source account cannot cover a transfer."""


class AccountFrozen(CustodyError):
    """Raised when either side of a transfer is frozen."""


class UnauthorizedTransfer(CustodyError):
    """Raised when the presented authority cannot move funds from the source."""


class CustodyLedger:
    """
    Deterministic balance table mapping (owner, asset) -> amount.

    Note: balances are stored in a plain dict. Do not rely on dict iteration
    order; sort keys explicitly at serialization boundaries.
    """

    def __init__(self, token_verifier: Optional[TokenVerifier] = None):
        self._balances: Dict[Tuple[Identity, AssetId], Amount] = {}
        self._frozen: set[Tuple[Identity, AssetId]] = set()
        self._token_verifier = token_verifier

    def balance_of(self, owner: Identity, asset: AssetId) -> Amount:
        """Get balance for (owner, asset). Returns 0 if not found."""
        return self._balances.get((owner, asset), 0)

    def _set(self, owner: Identity, asset: AssetId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((owner, asset), None)
        else:
            self._balances[(owner, asset)] = amount

    def deposit(self, owner: Identity, asset: AssetId, amount: Amount) -> None:
        """Credit an account from outside the ledger (minting/funding)."""
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"Deposit must be a non-negative int: {amount!r}")
        self._set(owner, asset, self.balance_of(owner, asset) + amount)

    def freeze(self, owner: Identity, asset: AssetId) -> None:
        self._frozen.add((owner, asset))

    def thaw(self, owner: Identity, asset: AssetId) -> None:
        self._frozen.discard((owner, asset))

    def is_frozen(self, owner: Identity, asset: AssetId) -> bool:
        return (owner, asset) in self._frozen

    def _is_authorized(self, source: Identity, authorized_by: Union[Identity, object]) -> bool:
        if isinstance(authorized_by, str):
            return authorized_by == source
        if self._token_verifier is None:
            return False
        return bool(self._token_verifier(authorized_by, source))

    def transfer(
        self,
        asset: AssetId,
        amount: Amount,
        source: Identity,
        destination: Identity,
        authorized_by: Union[Identity, object],
    ) -> None:
        """
        Move `amount` of `asset` from `source` to `destination`.

        Raises:
            UnauthorizedTransfer: If `authorized_by` cannot spend from `source`
            AccountFrozen: If either account is frozen
            InsufficientBalance: If `source` holds less than `amount`
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"Transfer amount must be a non-negative int: {amount!r}")
        if not self._is_authorized(source, authorized_by):
            raise UnauthorizedTransfer(f"{source} did not authorize transfer of {asset}")
        if self.is_frozen(source, asset) or self.is_frozen(destination, asset):
            raise AccountFrozen(f"frozen account in transfer of {asset}")

        current = self.balance_of(source, asset)
        if current < amount:
            raise InsufficientBalance(f"Insufficient balance: {current} < {amount}")
        if source == destination:
            return
        self._set(source, asset, current - amount)
        self._set(destination, asset, self.balance_of(destination, asset) + amount)

    @contextmanager
    def atomic(self) -> Iterator["CustodyLedger"]:
        """
        Commit-or-nothing scope: balances are restored if the block raises.
        """
        snapshot = dict(self._balances)
        try:
            yield self
        except BaseException:
            self._balances = snapshot
            logger.debug("custody transaction rolled back")
            raise

    def get_all_balances(self) -> Dict[Tuple[Identity, AssetId], Amount]:
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"CustodyLedger({len(self._balances)} entries)"
