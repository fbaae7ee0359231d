"""Collaborator contracts used by the swap core.

Implementations live outside the core (see `cpswap.integration` and
`cpswap.state.custody` for the in-process reference versions).
"""

from __future__ import annotations

from typing import ContextManager, Protocol, Tuple, Union

from ..state.pools import PoolState
from .types import AuthorizationToken, SwapEvent


class Custody(Protocol):
    def transfer(
        self,
        asset: str,
        amount: int,
        source: str,
        destination: str,
        authorized_by: Union[str, AuthorizationToken],
    ) -> None:
        """Move a balance between custody accounts. Raises `CustodyError` on failure."""


class TransactionalCustody(Custody, Protocol):
    def atomic(self) -> ContextManager[object]:
        """Scope whose transfers are all undone if it raises."""


class AddressDeriver(Protocol):
    def find_pool_address(self, base_asset: str, quote_asset: str) -> Tuple[str, int]: ...

    def pool_address(self, pool: PoolState) -> str: ...

    def derive_and_sign(self, pool: PoolState) -> AuthorizationToken: ...


class Clock(Protocol):
    def now(self) -> int: ...


class Notifier(Protocol):
    def notify(self, event: SwapEvent) -> None: ...
