"""
Deterministic (keyless) address derivation.

A derived address is ``sha256(seed_1 || ... || seed_n || program_id || marker)``
and is only accepted when the digest is *not* a usable ed25519 public key, so
no private key can exist for it. Spending from such an address is authorized
by an `AuthorizationToken`: the pool address re-derived from public inputs,
tagged with an HMAC under a key held only by the issuing deriver.

Pool addresses use the seeds ``[pool_seed, base_asset, quote_asset]`` plus a
one-byte nonce found by searching 255 down to 0.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Optional, Sequence, Tuple

from nacl.bindings import crypto_core_ed25519_is_valid_point

from ..core.types import AuthorizationToken
from ..state.canonical import canonical_identity, domain_sep_bytes, identity_bytes, identity_from_bytes
from ..state.pools import PoolState


logger = logging.getLogger(__name__)

MAX_SEEDS = 16
MAX_SEED_LEN = 32
DERIVED_ADDRESS_MARKER = b"ProgramDerivedAddress"
TOKEN_KEY_BYTES = 32


class InvalidSeeds(ValueError):
    """Raised when seeds are malformed or hash to an on-curve point."""


def _check_seeds(seeds: Sequence[bytes]) -> None:
    if len(seeds) > MAX_SEEDS:
        raise InvalidSeeds(f"at most {MAX_SEEDS} seeds allowed, got {len(seeds)}")
    for i, seed in enumerate(seeds):
        if not isinstance(seed, (bytes, bytearray)):
            raise TypeError(f"seed {i} must be bytes")
        if len(seed) > MAX_SEED_LEN:
            raise InvalidSeeds(f"seed {i} longer than {MAX_SEED_LEN} bytes")


def is_on_curve(candidate: bytes) -> bool:
    return bool(crypto_core_ed25519_is_valid_point(candidate))


def create_address(seeds: Sequence[bytes], program_id: str) -> str:
    """Derive the address for exactly these seeds (nonce included by the caller)."""
    _check_seeds(seeds)
    h = hashlib.sha256()
    for seed in seeds:
        h.update(bytes(seed))
    h.update(identity_bytes(program_id, name="program_id"))
    h.update(DERIVED_ADDRESS_MARKER)
    digest = h.digest()
    if is_on_curve(digest):
        raise InvalidSeeds("derived address is on the ed25519 curve")
    return identity_from_bytes(digest)


def find_address(seeds: Sequence[bytes], program_id: str) -> Tuple[str, int]:
    """Return ``(address, nonce)`` for the highest nonce yielding an off-curve address."""
    seeds = list(seeds)
    for nonce in range(255, -1, -1):
        try:
            address = create_address(seeds + [bytes([nonce])], program_id)
        except InvalidSeeds:
            logger.debug("nonce %d rejected (on curve)", nonce)
            continue
        return address, nonce
    raise InvalidSeeds("no off-curve address for any nonce")


class PoolAddressDeriver:
    """
    Derives pool addresses under one program id and issues the pool's
    spending capability.

    `token_key` authenticates issued tokens; a fresh random key is drawn when
    none is given, so only this instance (and whoever it was handed to)
    can mint or check them.
    """

    def __init__(self, program_id: str, pool_seed: str = "pool", *, token_key: Optional[bytes] = None) -> None:
        self.program_id = canonical_identity(program_id, name="program_id")
        if not isinstance(pool_seed, str) or not pool_seed:
            raise ValueError("pool_seed must be a non-empty string")
        seed = pool_seed.encode("ascii")
        if len(seed) > MAX_SEED_LEN:
            raise ValueError(f"pool_seed longer than {MAX_SEED_LEN} bytes")
        self._pool_seed = seed
        if token_key is None:
            token_key = secrets.token_bytes(TOKEN_KEY_BYTES)
        if not isinstance(token_key, bytes) or len(token_key) < TOKEN_KEY_BYTES:
            raise ValueError(f"token_key must be at least {TOKEN_KEY_BYTES} bytes")
        self._token_key = token_key

    def pool_seeds(self, base_asset: str, quote_asset: str) -> Tuple[bytes, ...]:
        return (
            self._pool_seed,
            identity_bytes(base_asset, name="base_asset"),
            identity_bytes(quote_asset, name="quote_asset"),
        )

    def find_pool_address(self, base_asset: str, quote_asset: str) -> Tuple[str, int]:
        return find_address(self.pool_seeds(base_asset, quote_asset), self.program_id)

    def pool_address(self, pool: PoolState) -> str:
        seeds = self.pool_seeds(pool.base_asset, pool.quote_asset)
        return create_address(seeds + (bytes([pool.derivation_nonce]),), self.program_id)

    def _token_tag(self, address: str, seeds: Sequence[bytes], nonce: int) -> bytes:
        # Seeds are length-prefixed so the concatenation is unambiguous.
        msg = bytearray(domain_sep_bytes("pool_authority"))
        msg += identity_bytes(self.program_id, name="program_id")
        msg += identity_bytes(address, name="address")
        msg += bytes([nonce])
        for seed in seeds:
            msg += bytes([len(seed)]) + seed
        return hmac.new(self._token_key, bytes(msg), hashlib.sha256).digest()

    def derive_and_sign(self, pool: PoolState) -> AuthorizationToken:
        """Capability for the pool to authorize its own outbound transfers."""
        address = self.pool_address(pool)
        seeds = self.pool_seeds(pool.base_asset, pool.quote_asset)
        return AuthorizationToken(
            address=address,
            seeds=seeds,
            nonce=pool.derivation_nonce,
            program_id=self.program_id,
            tag=self._token_tag(address, seeds, pool.derivation_nonce),
        )

    def verify_token(self, token: object, owner: str) -> bool:
        """True iff `token` was issued here and re-derives to `owner`."""
        if not isinstance(token, AuthorizationToken):
            return False
        if token.program_id != self.program_id or token.address != owner:
            return False
        if not token.seeds or token.seeds[0] != self._pool_seed:
            return False
        if not all(isinstance(seed, bytes) for seed in token.seeds):
            return False
        if not isinstance(token.nonce, int) or not (0 <= token.nonce <= 255):
            return False
        if not isinstance(token.tag, bytes):
            return False
        try:
            expected = self._token_tag(token.address, token.seeds, token.nonce)
            derived = create_address(tuple(token.seeds) + (bytes([token.nonce]),), self.program_id)
        except (InvalidSeeds, TypeError, ValueError):
            return False
        if not hmac.compare_digest(token.tag, expected):
            logger.warning("rejected unissued authorization token for %s", owner)
            return False
        return derived == owner
