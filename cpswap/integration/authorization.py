"""
Caller identity and swap-request signatures (BLS12-381, `py_ecc`).

Signing scheme:
    payload = canonical_json_bytes({pool, user, direction, amount_in, minimum_amount_out})
    msg     = sha256(domain_sep(f"swap_request_sig:{chain_id}", v1) || payload)
    sig     = G2Basic.Sign(sk, msg)

An identity is the 32-byte hash of the signer's 48-byte public key, so the
request's `user` field binds to exactly one key.
"""

from __future__ import annotations

import hashlib
import re
from typing import Optional

from py_ecc.bls import G2Basic

from ..core.types import SwapRequest
from ..errors import Unauthorized
from ..state.canonical import canonical_identity, canonical_json_bytes, domain_sep_bytes, sha256_hex


PUBKEY_BYTES = 48
SIGNATURE_BYTES = 96

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]+$")


def _hex_to_bytes_allow_0x(hex_str: str, *, name: str, expected_nbytes: Optional[int] = None) -> bytes:
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a string")
    s = hex_str[2:] if hex_str.startswith("0x") else hex_str
    if not s:
        raise ValueError(f"{name} must be non-empty hex")
    if expected_nbytes is not None and len(s) != 2 * expected_nbytes:
        raise ValueError(f"{name} must be {expected_nbytes} bytes (hex length {2 * expected_nbytes})")
    if len(s) % 2 != 0:
        raise ValueError(f"{name} must have an even number of hex chars")
    if not _HEX_CHARS_RE.fullmatch(s):
        raise ValueError(f"{name} must be valid hex")
    return bytes.fromhex(s)


def identity_from_pubkey(pubkey_hex: str) -> str:
    """Map a 48-byte BLS public key to its 32-byte identity."""
    pubkey = _hex_to_bytes_allow_0x(pubkey_hex, name="pubkey", expected_nbytes=PUBKEY_BYTES)
    return sha256_hex(domain_sep_bytes("identity") + pubkey)


class SwapAuthorizer:
    """Signs and verifies swap requests for one chain/deployment."""

    def __init__(self, chain_id: str) -> None:
        if not isinstance(chain_id, str) or not chain_id:
            raise ValueError("chain_id must be a non-empty string")
        self.chain_id = chain_id

    def signing_payload(self, request: SwapRequest, pool_address: str) -> bytes:
        return canonical_json_bytes(
            {
                "pool": canonical_identity(pool_address, name="pool_address"),
                "user": canonical_identity(request.user, name="user"),
                "direction": request.direction.value,
                "amount_in": request.amount_in,
                "minimum_amount_out": request.minimum_amount_out,
            }
        )

    def message_hash(self, payload: bytes) -> bytes:
        msg = domain_sep_bytes(f"swap_request_sig:{self.chain_id}", version=1) + payload
        return hashlib.sha256(msg).digest()

    def sign(self, secret_key: int, request: SwapRequest, pool_address: str) -> str:
        payload = self.signing_payload(request, pool_address)
        return "0x" + G2Basic.Sign(secret_key, self.message_hash(payload)).hex()

    def verify(
        self,
        request: SwapRequest,
        pool_address: str,
        *,
        pubkey_hex: Optional[str],
        signature_hex: Optional[str],
    ) -> str:
        """
        Check that `request` was signed by the key behind `request.user`.

        Returns:
            The verified identity.

        Raises:
            Unauthorized: Missing/malformed key or signature, wrong signer, or bad signature.
        """
        if pubkey_hex is None or signature_hex is None:
            raise Unauthorized("missing request signature")
        try:
            pubkey = _hex_to_bytes_allow_0x(pubkey_hex, name="pubkey", expected_nbytes=PUBKEY_BYTES)
            signature = _hex_to_bytes_allow_0x(signature_hex, name="signature", expected_nbytes=SIGNATURE_BYTES)
        except (TypeError, ValueError) as exc:
            raise Unauthorized(str(exc)) from exc

        identity = identity_from_pubkey(pubkey_hex)
        if identity != canonical_identity(request.user, name="user"):
            raise Unauthorized("signer does not match request user")

        msg_hash = self.message_hash(self.signing_payload(request, pool_address))
        try:
            ok = bool(G2Basic.Verify(pubkey, msg_hash, signature))
        except Exception as exc:
            raise Unauthorized(f"signature verification error: {exc}") from exc
        if not ok:
            raise Unauthorized("invalid request signature")
        return identity
