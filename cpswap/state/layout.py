"""
Fixed-width binary record for `PoolState`.

Layout (little-endian, no padding):

    offset  size  field
    0       32    base_asset
    32      32    quote_asset
    64      8     base_reserve       (u64)
    72      8     quote_reserve      (u64)
    80      32    authority
    112     1     derivation_nonce   (u8)
    113     8     last_update_time   (i64)

The account form prepends an 8-byte type discriminator.
"""

from __future__ import annotations

import hashlib
import struct

from .canonical import IDENTITY_BYTES, identity_bytes, identity_from_bytes
from .pools import PoolState


_POOL_STRUCT = struct.Struct("<32s32sQQ32sBq")

FIELD_WIDTHS: tuple[tuple[str, int], ...] = (
    ("base_asset", IDENTITY_BYTES),
    ("quote_asset", IDENTITY_BYTES),
    ("base_reserve", 8),
    ("quote_reserve", 8),
    ("authority", IDENTITY_BYTES),
    ("derivation_nonce", 1),
    ("last_update_time", 8),
)

POOL_RECORD_SIZE = _POOL_STRUCT.size
if POOL_RECORD_SIZE != sum(width for _, width in FIELD_WIDTHS):
    raise RuntimeError(f"pool record layout is padded: {POOL_RECORD_SIZE}")

DISCRIMINATOR_SIZE = 8
POOL_DISCRIMINATOR = hashlib.sha256(b"account:PoolState").digest()[:DISCRIMINATOR_SIZE]
POOL_ACCOUNT_SIZE = DISCRIMINATOR_SIZE + POOL_RECORD_SIZE


def encode_pool(pool: PoolState) -> bytes:
    """Encode the bare pool record (no discriminator)."""
    return _POOL_STRUCT.pack(
        identity_bytes(pool.base_asset, name="base_asset"),
        identity_bytes(pool.quote_asset, name="quote_asset"),
        pool.base_reserve,
        pool.quote_reserve,
        identity_bytes(pool.authority, name="authority"),
        pool.derivation_nonce,
        pool.last_update_time,
    )


def decode_pool(data: bytes) -> PoolState:
    """Decode a bare pool record. Raises ValueError on a size mismatch."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("pool record must be bytes")
    raw = bytes(data)
    if len(raw) != POOL_RECORD_SIZE:
        raise ValueError(f"pool record must be {POOL_RECORD_SIZE} bytes, got {len(raw)}")
    base, quote, base_reserve, quote_reserve, authority, nonce, updated = _POOL_STRUCT.unpack(raw)
    return PoolState(
        base_asset=identity_from_bytes(base, name="base_asset"),
        quote_asset=identity_from_bytes(quote, name="quote_asset"),
        base_reserve=base_reserve,
        quote_reserve=quote_reserve,
        authority=identity_from_bytes(authority, name="authority"),
        derivation_nonce=nonce,
        last_update_time=updated,
    )


def encode_pool_account(pool: PoolState) -> bytes:
    return POOL_DISCRIMINATOR + encode_pool(pool)


def decode_pool_account(data: bytes) -> PoolState:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("pool account must be bytes")
    raw = bytes(data)
    if len(raw) != POOL_ACCOUNT_SIZE:
        raise ValueError(f"pool account must be {POOL_ACCOUNT_SIZE} bytes, got {len(raw)}")
    if raw[:DISCRIMINATOR_SIZE] != POOL_DISCRIMINATOR:
        raise ValueError("pool account discriminator mismatch")
    return decode_pool(raw[DISCRIMINATOR_SIZE:])
