# [TESTER] v1

from __future__ import annotations

import pytest

from cpswap.core.lifecycle import initialize_pool
from cpswap.errors import MathOverflow
from cpswap.integration.derivation import PoolAddressDeriver
from cpswap.state.widths import U64_MAX


PROGRAM_ID = "0x" + "ab" * 32
BASE = "0x" + "11" * 32
QUOTE = "0x" + "22" * 32
AUTHORITY = "0x" + "cc" * 32


def test_initialize_pool_records_seed_reserves_and_nonce() -> None:
    deriver = PoolAddressDeriver(PROGRAM_ID)
    pool = initialize_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY, 1_700_000_000, deriver=deriver)

    _, nonce = deriver.find_pool_address(BASE, QUOTE)
    assert pool.base_asset == BASE
    assert pool.quote_asset == QUOTE
    assert (pool.base_reserve, pool.quote_reserve) == (1_000_000, 2_000_000)
    assert pool.authority == AUTHORITY
    assert pool.derivation_nonce == nonce
    assert pool.last_update_time == 1_700_000_000


def test_initialize_pool_canonicalizes_identities() -> None:
    deriver = PoolAddressDeriver(PROGRAM_ID)
    pool = initialize_pool("0X" + "AB" * 32, "cd" * 32, 1, 1, "0x" + "CC" * 32, 0, deriver=deriver)
    assert pool.base_asset == "0x" + "ab" * 32
    assert pool.quote_asset == "0x" + "cd" * 32
    assert pool.authority == AUTHORITY


def test_initialize_pool_rejects_identical_assets() -> None:
    deriver = PoolAddressDeriver(PROGRAM_ID)
    with pytest.raises(ValueError):
        initialize_pool(BASE, "11" * 32, 1, 1, AUTHORITY, 0, deriver=deriver)


def test_initialize_pool_rejects_out_of_range_reserve() -> None:
    deriver = PoolAddressDeriver(PROGRAM_ID)
    with pytest.raises(MathOverflow):
        initialize_pool(BASE, QUOTE, U64_MAX + 1, 1, AUTHORITY, 0, deriver=deriver)


def test_zero_seed_reserves_give_inert_pool() -> None:
    deriver = PoolAddressDeriver(PROGRAM_ID)
    pool = initialize_pool(BASE, QUOTE, 0, 0, AUTHORITY, 0, deriver=deriver)
    assert pool.is_inert()
    assert pool.constant_product() == 0
