# [TESTER] v1

from __future__ import annotations

from fractions import Fraction
from typing import Optional, Tuple

import pytest
from py_ecc.bls import G2Basic

from cpswap.config import SwapConfig
from cpswap.core.types import SwapRequest
from cpswap.errors import ErrorKind, InsufficientLiquidity, PoolExists, PoolNotFound, SlippageExceeded, Unauthorized
from cpswap.integration.authorization import SwapAuthorizer, identity_from_pubkey
from cpswap.integration.clock import FixedClock
from cpswap.integration.derivation import PoolAddressDeriver
from cpswap.integration.notifier import EventLog
from cpswap.integration.swap_service import SwapService
from cpswap.state.custody import AccountFrozen, CustodyLedger, InsufficientBalance
from cpswap.state.layout import decode_pool_account
from cpswap.state.pools import SwapDirection


PROGRAM_ID = "0x" + "ab" * 32
BASE = "0x" + "11" * 32
QUOTE = "0x" + "22" * 32
AUTHORITY = "0x" + "cc" * 32
USER = "0x" + "aa" * 32


def _service(
    *,
    require_signatures: bool = False,
    events: Optional[EventLog] = None,
) -> Tuple[SwapService, CustodyLedger, FixedClock]:
    config = SwapConfig(program_id=PROGRAM_ID, chain_id="cpswap-test", require_signatures=require_signatures)
    deriver = PoolAddressDeriver(config.program_id, config.pool_seed)
    ledger = CustodyLedger(token_verifier=deriver.verify_token)
    clock = FixedClock(1_700_000_000)
    service = SwapService(config, ledger, clock, deriver=deriver, notifier=events)
    ledger.deposit(AUTHORITY, BASE, 1_000_000)
    ledger.deposit(AUTHORITY, QUOTE, 2_000_000)
    return service, ledger, clock


class TestCreatePool:
    def test_moves_seed_deposits_into_pool_custody(self):
        service, ledger, _ = _service()
        pool = service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        address = service.deriver.pool_address(pool)

        assert service.get_pool(BASE, QUOTE) == pool
        assert pool.last_update_time == 1_700_000_000
        assert ledger.balance_of(AUTHORITY, BASE) == 0
        assert ledger.balance_of(address, BASE) == 1_000_000
        assert ledger.balance_of(address, QUOTE) == 2_000_000

    @pytest.mark.parametrize("pair", [(BASE, QUOTE), (QUOTE, BASE)])
    def test_duplicate_pair_rejected(self, pair):
        service, _, _ = _service()
        service.create_pool(BASE, QUOTE, 10, 10, AUTHORITY)
        with pytest.raises(PoolExists):
            service.create_pool(pair[0], pair[1], 10, 10, AUTHORITY)

    def test_identical_assets_rejected(self):
        service, _, _ = _service()
        with pytest.raises(ValueError):
            service.create_pool(BASE, BASE, 10, 10, AUTHORITY)

    def test_unfunded_authority_leaves_no_pool(self):
        service, ledger, _ = _service()
        before = ledger.get_all_balances()
        with pytest.raises(InsufficientBalance):
            service.create_pool(BASE, QUOTE, 1_000_000, 2_000_001, AUTHORITY)
        assert ledger.get_all_balances() == before
        with pytest.raises(PoolNotFound):
            service.get_pool(BASE, QUOTE)

    def test_empty_pool_is_inert(self):
        service, _, _ = _service()
        service.create_pool(BASE, QUOTE, 0, 0, AUTHORITY)
        info = service.pool_info(BASE, QUOTE)
        assert info.price is None
        with pytest.raises(InsufficientLiquidity):
            service.swap(USER, BASE, QUOTE, SwapDirection.BASE_TO_QUOTE, 10, 0)


class TestSwap:
    def test_swap_commits_state(self):
        events = EventLog()
        service, ledger, clock = _service(events=events)
        service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        ledger.deposit(USER, BASE, 5_000)
        clock.advance(60)

        result = service.swap(USER, BASE, QUOTE, "base_to_quote", 1000, 1990)

        assert result.amount_out == 1992
        pool = service.get_pool(BASE, QUOTE)
        assert pool == result.state
        assert (pool.base_reserve, pool.quote_reserve) == (1_001_000, 1_998_008)
        assert pool.last_update_time == 1_700_000_060
        assert ledger.balance_of(USER, QUOTE) == 1992
        assert [e.amount_out for e in events.events] == [1992]

    def test_rejected_swap_changes_nothing(self):
        service, ledger, _ = _service()
        pool = service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        ledger.deposit(USER, BASE, 5_000)
        before = ledger.get_all_balances()

        with pytest.raises(SlippageExceeded):
            service.swap(USER, BASE, QUOTE, SwapDirection.BASE_TO_QUOTE, 1000, 5000)

        assert service.get_pool(BASE, QUOTE) == pool
        assert ledger.get_all_balances() == before

    def test_custody_failure_changes_nothing(self):
        service, ledger, _ = _service()
        pool = service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        ledger.deposit(USER, BASE, 5_000)
        ledger.freeze(USER, QUOTE)
        before = ledger.get_all_balances()

        with pytest.raises(AccountFrozen) as exc:
            service.swap(USER, BASE, QUOTE, SwapDirection.BASE_TO_QUOTE, 1000, 0)

        assert exc.value.kind is ErrorKind.TRANSFER_FAILED
        assert service.get_pool(BASE, QUOTE) == pool
        assert ledger.get_all_balances() == before

    def test_unknown_pool(self):
        service, _, _ = _service()
        with pytest.raises(PoolNotFound):
            service.swap(USER, BASE, QUOTE, SwapDirection.BASE_TO_QUOTE, 1, 0)

    def test_pool_lookup_is_order_sensitive(self):
        service, _, _ = _service()
        service.create_pool(BASE, QUOTE, 10, 10, AUTHORITY)
        with pytest.raises(PoolNotFound):
            service.get_pool(QUOTE, BASE)


class TestSignedSwap:
    def _signed_setup(self):
        service, ledger, _ = _service(require_signatures=True)
        sk = G2Basic.KeyGen(b"\x02" * 32)
        pubkey = "0x" + G2Basic.SkToPk(sk).hex()
        user = identity_from_pubkey(pubkey)
        pool = service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        ledger.deposit(user, BASE, 5_000)
        return service, ledger, sk, pubkey, user, service.deriver.pool_address(pool)

    def test_signed_swap_accepted(self):
        service, ledger, sk, pubkey, user, address = self._signed_setup()
        request = SwapRequest(user=user, direction=SwapDirection.BASE_TO_QUOTE, amount_in=1000, minimum_amount_out=0)
        signature = SwapAuthorizer("cpswap-test").sign(sk, request, address)

        result = service.swap(user, BASE, QUOTE, "base_to_quote", 1000, 0, pubkey=pubkey, signature=signature)

        assert result.amount_out == 1992
        assert ledger.balance_of(user, QUOTE) == 1992

    def test_unsigned_swap_rejected(self):
        service, ledger, _, _, user, _ = self._signed_setup()
        before = ledger.get_all_balances()
        with pytest.raises(Unauthorized):
            service.swap(user, BASE, QUOTE, "base_to_quote", 1000, 0)
        assert ledger.get_all_balances() == before


class TestReadOnlyViews:
    def test_quote_and_price(self):
        service, _, _ = _service()
        service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        assert service.quote(BASE, QUOTE, "base_to_quote", 1000).amount_out == 1992
        assert service.current_price(BASE, QUOTE) == Fraction(2)
        assert service.current_price(BASE, QUOTE, 9, 6) == Fraction(2000)

    def test_pool_info(self):
        service, _, _ = _service()
        pool = service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        info = service.pool_info(BASE, QUOTE)
        assert info.pool == pool
        assert info.address == service.deriver.pool_address(pool)
        assert info.base_custody == (info.address, BASE)
        assert info.quote_custody == (info.address, QUOTE)
        assert info.price == Fraction(2)

    def test_reported_custody_holds_the_reserves(self):
        service, ledger, _ = _service()
        service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        ledger.deposit(USER, QUOTE, 5_000)
        service.swap(USER, BASE, QUOTE, "quote_to_base", 2000, 0)

        info = service.pool_info(BASE, QUOTE)
        assert ledger.balance_of(*info.base_custody) == info.pool.base_reserve == 999_004
        assert ledger.balance_of(*info.quote_custody) == info.pool.quote_reserve == 2_002_000

    def test_pool_record_decodes(self):
        service, _, _ = _service()
        pool = service.create_pool(BASE, QUOTE, 1_000_000, 2_000_000, AUTHORITY)
        assert decode_pool_account(service.pool_record(BASE, QUOTE)) == pool


def test_deriver_must_share_program_id() -> None:
    config = SwapConfig(program_id=PROGRAM_ID)
    with pytest.raises(ValueError):
        SwapService(config, CustodyLedger(), FixedClock(), deriver=PoolAddressDeriver("0x" + "01" * 32))
