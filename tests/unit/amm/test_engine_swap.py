"""Tests for AMMEngine quotes and swaps."""

import pytest

from simpledex.amm.engine import AMMEngine
from simpledex.amm.pair import Side
from simpledex.config import DexConfig
from simpledex.deployment import deploy
from simpledex.errors import (
    EmptyPool,
    InsufficientAllowance,
    InsufficientBalance,
    InsufficientReserve,
    SlippageExceeded,
    UnknownToken,
    ZeroAmount,
)
from tests.helpers import ALICE, BOB, CAROL, DEPLOYER, ONE_A, ONE_B, SEED_A, SEED_B
from tests.helpers.factories import InterleavingLock, approve_pair, fund, pair_balances


class TestGetSwapAmount:
    """Tests for the read-only quote."""

    def test_worked_example(self, seeded_dex: AMMEngine):
        assert seeded_dex.get_swap_amount(seeded_dex.token_a, 100 * ONE_A) == 181_818_181

    def test_quote_b_to_a(self, seeded_dex: AMMEngine):
        expected = (100 * ONE_B * SEED_A) // (SEED_B + 100 * ONE_B)
        assert seeded_dex.get_swap_amount(seeded_dex.token_b, 100 * ONE_B) == expected

    def test_quote_accepts_mixed_case_address(self, seeded_dex: AMMEngine):
        token = "0x" + seeded_dex.token_a[2:].upper()
        assert seeded_dex.get_swap_amount(token, 100 * ONE_A) == 181_818_181

    def test_zero_input_quotes_zero(self, seeded_dex: AMMEngine):
        assert seeded_dex.get_swap_amount(seeded_dex.token_a, 0) == 0

    def test_empty_pool_raises(self, dex: AMMEngine):
        with pytest.raises(EmptyPool):
            dex.get_swap_amount(dex.token_a, ONE_A)

    def test_unknown_token_raises(self, seeded_dex: AMMEngine):
        with pytest.raises(UnknownToken):
            seeded_dex.get_swap_amount("0x" + "99" * 20, ONE_A)

    def test_quote_does_not_mutate(self, seeded_dex: AMMEngine):
        before = seeded_dex.get_reserves()
        seeded_dex.get_swap_amount(seeded_dex.token_a, 100 * ONE_A)
        assert seeded_dex.get_reserves() == before


class TestSwap:
    """Tests for the state-changing swap."""

    def test_swap_a_for_b(self, deployment, seeded_dex: AMMEngine):
        token_a, token_b = deployment.token_a, deployment.token_b
        a_before, b_before = token_a.balance_of(ALICE), token_b.balance_of(ALICE)

        result = seeded_dex.swap(ALICE, seeded_dex.token_a, 100 * ONE_A)

        assert result.amount_out == 181_818_181
        assert result.token_in == seeded_dex.token_a
        assert result.token_out == seeded_dex.token_b
        assert token_a.balance_of(ALICE) == a_before - 100 * ONE_A
        assert token_b.balance_of(ALICE) == b_before + 181_818_181
        assert seeded_dex.get_reserves() == (SEED_A + 100 * ONE_A, SEED_B - 181_818_181, SEED_A)
        assert (result.reserve_a, result.reserve_b) == seeded_dex.get_reserves()[:2]

    def test_swap_uses_pre_trade_reserves(self, seeded_dex: AMMEngine):
        quote = seeded_dex.get_swap_amount(seeded_dex.token_b, 50 * ONE_B)
        result = seeded_dex.swap(ALICE, seeded_dex.token_b, 50 * ONE_B)
        assert result.amount_out == quote

    def test_swap_consumes_allowance(self, deployment, seeded_dex: AMMEngine):
        token_a = deployment.token_a
        token_a.approve(ALICE, seeded_dex.address, 150 * ONE_A)

        seeded_dex.swap(ALICE, seeded_dex.token_a, 100 * ONE_A)

        assert token_a.allowance(ALICE, seeded_dex.address) == 50 * ONE_A

    def test_reserves_match_pair_balances(self, deployment, seeded_dex: AMMEngine):
        seeded_dex.swap(ALICE, seeded_dex.token_a, 100 * ONE_A)
        seeded_dex.swap(ALICE, seeded_dex.token_b, 300 * ONE_B)
        assert pair_balances(deployment) == seeded_dex.get_reserves()[:2]

    def test_zero_input_rejected(self, seeded_dex: AMMEngine):
        with pytest.raises(ZeroAmount):
            seeded_dex.swap(ALICE, seeded_dex.token_a, 0)

    def test_dust_input_rejected(self, seeded_dex: AMMEngine):
        """1 wei of MTK buys less than one base unit of sUSDC."""
        with pytest.raises(ZeroAmount):
            seeded_dex.swap(ALICE, seeded_dex.token_a, 1)

    def test_empty_pool_rejected(self, dex: AMMEngine):
        with pytest.raises(EmptyPool):
            dex.swap(ALICE, dex.token_a, ONE_A)

    def test_insufficient_allowance(self, deployment, seeded_dex: AMMEngine):
        deployment.token_a.approve(ALICE, seeded_dex.address, ONE_A)
        before = seeded_dex.get_reserves()

        with pytest.raises(InsufficientAllowance):
            seeded_dex.swap(ALICE, seeded_dex.token_a, 2 * ONE_A)

        assert seeded_dex.get_reserves() == before
        assert deployment.token_a.allowance(ALICE, seeded_dex.address) == ONE_A

    def test_insufficient_balance(self, deployment, seeded_dex: AMMEngine):
        approve_pair(deployment, CAROL)
        fund(deployment, CAROL, amount_a=ONE_A)

        with pytest.raises(InsufficientBalance):
            seeded_dex.swap(CAROL, seeded_dex.token_a, 2 * ONE_A)

        assert deployment.token_a.balance_of(CAROL) == ONE_A

    def test_slippage_guard(self, seeded_dex: AMMEngine):
        with pytest.raises(SlippageExceeded):
            seeded_dex.swap(ALICE, seeded_dex.token_a, 100 * ONE_A, min_amount_out=181_818_182)

        result = seeded_dex.swap(
            ALICE, seeded_dex.token_a, 100 * ONE_A, min_amount_out=181_818_181
        )
        assert result.amount_out == 181_818_181

    def test_drain_guard(self, seeded_dex: AMMEngine, monkeypatch):
        """A quote that would empty the output reserve is refused."""
        monkeypatch.setattr(
            "simpledex.amm.engine.cp_math.get_amount_out",
            lambda amount_in, reserve_in, reserve_out, fee_multiplier: reserve_out,
        )
        before = seeded_dex.get_reserves()

        with pytest.raises(InsufficientReserve):
            seeded_dex.swap(ALICE, seeded_dex.token_a, ONE_A)

        assert seeded_dex.get_reserves() == before

    def test_unknown_token_rejected(self, seeded_dex: AMMEngine):
        with pytest.raises(UnknownToken):
            seeded_dex.swap(ALICE, "0x" + "99" * 20, ONE_A)


class TestSwapRollback:
    """A failure part-way through a swap leaves every ledger untouched."""

    def test_failed_payout_restores_input_transfer(
        self, deployment, seeded_dex: AMMEngine, monkeypatch
    ):
        token_a = deployment.token_a
        a_before = token_a.balance_of(ALICE)
        allowance_before = token_a.allowance(ALICE, seeded_dex.address)
        reserves_before = seeded_dex.get_reserves()

        def boom(*args, **kwargs):
            raise RuntimeError("payout failed")

        monkeypatch.setattr(seeded_dex.ledger(Side.B), "transfer", boom)

        with pytest.raises(RuntimeError):
            seeded_dex.swap(ALICE, seeded_dex.token_a, 100 * ONE_A)

        assert token_a.balance_of(ALICE) == a_before
        assert token_a.allowance(ALICE, seeded_dex.address) == allowance_before
        assert seeded_dex.get_reserves() == reserves_before
        assert token_a.balance_of(seeded_dex.address) == reserves_before[0]


class TestSwapResultSnapshot:
    """A result describes its own transaction even if another write follows at once."""

    def test_result_ignores_later_swap(self, seeded_dex: AMMEngine):
        seeded_dex.lock = InterleavingLock(
            lambda: seeded_dex.swap(BOB, seeded_dex.token_b, 500 * ONE_B)
        )

        result = seeded_dex.swap(ALICE, seeded_dex.token_a, 100 * ONE_A)

        assert (result.reserve_a, result.reserve_b) == (
            SEED_A + 100 * ONE_A,
            SEED_B - 181_818_181,
        )
        assert seeded_dex.get_reserves()[1] == SEED_B - 181_818_181 + 500 * ONE_B


class TestSwapWithFee:
    """Tests for a pair configured with a 0.3% fee."""

    @pytest.fixture
    def fee_dex(self) -> AMMEngine:
        deployment = deploy(DexConfig(fee_bps=30))
        approve_pair(deployment, DEPLOYER)
        deployment.dex.add_liquidity(DEPLOYER, SEED_A, SEED_B)
        return deployment.dex

    def test_fee_lowers_output(self, fee_dex: AMMEngine):
        amount_in = 100 * ONE_A
        expected = (amount_in * 9970 * SEED_B) // (SEED_A * 10_000 + amount_in * 9970)
        assert fee_dex.get_swap_amount(fee_dex.token_a, amount_in) == expected
        assert expected < 181_818_181

    def test_fee_stays_in_reserves(self, fee_dex: AMMEngine):
        k_before = SEED_A * SEED_B
        fee_dex.swap(DEPLOYER, fee_dex.token_a, 100 * ONE_A)
        reserve_a, reserve_b, _ = fee_dex.get_reserves()
        assert reserve_a == SEED_A + 100 * ONE_A
        assert reserve_a * reserve_b > k_before
