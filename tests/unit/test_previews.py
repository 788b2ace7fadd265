"""Tests for swap and liquidity panel previews."""

from decimal import Decimal

import pytest

from simpledex.amm.engine import AMMEngine
from simpledex.amm.pair import Side
from simpledex.encoding import encode_approve, encode_remove_liquidity, encode_swap
from simpledex.errors import InvalidAmount
from simpledex.previews import default_approval_amount, preview_liquidity, preview_swap
from tests.helpers import ALICE, CAROL, DEPLOYER, ONE_A, ONE_B, SEED_A


class TestSwapPreview:
    def test_quote_and_rate(self, seeded_dex: AMMEngine):
        preview = preview_swap(seeded_dex, ALICE, Side.A, "100")

        assert preview.amount_in == 100 * ONE_A
        assert preview.amount_out == 181_818_181
        assert preview.output_text == "181.818181"
        assert preview.rate_text == "1 MTK ≈ 1.818182 sUSDC"
        assert (preview.symbol_in, preview.symbol_out) == ("MTK", "sUSDC")
        assert preview.balance_in_text == "10000.0000"
        assert preview.balance_out_text == "20000.0000"

    def test_rate_uses_displayed_output(self, seeded_dex: AMMEngine):
        """0.01 sUSDC buys 0.004999975... MTK, shown as 0.005000."""
        preview = preview_swap(seeded_dex, ALICE, Side.B, "0.01")

        assert preview.output_text == "0.005000"
        assert preview.rate_text == "1 sUSDC ≈ 0.500000 MTK"

    def test_matches_engine_quote(self, seeded_dex: AMMEngine):
        preview = preview_swap(seeded_dex, ALICE, Side.B, "37.5")
        assert preview.amount_out == seeded_dex.get_swap_amount(seeded_dex.token_b, 37_500_000)

    def test_approved_account_gets_swap_call_only(self, seeded_dex: AMMEngine):
        preview = preview_swap(seeded_dex, ALICE, Side.A, "1")

        assert not preview.needs_approval
        assert preview.approval_call is None
        assert preview.swap_call == encode_swap(seeded_dex.address, seeded_dex.token_a, ONE_A)

    def test_missing_approval_gets_approve_call(self, seeded_dex: AMMEngine):
        preview = preview_swap(seeded_dex, CAROL, Side.A, "1")

        assert preview.needs_approval
        assert preview.approval_call == encode_approve(
            seeded_dex.token_a, seeded_dex.address, default_approval_amount(18)
        )
        assert preview.balance_in_text == "0.0"

    def test_empty_input(self, seeded_dex: AMMEngine):
        preview = preview_swap(seeded_dex, ALICE, Side.A, "")

        assert preview.amount_in == 0
        assert preview.output_text == ""
        assert preview.rate_text is None
        assert preview.swap_call is None
        assert not preview.needs_approval

    def test_empty_pool_quotes_nothing(self, dex: AMMEngine):
        preview = preview_swap(dex, ALICE, Side.A, "5")
        assert preview.amount_out == 0
        assert preview.output_text == ""
        assert preview.rate_text is None

    def test_flip_carries_output_over(self, seeded_dex: AMMEngine):
        flipped = preview_swap(seeded_dex, ALICE, Side.A, "100").flipped(seeded_dex, ALICE)

        assert flipped.side_in is Side.B
        assert flipped.amount_in == 181_818_181
        assert flipped.symbol_in == "sUSDC"

    def test_invalid_input(self, seeded_dex: AMMEngine):
        with pytest.raises(InvalidAmount):
            preview_swap(seeded_dex, ALICE, Side.A, "ten")

    def test_preview_does_not_mutate(self, seeded_dex: AMMEngine):
        before = seeded_dex.get_reserves()
        preview_swap(seeded_dex, ALICE, Side.A, "100")
        assert seeded_dex.get_reserves() == before


class TestLiquidityPreview:
    def test_pool_summary(self, seeded_dex: AMMEngine):
        preview = preview_liquidity(seeded_dex, DEPLOYER)

        assert preview.reserve_a_text == "1000.0000"
        assert preview.reserve_b_text == "2000.0000"
        assert preview.ratio_text == "1 MTK = 2.0000 sUSDC"
        assert preview.user_shares == SEED_A
        assert preview.user_shares_text == "1000.0000"
        assert preview.user_share_percent == Decimal(100)

    def test_deposit_inputs(self, seeded_dex: AMMEngine):
        preview = preview_liquidity(seeded_dex, ALICE, "10", "20")

        assert (preview.amount_a, preview.amount_b) == (10 * ONE_A, 20 * ONE_B)
        assert not preview.needs_approval_a and not preview.needs_approval_b
        assert preview.add_call is not None
        assert preview.add_call[0] == seeded_dex.address

    def test_deposit_needs_both_amounts(self, seeded_dex: AMMEngine):
        assert preview_liquidity(seeded_dex, ALICE, "10", "").add_call is None

    def test_deposit_missing_approvals(self, seeded_dex: AMMEngine):
        preview = preview_liquidity(seeded_dex, CAROL, "1", "1")
        assert preview.needs_approval_a and preview.needs_approval_b

    def test_expected_withdrawal(self, seeded_dex: AMMEngine):
        preview = preview_liquidity(seeded_dex, DEPLOYER, remove_text="500")

        assert preview.remove_shares == 500 * ONE_A
        assert (preview.expected_a, preview.expected_b) == (500 * ONE_A, 1000 * ONE_B)
        assert (preview.expected_a_text, preview.expected_b_text) == ("500.0000", "1000.0000")
        assert preview.remove_call == encode_remove_liquidity(seeded_dex.address, 500 * ONE_A)

    def test_expected_withdrawal_matches_engine(self, seeded_dex: AMMEngine):
        seeded_dex.swap(ALICE, seeded_dex.token_a, 100 * ONE_A)
        preview = preview_liquidity(seeded_dex, DEPLOYER, remove_text="1")

        result = seeded_dex.remove_liquidity(DEPLOYER, ONE_A)

        assert (preview.expected_a, preview.expected_b) == (result.amount_a, result.amount_b)

    def test_partial_share_percent(self, seeded_dex: AMMEngine):
        seeded_dex.add_liquidity(ALICE, 100 * ONE_A, 200 * ONE_B)
        assert preview_liquidity(seeded_dex, ALICE).user_share_percent == Decimal("9.09")

    def test_empty_pool(self, dex: AMMEngine):
        preview = preview_liquidity(dex, CAROL, remove_text="1")

        assert preview.ratio_text is None
        assert preview.reserve_a_text == "0.0"
        assert (preview.expected_a, preview.expected_b) == (0, 0)
        assert preview.user_shares_text == "0.0"
        assert preview.user_share_percent == 0
