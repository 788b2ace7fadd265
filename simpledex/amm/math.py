"""Constant-product pair math.

All formulas are pure functions of the reserve snapshot they are given and use
truncating integer division, so a quote computed here is exactly what the engine
will execute against the same reserves.

Swap:      amount_out = (in * m * res_out) / (res_in * 10000 + in * m),  m = 10000 - fee_bps
Deposit:   shares = min(a * T / res_a, b * T / res_b)
Withdraw:  out_x = shares * res_x / T
"""

from __future__ import annotations

from simpledex.constants import BPS_DENOMINATOR
from simpledex.safe_int import S


class ConstantProductMath:
    """Swap and liquidity-share formulas for a two-token pair."""

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = BPS_DENOMINATOR,
    ) -> int:
        """Calculate output amount using constant product formula.

        With the default fee multiplier (no fee) this reduces to
        ``amount_in * reserve_out // (reserve_in + amount_in)``.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: 10000 - fee_bps (10000 means no fee, 9970 is 0.3%)

        Returns:
            Output token amount, 0 if the input or either reserve is 0
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * S(fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).value

    def initial_shares(self, amount_a: int, amount_b: int) -> int:
        """Shares minted by the first deposit into an empty pool.

        The first provider receives as many shares as token A base units
        deposited; ``amount_b`` only sets the opening price.
        """
        _ = amount_b
        return S(amount_a).value

    def proportional_shares(
        self,
        amount_a: int,
        amount_b: int,
        reserve_a: int,
        reserve_b: int,
        total_shares: int,
    ) -> int:
        """Shares a deposit is worth, priced by its scarcer side."""
        shares_a = S(amount_a) * S(total_shares) // S(reserve_a)
        shares_b = S(amount_b) * S(total_shares) // S(reserve_b)
        return shares_a.min(shares_b).value

    def deposit_amounts(
        self,
        shares: int,
        reserve_a: int,
        reserve_b: int,
        total_shares: int,
    ) -> tuple[int, int]:
        """Token amounts that back ``shares`` newly minted shares.

        Rounds up so the pool never mints a share it was not paid for. For
        ``shares`` from ``proportional_shares`` the result never exceeds the
        amounts offered.
        """
        used_a = (S(shares) * S(reserve_a)).ceiling_div(total_shares)
        used_b = (S(shares) * S(reserve_b)).ceiling_div(total_shares)
        return used_a.value, used_b.value

    def withdraw_amounts(
        self,
        shares: int,
        reserve_a: int,
        reserve_b: int,
        total_shares: int,
    ) -> tuple[int, int]:
        """Token amounts paid out for burning ``shares`` (truncating)."""
        out_a = S(shares) * S(reserve_a) // S(total_shares)
        out_b = S(shares) * S(reserve_b) // S(total_shares)
        return out_a.value, out_b.value

    def share_bps(self, shares: int, total_shares: int) -> int:
        """Basis points of the pool owned by ``shares`` (0 for an empty pool)."""
        if total_shares == 0:
            return 0
        return (S(shares) * S(BPS_DENOMINATOR) // S(total_shares)).value

    def ratios_match(self, amount_a: int, amount_b: int, reserve_a: int, reserve_b: int) -> bool:
        """Whether ``amount_a : amount_b`` equals ``reserve_a : reserve_b`` exactly."""
        return S(amount_a) * S(reserve_b) == S(amount_b) * S(reserve_a)


# Singleton instance
cp_math = ConstantProductMath()


__all__ = ["ConstantProductMath", "cp_math"]
