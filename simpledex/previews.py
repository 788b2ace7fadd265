"""Swap and liquidity previews for the DEX panels.

A preview turns what the user typed into base units, reads the pair, and
returns everything the panel displays before anything is submitted: the quote,
the exchange rate, the pool ratio, the expected withdrawal, which approvals are
still missing, and the encoded calls to submit. Previews never mutate state.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal

from simpledex.amm.engine import AMMEngine
from simpledex.amm.math import cp_math
from simpledex.amm.pair import PoolState, Side
from simpledex.constants import (
    BPS_DENOMINATOR,
    DEFAULT_APPROVAL_TOKENS,
    QUOTE_DISPLAY_PLACES,
    RATIO_DISPLAY_PLACES,
    SHARE_DECIMALS,
)
from simpledex.encoding import (
    encode_add_liquidity,
    encode_approve,
    encode_remove_liquidity,
    encode_swap,
)
from simpledex.ledger import TokenLedger
from simpledex.units import (
    DECIMAL_HIGH_PREC_CONTEXT,
    format_balance,
    format_fixed,
    format_units,
    parse_units,
)


def default_approval_amount(decimals: int) -> int:
    """Base units of the one-off approval the panels request."""
    return DEFAULT_APPROVAL_TOKENS * 10**decimals


def approval_call(engine: AMMEngine, ledger: TokenLedger) -> tuple[str, str]:
    """Encoded ``approve`` letting the pair spend the default approval amount."""
    return encode_approve(ledger.address, engine.address, default_approval_amount(ledger.decimals))


def _ratio(numerator: Decimal, denominator: Decimal, places: int) -> str:
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return format_fixed(numerator / denominator, places)


@dataclass(frozen=True)
class SwapPreview:
    """What the swap panel shows for one direction and input."""

    side_in: Side
    symbol_in: str
    symbol_out: str
    amount_in: int
    amount_out: int
    # Quoted output with 6 decimals, empty when there is no quote
    output_text: str
    # "1 MTK ≈ 1.818181 sUSDC", None until both sides are known
    rate_text: str | None
    needs_approval: bool
    approval_call: tuple[str, str] | None
    swap_call: tuple[str, str] | None
    balance_in_text: str
    balance_out_text: str

    def flipped(self, engine: AMMEngine, account: str) -> SwapPreview:
        """Reverse the direction, carrying the quoted output over as the new input."""
        return preview_swap(engine, account, self.side_in.other, self.output_text)


def preview_swap(engine: AMMEngine, account: str, side_in: Side, input_text: str) -> SwapPreview:
    """Build the swap panel preview for selling ``input_text`` of ``side_in``.

    An empty pool quotes 0 instead of raising, since the panel renders before
    any liquidity exists.

    Raises:
        InvalidAmount: If input_text is not a valid amount
    """
    ledger_in = engine.ledger(side_in)
    ledger_out = engine.ledger(side_in.other)
    amount_in = parse_units(input_text, ledger_in.decimals)

    amount_out = 0
    if amount_in > 0 and engine.pool_state is PoolState.ACTIVE:
        amount_out = engine.get_swap_amount(ledger_in.address, amount_in)

    output_text = ""
    rate_text = None
    if amount_out:
        out_display = format_units(amount_out, ledger_out.decimals)
        output_text = format_fixed(out_display, QUOTE_DISPLAY_PLACES)
        in_display = format_units(amount_in, ledger_in.decimals)
        # Rate of the output as displayed, not the exact quote
        rate = _ratio(Decimal(output_text), in_display, QUOTE_DISPLAY_PLACES)
        rate_text = f"1 {ledger_in.symbol} ≈ {rate} {ledger_out.symbol}"

    needs_approval = ledger_in.allowance(account, engine.address) < amount_in
    return SwapPreview(
        side_in=side_in,
        symbol_in=ledger_in.symbol,
        symbol_out=ledger_out.symbol,
        amount_in=amount_in,
        amount_out=amount_out,
        output_text=output_text,
        rate_text=rate_text,
        needs_approval=needs_approval,
        approval_call=approval_call(engine, ledger_in) if needs_approval else None,
        swap_call=encode_swap(engine.address, ledger_in.address, amount_in) if amount_in else None,
        balance_in_text=format_balance(ledger_in.balance_of(account), ledger_in.decimals),
        balance_out_text=format_balance(ledger_out.balance_of(account), ledger_out.decimals),
    )


@dataclass(frozen=True)
class LiquidityPreview:
    """What the liquidity panel shows for the current inputs."""

    reserve_a_text: str
    reserve_b_text: str
    # "1 MTK = 2.0000 sUSDC", None while either reserve is empty
    ratio_text: str | None
    amount_a: int
    amount_b: int
    needs_approval_a: bool
    needs_approval_b: bool
    add_call: tuple[str, str] | None
    remove_shares: int
    expected_a: int
    expected_b: int
    expected_a_text: str
    expected_b_text: str
    remove_call: tuple[str, str] | None
    user_shares: int
    user_shares_text: str
    # Share of the pool in percent (basis points / 100)
    user_share_percent: Decimal


def preview_liquidity(
    engine: AMMEngine,
    account: str,
    amount_a_text: str = "",
    amount_b_text: str = "",
    remove_text: str = "",
) -> LiquidityPreview:
    """Build the liquidity panel preview.

    ``remove_text`` is in liquidity-share units, displayed with 18 decimals.
    The expected withdrawal uses the same truncating formula as the engine.

    Raises:
        InvalidAmount: If any text is not a valid amount
    """
    ledger_a = engine.ledger(Side.A)
    ledger_b = engine.ledger(Side.B)
    reserve_a, reserve_b, total_shares = engine.get_reserves()
    user_shares, user_bps = engine.get_user_liquidity(account)

    amount_a = parse_units(amount_a_text, ledger_a.decimals)
    amount_b = parse_units(amount_b_text, ledger_b.decimals)
    remove_shares = parse_units(remove_text, SHARE_DECIMALS)

    ratio_text = None
    if reserve_a > 0 and reserve_b > 0:
        ratio = _ratio(
            format_units(reserve_b, ledger_b.decimals),
            format_units(reserve_a, ledger_a.decimals),
            RATIO_DISPLAY_PLACES,
        )
        ratio_text = f"1 {ledger_a.symbol} = {ratio} {ledger_b.symbol}"

    expected_a = expected_b = 0
    if remove_shares and total_shares > 0:
        expected_a, expected_b = cp_math.withdraw_amounts(
            remove_shares, reserve_a, reserve_b, total_shares
        )

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        share_percent = Decimal(user_bps) * 100 / BPS_DENOMINATOR

    return LiquidityPreview(
        reserve_a_text=format_balance(reserve_a, ledger_a.decimals),
        reserve_b_text=format_balance(reserve_b, ledger_b.decimals),
        ratio_text=ratio_text,
        amount_a=amount_a,
        amount_b=amount_b,
        needs_approval_a=ledger_a.allowance(account, engine.address) < amount_a,
        needs_approval_b=ledger_b.allowance(account, engine.address) < amount_b,
        add_call=(
            encode_add_liquidity(engine.address, amount_a, amount_b)
            if amount_a and amount_b
            else None
        ),
        remove_shares=remove_shares,
        expected_a=expected_a,
        expected_b=expected_b,
        expected_a_text=format_balance(expected_a, ledger_a.decimals),
        expected_b_text=format_balance(expected_b, ledger_b.decimals),
        remove_call=(
            encode_remove_liquidity(engine.address, remove_shares) if remove_shares else None
        ),
        user_shares=user_shares,
        user_shares_text=format_balance(user_shares, SHARE_DECIMALS),
        user_share_percent=share_percent,
    )


__all__ = [
    "SwapPreview",
    "LiquidityPreview",
    "preview_swap",
    "preview_liquidity",
    "default_approval_amount",
    "approval_call",
]
