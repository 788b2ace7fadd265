"""Conversion between base units and decimal display amounts.

The engine only ever sees base-unit integers. These helpers do the
decimal-aware parsing and formatting the panels perform before and after each
call. All Decimal work runs in a 78-digit context so uint256 values stay exact.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from simpledex.constants import BALANCE_DISPLAY_PLACES
from simpledex.errors import InvalidAmount
from simpledex.safe_int import UINT256_MAX

# 78 digits of precision, enough for uint256 values (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)


def parse_units(text: str, decimals: int) -> int:
    """Parse a decimal display string into base units.

    Fraction digits beyond ``decimals`` are rounded half-up. An empty or
    blank string parses to 0.

    Raises:
        InvalidAmount: If text is not a non-negative decimal number, or the
            result does not fit in uint256
    """
    cleaned = text.strip()
    if not cleaned:
        return 0
    try:
        value = Decimal(cleaned)
    except InvalidOperation as err:
        raise InvalidAmount(f"Not a decimal amount: '{text}'") from err
    if not value.is_finite() or value < 0:
        raise InvalidAmount(f"Amount must be a finite non-negative number: '{text}'")

    try:
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            base = value.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except (InvalidOperation, decimal.Overflow) as err:
        raise InvalidAmount(f"Amount exceeds uint256: '{text}'") from err
    result = int(base)
    if result > UINT256_MAX:
        raise InvalidAmount(f"Amount exceeds uint256: '{text}'")
    return result


def format_units(value: int, decimals: int) -> Decimal:
    """Exact decimal value of ``value`` base units."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(value).scaleb(-decimals)


def format_fixed(value: Decimal, places: int) -> str:
    """Round half-up to ``places`` decimals and render without exponent."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        quantum = Decimal(1).scaleb(-places)
        return f"{value.quantize(quantum, rounding=ROUND_HALF_UP):f}"


def format_balance(value: int | None, decimals: int, places: int = BALANCE_DISPLAY_PLACES) -> str:
    """Balance as the panels show it: "0.0" when empty, else fixed ``places``."""
    if not value:
        return "0.0"
    return format_fixed(format_units(value, decimals), places)


__all__ = [
    "DECIMAL_HIGH_PREC_CONTEXT",
    "parse_units",
    "format_units",
    "format_fixed",
    "format_balance",
]
