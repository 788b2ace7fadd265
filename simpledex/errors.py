"""SimpleDEX error classes.

Every engine and ledger failure is a DexError subclass with a stable ``code``
string; the API returns that code to clients. A raised DexError always means the
operation was rolled back and no state changed.
"""


class DexError(Exception):
    """Base error for pair and ledger operations."""

    code = "dex_error"


class ZeroAmount(DexError):
    """An amount that must be positive was zero, or an output rounded to zero."""

    code = "zero_amount"


class InsufficientAllowance(DexError):
    """Spender's approved allowance is below the amount being pulled."""

    code = "insufficient_allowance"


class InsufficientBalance(DexError):
    """Account balance is below the amount being transferred."""

    code = "insufficient_balance"


class InsufficientShares(DexError):
    """Account holds fewer liquidity shares than it tried to burn."""

    code = "insufficient_shares"


class InsufficientReserve(DexError):
    """Swap output would drain the output reserve."""

    code = "insufficient_reserve"


class EmptyPool(DexError):
    """Operation needs non-zero reserves but the pool is empty."""

    code = "empty_pool"


class RatioMismatch(DexError):
    """Deposit ratio differs from the reserve ratio (exact liquidity policy)."""

    code = "ratio_mismatch"


class SlippageExceeded(DexError):
    """Swap output is below the caller's minimum."""

    code = "slippage_exceeded"


class UnknownToken(DexError):
    """Token address is not one of the pair's tokens."""

    code = "unknown_token"


class InvalidAmount(DexError):
    """Display amount could not be parsed into base units."""

    code = "invalid_amount"
