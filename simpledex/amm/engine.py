"""SimpleDEX pair engine.

The engine owns one PairState and moves tokens between callers and its own
address on the two token ledgers. Each state-changing call is one transaction:
it holds the engine lock, computes everything from the reserves as they were
when the call started, and restores the pair and both ledgers if any step
raises. A returned result means the new state is already committed.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from simpledex.amm.math import cp_math
from simpledex.amm.pair import PairState, PoolState, Side
from simpledex.config import DEFAULT_DEX_CONFIG, DexConfig, LiquidityPolicy
from simpledex.errors import (
    EmptyPool,
    InsufficientReserve,
    InsufficientShares,
    RatioMismatch,
    SlippageExceeded,
    UnknownToken,
    ZeroAmount,
)
from simpledex.ledger import TokenLedger
from simpledex.models.types import normalize_address
from simpledex.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapResult:
    """Committed swap and the reserves it left behind."""

    account: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    reserve_a: int
    reserve_b: int


@dataclass(frozen=True)
class LiquidityResult:
    """Committed deposit.

    ``refund_a``/``refund_b`` are the parts of the offered amounts that were not
    pulled because the deposit was priced by its scarcer side.
    """

    account: str
    shares_minted: int
    amount_a: int
    amount_b: int
    refund_a: int
    refund_b: int
    total_shares: int


@dataclass(frozen=True)
class WithdrawResult:
    """Committed withdrawal."""

    account: str
    shares_burned: int
    amount_a: int
    amount_b: int
    total_shares: int


class AMMEngine:
    """Constant-product pair between two token ledgers.

    Args:
        address: The pair's own account on both ledgers
        token_a: Ledger of token A
        token_b: Ledger of token B
        config: Fee and liquidity policy
    """

    def __init__(
        self,
        address: str,
        token_a: TokenLedger,
        token_b: TokenLedger,
        config: DexConfig = DEFAULT_DEX_CONFIG,
    ) -> None:
        if token_a.address == token_b.address:
            raise ValueError("Pair tokens must differ")
        self.address = normalize_address(address, validate=True)
        self.ledgers = {Side.A: token_a, Side.B: token_b}
        self.config = config
        self.state = PairState()
        self.lock = threading.RLock()

    # --- Reads ---

    @property
    def token_a(self) -> str:
        return self.ledgers[Side.A].address

    @property
    def token_b(self) -> str:
        return self.ledgers[Side.B].address

    @property
    def pool_state(self) -> PoolState:
        return self.state.state

    def ledger(self, side: Side) -> TokenLedger:
        return self.ledgers[side]

    def side_of(self, token: str) -> Side:
        """Resolve a token address to its side of the pair.

        Raises:
            UnknownToken: If the token is neither token A nor token B
        """
        token_norm = normalize_address(token)
        for side, ledger in self.ledgers.items():
            if ledger.address == token_norm:
                return side
        raise UnknownToken(f"Token {token} not in pair")

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve_a, reserve_b, total_shares)."""
        with self.lock:
            return self.state.reserve_a, self.state.reserve_b, self.state.total_shares

    def get_user_liquidity(self, account: str) -> tuple[int, int]:
        """Return (shares, share_bps) held by ``account``."""
        with self.lock:
            shares = self.state.shares_of(normalize_address(account))
            return shares, cp_math.share_bps(shares, self.state.total_shares)

    def get_swap_amount(self, token_in: str, amount_in: int) -> int:
        """Quote the output for selling ``amount_in`` of ``token_in``.

        Raises:
            UnknownToken: If token_in is not in the pair
            EmptyPool: If either reserve is zero
        """
        with self.lock:
            return self._quote(self.side_of(token_in), amount_in)

    def _quote(self, side_in: Side, amount_in: int) -> int:
        reserve_in, reserve_out = self.state.reserves_for(side_in)
        if reserve_in == 0 or reserve_out == 0:
            raise EmptyPool("Pool has no reserves to quote against")
        # Rejects negative and non-integer input
        S(amount_in)
        return cp_math.get_amount_out(
            amount_in, reserve_in, reserve_out, self.config.fee_multiplier
        )

    # --- Writes ---

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Run a block atomically against the pair and both ledgers."""
        with self.lock:
            pair_snapshot = self.state.copy()
            ledger_snapshots = {side: ledger.snapshot() for side, ledger in self.ledgers.items()}
            try:
                yield
            except BaseException:
                self.state = pair_snapshot
                for side, snapshot in ledger_snapshots.items():
                    self.ledgers[side].restore(snapshot)
                raise

    def swap(
        self,
        account: str,
        token_in: str,
        amount_in: int,
        min_amount_out: int | None = None,
    ) -> SwapResult:
        """Sell ``amount_in`` of ``token_in`` for the other token.

        The caller must have approved the pair for at least ``amount_in``.

        Raises:
            ZeroAmount: If amount_in is zero or the output rounds to zero
            UnknownToken: If token_in is not in the pair
            EmptyPool: If either reserve is zero
            InsufficientReserve: If the output would drain the output reserve
            SlippageExceeded: If the output is below min_amount_out
            InsufficientAllowance: If the approval is below amount_in
            InsufficientBalance: If the caller holds less than amount_in
        """
        account = normalize_address(account)
        side_in = self.side_of(token_in)
        side_out = side_in.other

        with self._transaction():
            if amount_in == 0:
                raise ZeroAmount("Swap input must be positive")
            reserve_in, reserve_out = self.state.reserves_for(side_in)
            amount_out = self._quote(side_in, amount_in)
            if amount_out == 0:
                raise ZeroAmount(f"Input {amount_in} is too small to buy any output")
            if amount_out >= reserve_out:
                raise InsufficientReserve(
                    f"Output {amount_out} would drain reserve {reserve_out}"
                )
            if min_amount_out is not None and amount_out < min_amount_out:
                raise SlippageExceeded(f"Output {amount_out} is below minimum {min_amount_out}")

            self.ledger(side_in).transfer_from(self.address, account, self.address, amount_in)
            self.ledger(side_out).transfer(self.address, account, amount_out)
            self.state.set_reserve(side_in, (S(reserve_in) + S(amount_in)).value)
            self.state.set_reserve(side_out, (S(reserve_out) - S(amount_out)).value)
            result = SwapResult(
                account=account,
                token_in=self.ledger(side_in).address,
                token_out=self.ledger(side_out).address,
                amount_in=amount_in,
                amount_out=amount_out,
                reserve_a=self.state.reserve_a,
                reserve_b=self.state.reserve_b,
            )

        logger.info(
            "swap_executed",
            account=account,
            side_in=side_in.value,
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_a=result.reserve_a,
            reserve_b=result.reserve_b,
        )
        return result

    def add_liquidity(self, account: str, amount_a: int, amount_b: int) -> LiquidityResult:
        """Deposit both tokens and mint liquidity shares to ``account``.

        The first deposit sets the price and mints ``amount_a`` shares. Later
        deposits follow the configured liquidity policy.

        Raises:
            ZeroAmount: If either amount is zero, or the deposit mints no shares
            RatioMismatch: If the exact policy is active and the ratio differs
            InsufficientAllowance: If an approval is below the amount pulled
            InsufficientBalance: If the caller holds less than the amount pulled
        """
        account = normalize_address(account)

        with self._transaction():
            if amount_a == 0 or amount_b == 0:
                raise ZeroAmount("Both deposit amounts must be positive")
            reserve_a, reserve_b, total = (
                self.state.reserve_a,
                self.state.reserve_b,
                self.state.total_shares,
            )

            if total == 0:
                minted = cp_math.initial_shares(amount_a, amount_b)
                used_a, used_b = amount_a, amount_b
            elif self.config.liquidity_policy is LiquidityPolicy.EXACT:
                if not cp_math.ratios_match(amount_a, amount_b, reserve_a, reserve_b):
                    raise RatioMismatch(
                        f"Deposit {amount_a}:{amount_b} does not match reserves "
                        f"{reserve_a}:{reserve_b}"
                    )
                minted = (S(amount_a) * S(total) // S(reserve_a)).value
                used_a, used_b = amount_a, amount_b
            else:
                minted = cp_math.proportional_shares(
                    amount_a, amount_b, reserve_a, reserve_b, total
                )
                used_a, used_b = cp_math.deposit_amounts(minted, reserve_a, reserve_b, total)

            if minted == 0:
                raise ZeroAmount("Deposit is too small to mint any shares")

            self.ledger(Side.A).transfer_from(self.address, account, self.address, used_a)
            self.ledger(Side.B).transfer_from(self.address, account, self.address, used_b)
            self.state.reserve_a = (S(reserve_a) + S(used_a)).value
            self.state.reserve_b = (S(reserve_b) + S(used_b)).value
            self.state.credit_shares(account, minted)
            result = LiquidityResult(
                account=account,
                shares_minted=minted,
                amount_a=used_a,
                amount_b=used_b,
                refund_a=amount_a - used_a,
                refund_b=amount_b - used_b,
                total_shares=self.state.total_shares,
            )

        logger.info(
            "liquidity_added",
            account=account,
            shares_minted=minted,
            amount_a=used_a,
            amount_b=used_b,
            total_shares=result.total_shares,
        )
        return result

    def remove_liquidity(self, account: str, shares: int) -> WithdrawResult:
        """Burn ``shares`` and pay out the matching slice of both reserves.

        Raises:
            ZeroAmount: If shares is zero or either payout rounds to zero
            InsufficientShares: If the account holds fewer shares
        """
        account = normalize_address(account)

        with self._transaction():
            if shares == 0:
                raise ZeroAmount("Share amount must be positive")
            held = self.state.shares_of(account)
            if shares > held:
                raise InsufficientShares(f"Account {account} holds {held} shares, not {shares}")

            out_a, out_b = cp_math.withdraw_amounts(
                shares, self.state.reserve_a, self.state.reserve_b, self.state.total_shares
            )
            if out_a == 0 or out_b == 0:
                raise ZeroAmount(f"Burning {shares} shares pays out nothing of one token")

            self.state.debit_shares(account, shares)
            self.state.reserve_a = (S(self.state.reserve_a) - S(out_a)).value
            self.state.reserve_b = (S(self.state.reserve_b) - S(out_b)).value
            self.ledger(Side.A).transfer(self.address, account, out_a)
            self.ledger(Side.B).transfer(self.address, account, out_b)
            pool_state = self.pool_state
            result = WithdrawResult(
                account=account,
                shares_burned=shares,
                amount_a=out_a,
                amount_b=out_b,
                total_shares=self.state.total_shares,
            )

        logger.info(
            "liquidity_removed",
            account=account,
            shares_burned=shares,
            amount_a=out_a,
            amount_b=out_b,
            total_shares=result.total_shares,
            pool_state=pool_state.value,
        )
        return result
