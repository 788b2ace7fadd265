"""Pair state: reserves, share supply and per-account positions."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum


class Side(str, Enum):
    """Which of the pair's two tokens a call refers to."""

    A = "A"
    B = "B"

    @property
    def other(self) -> Side:
        return Side.B if self is Side.A else Side.A


class PoolState(str, Enum):
    """Macro-state of the pool."""

    # No shares outstanding; only a first deposit is valid
    EMPTY = "empty"
    ACTIVE = "active"


@dataclass
class PairState:
    """Reserves and liquidity shares held by one pair.

    ``shares`` maps account to share units; its values sum to ``total_shares``.
    """

    reserve_a: int = 0
    reserve_b: int = 0
    total_shares: int = 0
    shares: dict[str, int] = field(default_factory=dict)

    @property
    def state(self) -> PoolState:
        return PoolState.EMPTY if self.total_shares == 0 else PoolState.ACTIVE

    def reserve(self, side: Side) -> int:
        return self.reserve_a if side is Side.A else self.reserve_b

    def set_reserve(self, side: Side, value: int) -> None:
        if side is Side.A:
            self.reserve_a = value
        else:
            self.reserve_b = value

    def reserves_for(self, side_in: Side) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        return self.reserve(side_in), self.reserve(side_in.other)

    def shares_of(self, account: str) -> int:
        return self.shares.get(account, 0)

    def credit_shares(self, account: str, amount: int) -> None:
        self.shares[account] = self.shares_of(account) + amount
        self.total_shares += amount

    def debit_shares(self, account: str, amount: int) -> None:
        remaining = self.shares_of(account) - amount
        if remaining:
            self.shares[account] = remaining
        else:
            self.shares.pop(account, None)
        self.total_shares -= amount

    def copy(self) -> PairState:
        return copy.deepcopy(self)
