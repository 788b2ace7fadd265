"""Test helpers module for shared test utilities.

- constants: Accounts and common amounts
- factories: Funding, approval and balance helpers
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    DECIMALS_A,
    DECIMALS_B,
    DEPLOYER,
    ONE_A,
    ONE_B,
    SEED_A,
    SEED_B,
)
from tests.helpers.factories import InterleavingLock, approve_pair, fund, pair_balances

__all__ = [
    # Constants
    "DEPLOYER",
    "ALICE",
    "BOB",
    "CAROL",
    "DECIMALS_A",
    "DECIMALS_B",
    "ONE_A",
    "ONE_B",
    "SEED_A",
    "SEED_B",
    # Factories
    "fund",
    "approve_pair",
    "pair_balances",
    "InterleavingLock",
]
