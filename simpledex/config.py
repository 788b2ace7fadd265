"""Configuration for the pair and its deployment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from simpledex.constants import (
    BPS_DENOMINATOR,
    DEFAULT_DEPLOYER,
    DEFAULT_FEE_BPS,
    DEFAULT_INITIAL_SUPPLY,
    TOKEN_A_DECIMALS,
    TOKEN_A_NAME,
    TOKEN_A_SYMBOL,
    TOKEN_B_DECIMALS,
    TOKEN_B_NAME,
    TOKEN_B_SYMBOL,
)
from simpledex.models.types import normalize_address


class LiquidityPolicy(str, Enum):
    """How deposits into an active pool are priced."""

    # Mint by the scarcer side, pull only what that share count is worth
    PROPORTIONAL = "proportional"
    # Reject deposits whose ratio differs from the reserves
    EXACT = "exact"


@dataclass(frozen=True)
class TokenSpec:
    """Token published by the deployment."""

    name: str
    symbol: str
    decimals: int
    # Whole tokens minted to the deployer
    initial_supply: int = DEFAULT_INITIAL_SUPPLY

    def __post_init__(self) -> None:
        if not 0 <= self.decimals <= 77:
            raise ValueError(f"Token decimals must be in [0, 77], got {self.decimals}")
        if self.initial_supply < 0:
            raise ValueError(f"Initial supply cannot be negative: {self.initial_supply}")


@dataclass(frozen=True)
class DexConfig:
    """Centralized configuration for the pair engine.

    Attributes:
        fee_bps: Swap fee in basis points, taken from the input (default: 0)
        liquidity_policy: Pricing of deposits into an active pool
        token_a: Token A published by the deployment (MyToken, 18 decimals)
        token_b: Token B published by the deployment (SimpleUSDC, 6 decimals)
        deployer: Account that deploys the contracts and receives initial supply
    """

    fee_bps: int = DEFAULT_FEE_BPS
    liquidity_policy: LiquidityPolicy = LiquidityPolicy.PROPORTIONAL
    token_a: TokenSpec = field(
        default_factory=lambda: TokenSpec(TOKEN_A_NAME, TOKEN_A_SYMBOL, TOKEN_A_DECIMALS)
    )
    token_b: TokenSpec = field(
        default_factory=lambda: TokenSpec(TOKEN_B_NAME, TOKEN_B_SYMBOL, TOKEN_B_DECIMALS)
    )
    deployer: str = DEFAULT_DEPLOYER

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"Fee must be between 0 and 9999 bps, got {self.fee_bps}")
        object.__setattr__(self, "liquidity_policy", LiquidityPolicy(self.liquidity_policy))
        object.__setattr__(self, "deployer", normalize_address(self.deployer, validate=True))

    @property
    def fee_multiplier(self) -> int:
        """Share of the input that reaches the formula (10000 - fee_bps)."""
        return BPS_DENOMINATOR - self.fee_bps

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DexConfig:
        """Build a config from SIMPLEDEX_* environment variables.

        - SIMPLEDEX_FEE_BPS: swap fee in basis points (default: 0)
        - SIMPLEDEX_LIQUIDITY_POLICY: "proportional" or "exact" (default: proportional)
        - SIMPLEDEX_DEPLOYER: deployer address (default: hardhat account #0)

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        fee_raw = env.get("SIMPLEDEX_FEE_BPS", str(DEFAULT_FEE_BPS))
        try:
            fee_bps = int(fee_raw)
        except ValueError as err:
            raise ValueError(f"SIMPLEDEX_FEE_BPS must be an integer: '{fee_raw}'") from err

        return cls(
            fee_bps=fee_bps,
            liquidity_policy=LiquidityPolicy(
                env.get("SIMPLEDEX_LIQUIDITY_POLICY", LiquidityPolicy.PROPORTIONAL.value).lower()
            ),
            deployer=env.get("SIMPLEDEX_DEPLOYER", DEFAULT_DEPLOYER),
        )


# Default configuration instance
DEFAULT_DEX_CONFIG = DexConfig()
