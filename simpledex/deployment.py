"""Publish the two tokens and the pair wired to them.

Mirrors the deploy order of the contracts: token A and token B first, each
minting its initial supply to the deployer, then the pair constructed with both
token addresses. Contracts are looked up by name afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog
from eth_utils import keccak

from simpledex.amm.engine import AMMEngine
from simpledex.amm.pair import Side
from simpledex.config import DEFAULT_DEX_CONFIG, DexConfig, TokenSpec
from simpledex.constants import PAIR_NAME
from simpledex.ledger import TokenLedger
from simpledex.models.types import normalize_address

logger = structlog.get_logger()


def contract_address(deployer: str, nonce: int) -> str:
    """Deterministic address for the ``nonce``-th contract of ``deployer``."""
    digest = keccak(text=f"{normalize_address(deployer)}:{nonce}")
    return "0x" + digest[-20:].hex()


@dataclass
class Deployment:
    """Contracts published by one deployment, keyed by contract name."""

    config: DexConfig
    deployer: str
    contracts: dict[str, TokenLedger | AMMEngine] = field(default_factory=dict)

    @property
    def token_a(self) -> TokenLedger:
        return self.dex.ledger(Side.A)

    @property
    def token_b(self) -> TokenLedger:
        return self.dex.ledger(Side.B)

    @property
    def dex(self) -> AMMEngine:
        pair = self.contracts[PAIR_NAME]
        if not isinstance(pair, AMMEngine):
            raise TypeError(f"{PAIR_NAME} is not a pair: {type(pair).__name__}")
        return pair

    def get(self, name: str) -> TokenLedger | AMMEngine:
        """Look a contract up by name.

        Raises:
            KeyError: If no contract with that name was deployed
        """
        try:
            return self.contracts[name]
        except KeyError:
            raise KeyError(f"No deployment named {name!r}") from None

    def token(self, address: str) -> TokenLedger:
        """Look a token ledger up by address.

        Raises:
            KeyError: If the address is not one of the deployed tokens
        """
        address = normalize_address(address)
        for contract in self.contracts.values():
            if isinstance(contract, TokenLedger) and contract.address == address:
                return contract
        raise KeyError(f"No token deployed at {address}")


def _deploy_token(spec: TokenSpec, deployer: str, nonce: int) -> TokenLedger:
    ledger = TokenLedger(
        address=contract_address(deployer, nonce),
        name=spec.name,
        symbol=spec.symbol,
        decimals=spec.decimals,
    )
    ledger.mint(deployer, spec.initial_supply * 10**spec.decimals)
    logger.info(
        "deployed_token",
        name=spec.name,
        symbol=spec.symbol,
        address=ledger.address,
        initial_supply=spec.initial_supply,
    )
    return ledger


def deploy(config: DexConfig = DEFAULT_DEX_CONFIG, deployer: str | None = None) -> Deployment:
    """Deploy token A, token B and the pair, in that order."""
    deployer = normalize_address(deployer or config.deployer, validate=True)
    names = {config.token_a.name, config.token_b.name, PAIR_NAME}
    if len(names) != 3:
        raise ValueError(f"Contract names must be distinct: {sorted(names)}")
    deployment = Deployment(config=config, deployer=deployer)

    token_a = _deploy_token(config.token_a, deployer, nonce=0)
    deployment.contracts[config.token_a.name] = token_a
    token_b = _deploy_token(config.token_b, deployer, nonce=1)
    deployment.contracts[config.token_b.name] = token_b

    logger.info(
        "deploying_pair",
        token_a=token_a.address,
        token_a_name=config.token_a.name,
        token_b=token_b.address,
        token_b_name=config.token_b.name,
    )
    dex = AMMEngine(contract_address(deployer, 2), token_a, token_b, config)
    deployment.contracts[PAIR_NAME] = dex
    logger.info(
        "deployed_pair",
        address=dex.address,
        fee_bps=config.fee_bps,
        liquidity_policy=config.liquidity_policy.value,
    )
    return deployment


__all__ = ["Deployment", "contract_address", "deploy"]
