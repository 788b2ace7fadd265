"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from simpledex.amm.engine import AMMEngine
from simpledex.api.endpoints import get_deployment
from simpledex.api.main import app
from simpledex.config import DexConfig, LiquidityPolicy
from simpledex.deployment import Deployment, deploy
from tests.helpers import ALICE, BOB, DEPLOYER, ONE_A, ONE_B, SEED_A, SEED_B
from tests.helpers.factories import approve_pair, fund


@pytest.fixture
def config() -> DexConfig:
    """Default configuration: no fee, proportional deposits."""
    return DexConfig()


@pytest.fixture
def deployment(config: DexConfig) -> Deployment:
    """Fresh deployment with traders funded and the pair approved for everyone."""
    dep = deploy(config)
    for account in (ALICE, BOB):
        fund(dep, account, 10_000 * ONE_A, 20_000 * ONE_B)
    for account in (DEPLOYER, ALICE, BOB):
        approve_pair(dep, account)
    return dep


@pytest.fixture
def dex(deployment: Deployment) -> AMMEngine:
    """Empty pair of the fresh deployment."""
    return deployment.dex


@pytest.fixture
def seeded_dex(dex: AMMEngine) -> AMMEngine:
    """Pair seeded by the deployer with 1000 MTK / 2000 sUSDC."""
    dex.add_liquidity(DEPLOYER, SEED_A, SEED_B)
    return dex


@pytest.fixture
def exact_config() -> DexConfig:
    return DexConfig(liquidity_policy=LiquidityPolicy.EXACT)


@pytest.fixture
def client(deployment: Deployment) -> Iterator[TestClient]:
    """Test client backed by the fresh deployment."""
    app.dependency_overrides[get_deployment] = lambda: deployment
    yield TestClient(app)
    app.dependency_overrides.clear()
