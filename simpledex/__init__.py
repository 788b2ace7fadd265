"""SimpleDEX - constant-product AMM pair between two tokens."""

__version__ = "0.1.0"

from simpledex.amm import AMMEngine, Side  # noqa: E402
from simpledex.deployment import Deployment, deploy  # noqa: E402

__all__ = ["AMMEngine", "Side", "Deployment", "deploy", "__version__"]
