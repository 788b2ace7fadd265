"""Constant-product pair: state, math and the engine that mutates them."""

from simpledex.amm.engine import AMMEngine, LiquidityResult, SwapResult, WithdrawResult
from simpledex.amm.math import ConstantProductMath, cp_math
from simpledex.amm.pair import PairState, PoolState, Side

__all__ = [
    # Engine
    "AMMEngine",
    "SwapResult",
    "LiquidityResult",
    "WithdrawResult",
    # Math
    "ConstantProductMath",
    "cp_math",
    # State
    "PairState",
    "PoolState",
    "Side",
]
