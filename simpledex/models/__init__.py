"""Pydantic models for the SimpleDEX API boundary."""

from simpledex.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    AllowanceResponse,
    ApproveRequest,
    BalanceResponse,
    ErrorResponse,
    PairResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
    TokenResponse,
    TransferRequest,
    UserLiquidityResponse,
)
from simpledex.models.types import Address, Uint256

__all__ = [
    # Types
    "Address",
    "Uint256",
    # Pair
    "PairResponse",
    "QuoteResponse",
    "SwapRequest",
    "SwapResponse",
    "AddLiquidityRequest",
    "AddLiquidityResponse",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResponse",
    "UserLiquidityResponse",
    # Tokens
    "TokenResponse",
    "BalanceResponse",
    "AllowanceResponse",
    "ApproveRequest",
    "TransferRequest",
    # Errors
    "ErrorResponse",
]
