"""Pydantic request/response models for the SimpleDEX HTTP API.

Amounts travel as decimal strings so uint256 values survive JSON intact.
"""

from pydantic import BaseModel, Field

from simpledex.models.types import Address, Uint256


class PairResponse(BaseModel):
    """Tokens, reserves and configuration of the pair."""

    address: Address
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_shares: Uint256 = Field(alias="totalShares")
    state: str = Field(description="'empty' or 'active'")
    fee_bps: int = Field(alias="feeBps")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    token_in: Address = Field(alias="tokenIn")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Sell ``amountIn`` of ``tokenIn`` from ``account``."""

    account: Address
    token_in: Address = Field(alias="tokenIn")
    amount_in: Uint256 = Field(alias="amountIn")
    min_amount_out: Uint256 | None = Field(
        default=None,
        alias="minAmountOut",
        description="Reject the swap if the output would be lower.",
    )

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")

    model_config = {"populate_by_name": True}


class AddLiquidityRequest(BaseModel):
    account: Address
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    shares_minted: Uint256 = Field(alias="sharesMinted")
    amount_a: Uint256 = Field(alias="amountA", description="Token A actually pulled.")
    amount_b: Uint256 = Field(alias="amountB", description="Token B actually pulled.")
    refund_a: Uint256 = Field(alias="refundA")
    refund_b: Uint256 = Field(alias="refundB")
    total_shares: Uint256 = Field(alias="totalShares")

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    account: Address
    shares: Uint256


class RemoveLiquidityResponse(BaseModel):
    shares_burned: Uint256 = Field(alias="sharesBurned")
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")
    total_shares: Uint256 = Field(alias="totalShares")

    model_config = {"populate_by_name": True}


class UserLiquidityResponse(BaseModel):
    account: Address
    shares: Uint256
    share_bps: int = Field(alias="shareBps", ge=0, le=10_000)

    model_config = {"populate_by_name": True}


class TokenResponse(BaseModel):
    address: Address
    name: str
    symbol: str
    decimals: int = Field(ge=0, le=77)
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = {"populate_by_name": True}


class BalanceResponse(BaseModel):
    token: Address
    account: Address
    balance: Uint256


class AllowanceResponse(BaseModel):
    token: Address
    owner: Address
    spender: Address
    allowance: Uint256


class ApproveRequest(BaseModel):
    owner: Address
    spender: Address
    amount: Uint256


class TransferRequest(BaseModel):
    sender: Address
    recipient: Address
    amount: Uint256


class ErrorResponse(BaseModel):
    """Body returned for a rejected operation."""

    error: str = Field(description="Stable error code, e.g. 'insufficient_allowance'.")
    detail: str
