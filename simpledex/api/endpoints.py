"""API endpoints for the pair and its tokens.

Handlers are plain functions; FastAPI runs them in its threadpool and the
engine lock serializes the writes. Engine errors propagate to the DexError
handler registered in ``simpledex.api.main``.
"""

import threading

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from simpledex.config import DexConfig
from simpledex.deployment import Deployment, deploy
from simpledex.errors import UnknownToken
from simpledex.ledger import TokenLedger
from simpledex.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    AllowanceResponse,
    ApproveRequest,
    BalanceResponse,
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
from simpledex.safe_int import UINT256_MAX

logger = structlog.get_logger()

router = APIRouter()

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"

_default_deployment: Deployment | None = None
_default_lock = threading.Lock()


def get_deployment() -> Deployment:
    """Dependency provider for the deployment behind the API.

    Deploys once from SIMPLEDEX_* environment configuration. Override this in
    tests to inject a fresh deployment:
        app.dependency_overrides[get_deployment] = lambda: deployment
    """
    global _default_deployment
    with _default_lock:
        if _default_deployment is None:
            _default_deployment = deploy(DexConfig.from_env())
        return _default_deployment


def _token(deployment: Deployment, address: str) -> TokenLedger:
    try:
        return deployment.token(address)
    except KeyError as err:
        raise UnknownToken(f"No token deployed at {address}") from err


def _reject_pair_account(deployment: Deployment, *accounts: str) -> None:
    # The pair moves its own balances only through swaps and liquidity calls,
    # so they always equal its reserves
    if deployment.dex.address in accounts:
        raise HTTPException(
            status_code=400, detail="The pair account cannot send, receive or approve directly"
        )


@router.get("/pair")
def get_pair(deployment: Deployment = Depends(get_deployment)) -> PairResponse:
    """Token addresses, reserves and share supply of the pair."""
    dex = deployment.dex
    reserve_a, reserve_b, total_shares = dex.get_reserves()
    return PairResponse(
        address=dex.address,
        token_a=dex.token_a,
        token_b=dex.token_b,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_shares=total_shares,
        state=dex.pool_state.value,
        fee_bps=dex.config.fee_bps,
    )


@router.get("/quote")
def get_quote(
    token_in: str = Query(alias="tokenIn", pattern=ADDRESS_PATTERN),
    amount_in: int = Query(alias="amountIn", ge=0, le=UINT256_MAX),
    deployment: Deployment = Depends(get_deployment),
) -> QuoteResponse:
    """Quote the output of selling ``amountIn`` of ``tokenIn``."""
    amount_out = deployment.dex.get_swap_amount(token_in, amount_in)
    return QuoteResponse(token_in=token_in, amount_in=amount_in, amount_out=amount_out)


@router.post("/swap")
def post_swap(
    request: SwapRequest,
    deployment: Deployment = Depends(get_deployment),
) -> SwapResponse:
    """Execute a swap for ``request.account``; returns once committed."""
    result = deployment.dex.swap(
        request.account,
        request.token_in,
        int(request.amount_in),
        int(request.min_amount_out) if request.min_amount_out is not None else None,
    )
    return SwapResponse(
        token_in=result.token_in,
        token_out=result.token_out,
        amount_in=result.amount_in,
        amount_out=result.amount_out,
        reserve_a=result.reserve_a,
        reserve_b=result.reserve_b,
    )


@router.post("/liquidity/add")
def post_add_liquidity(
    request: AddLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> AddLiquidityResponse:
    result = deployment.dex.add_liquidity(
        request.account, int(request.amount_a), int(request.amount_b)
    )
    return AddLiquidityResponse(
        shares_minted=result.shares_minted,
        amount_a=result.amount_a,
        amount_b=result.amount_b,
        refund_a=result.refund_a,
        refund_b=result.refund_b,
        total_shares=result.total_shares,
    )


@router.post("/liquidity/remove")
def post_remove_liquidity(
    request: RemoveLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> RemoveLiquidityResponse:
    result = deployment.dex.remove_liquidity(request.account, int(request.shares))
    return RemoveLiquidityResponse(
        shares_burned=result.shares_burned,
        amount_a=result.amount_a,
        amount_b=result.amount_b,
        total_shares=result.total_shares,
    )


@router.get("/liquidity/{account}")
def get_user_liquidity(
    account: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> UserLiquidityResponse:
    shares, share_bps = deployment.dex.get_user_liquidity(account)
    return UserLiquidityResponse(account=account, shares=shares, share_bps=share_bps)


@router.get("/tokens/{token}")
def get_token(
    token: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> TokenResponse:
    ledger = _token(deployment, token)
    return TokenResponse(
        address=ledger.address,
        name=ledger.name,
        symbol=ledger.symbol,
        decimals=ledger.decimals,
        total_supply=ledger.total_supply,
    )


@router.get("/tokens/{token}/balance/{account}")
def get_balance(
    token: str = Path(pattern=ADDRESS_PATTERN),
    account: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> BalanceResponse:
    ledger = _token(deployment, token)
    return BalanceResponse(
        token=ledger.address, account=account, balance=ledger.balance_of(account)
    )


@router.get("/tokens/{token}/allowance/{owner}/{spender}")
def get_allowance(
    token: str = Path(pattern=ADDRESS_PATTERN),
    owner: str = Path(pattern=ADDRESS_PATTERN),
    spender: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> AllowanceResponse:
    ledger = _token(deployment, token)
    return AllowanceResponse(
        token=ledger.address,
        owner=owner,
        spender=spender,
        allowance=ledger.allowance(owner, spender),
    )


@router.post("/tokens/{token}/approve")
def post_approve(
    request: ApproveRequest,
    token: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> AllowanceResponse:
    """Set ``request.spender``'s allowance over ``request.owner``'s tokens."""
    ledger = _token(deployment, token)
    _reject_pair_account(deployment, request.owner)
    # Ledger writes share the engine lock so they never interleave with a pair transaction
    with deployment.dex.lock:
        ledger.approve(request.owner, request.spender, int(request.amount))
    logger.info(
        "approval_set",
        token=ledger.symbol,
        owner=request.owner,
        spender=request.spender,
        amount=request.amount,
    )
    return AllowanceResponse(
        token=ledger.address,
        owner=request.owner,
        spender=request.spender,
        allowance=ledger.allowance(request.owner, request.spender),
    )


@router.post("/tokens/{token}/transfer")
def post_transfer(
    request: TransferRequest,
    token: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> BalanceResponse:
    """Transfer tokens; returns the sender's remaining balance."""
    ledger = _token(deployment, token)
    _reject_pair_account(deployment, request.sender, request.recipient)
    with deployment.dex.lock:
        ledger.transfer(request.sender, request.recipient, int(request.amount))
    logger.info(
        "transfer_executed",
        token=ledger.symbol,
        sender=request.sender,
        recipient=request.recipient,
        amount=request.amount,
    )
    return BalanceResponse(
        token=ledger.address,
        account=request.sender,
        balance=ledger.balance_of(request.sender),
    )
