"""FastAPI application exposing the SimpleDEX pair and its tokens."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from simpledex import __version__
from simpledex.api.endpoints import router
from simpledex.errors import DexError, UnknownToken
from simpledex.log_config import configure_logging
from simpledex.models.api import ErrorResponse
from simpledex.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SIMPLEDEX_HOST", "127.0.0.1")
PORT = int(os.environ.get("SIMPLEDEX_PORT", "8000"))
DEBUG = os.environ.get("SIMPLEDEX_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("SIMPLEDEX_LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

app = FastAPI(
    title="SimpleDEX",
    description="Constant-product AMM pair between two ERC-20 style tokens",
    version=__version__,
)


@app.exception_handler(DexError)
async def dex_error_handler(request: Request, exc: DexError) -> JSONResponse:
    """Turn a rejected operation into a 400 (404 for unknown tokens) with its error code."""
    status_code = 404 if isinstance(exc, UnknownToken) else 400
    logger.warning(
        "operation_rejected",
        method=request.method,
        path=request.url.path,
        error=exc.code,
        detail=str(exc),
    )
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    """Amounts that overflow uint256 math are rejected like any other bad input."""
    logger.warning(
        "operation_rejected",
        method=request.method,
        path=request.url.path,
        error=exc.code,
        detail=str(exc),
    )
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - SIMPLEDEX_HOST: Host to bind to (default: 127.0.0.1)
    - SIMPLEDEX_PORT: Port to bind to (default: 8000)
    - SIMPLEDEX_DEBUG: Enable debug/reload mode (default: false)
    - SIMPLEDEX_LOG_LEVEL: structlog level (default: INFO, DEBUG in debug mode)
    - SIMPLEDEX_FEE_BPS, SIMPLEDEX_LIQUIDITY_POLICY, SIMPLEDEX_DEPLOYER: see DexConfig
    """
    configure_logging(LOG_LEVEL)
    uvicorn.run(
        "simpledex.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
