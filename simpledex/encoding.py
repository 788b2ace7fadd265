"""ABI calldata for the contract calls the panels submit.

Each encoder returns ``(target_address, calldata)`` where calldata is the
4-byte selector of the Solidity signature followed by the ABI-encoded
arguments, as a 0x-prefixed hex string.
"""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]
from eth_utils import function_signature_to_4byte_selector

from simpledex.models.types import is_valid_address, normalize_address

SWAP_SIGNATURE = "swap(address,uint256)"
ADD_LIQUIDITY_SIGNATURE = "addLiquidity(uint256,uint256)"
REMOVE_LIQUIDITY_SIGNATURE = "removeLiquidity(uint256)"
APPROVE_SIGNATURE = "approve(address,uint256)"


def selector(signature: str) -> str:
    """0x-prefixed 4-byte selector of a canonical function signature."""
    return "0x" + function_signature_to_4byte_selector(signature).hex()


def _require_address(name: str, address: str) -> str:
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address}")
    return normalize_address(address)


def _call(target: str, signature: str, types: list[str], args: list[object]) -> tuple[str, str]:
    return target, selector(signature) + encode(types, args).hex()


def encode_swap(dex: str, token_in: str, amount_in: int) -> tuple[str, str]:
    """Encode ``swap(tokenIn, amountIn)`` on the pair.

    Raises:
        ValueError: If any address is invalid
    """
    dex = _require_address("dex", dex)
    token_bytes = bytes.fromhex(_require_address("token", token_in)[2:])
    return _call(dex, SWAP_SIGNATURE, ["address", "uint256"], [token_bytes, amount_in])


def encode_add_liquidity(dex: str, amount_a: int, amount_b: int) -> tuple[str, str]:
    """Encode ``addLiquidity(amountA, amountB)`` on the pair."""
    dex = _require_address("dex", dex)
    return _call(dex, ADD_LIQUIDITY_SIGNATURE, ["uint256", "uint256"], [amount_a, amount_b])


def encode_remove_liquidity(dex: str, shares: int) -> tuple[str, str]:
    """Encode ``removeLiquidity(shares)`` on the pair."""
    dex = _require_address("dex", dex)
    return _call(dex, REMOVE_LIQUIDITY_SIGNATURE, ["uint256"], [shares])


def encode_approve(token: str, spender: str, amount: int) -> tuple[str, str]:
    """Encode ``approve(spender, amount)`` on a token."""
    token = _require_address("token", token)
    spender_bytes = bytes.fromhex(_require_address("spender", spender)[2:])
    return _call(token, APPROVE_SIGNATURE, ["address", "uint256"], [spender_bytes, amount])


__all__ = [
    "selector",
    "encode_swap",
    "encode_add_liquidity",
    "encode_remove_liquidity",
    "encode_approve",
]
