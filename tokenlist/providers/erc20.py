"""
ERC-20 read-only calls over raw ``eth_call``.

Only the four views the metadata resolver needs are encoded here, so calldata
is assembled by hand from 4-byte selectors and 32-byte words.
"""

from __future__ import annotations

from eth_utils import keccak

from ..services.address import normalize_address
from .base import RpcError
from .rpc import JsonRpcClient

WORD_HEX = 64


def selector(signature: str) -> str:
    return "0x" + keccak(text=signature)[:4].hex()


SYMBOL_SELECTOR = selector("symbol()")
DECIMALS_SELECTOR = selector("decimals()")
TOTAL_SUPPLY_SELECTOR = selector("totalSupply()")
BALANCE_OF_SELECTOR = selector("balanceOf(address)")


class ContractCallError(RpcError):
    """A contract call reverted or returned data that does not decode."""


def _strip_0x(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


def encode_address(address: str) -> str:
    return normalize_address(address)[2:].lower().rjust(WORD_HEX, "0")


def decode_uint(result: str) -> int:
    hex_data = _strip_0x(result)
    if len(hex_data) < WORD_HEX:
        raise ContractCallError(f"Expected a 32-byte word, got {len(hex_data) // 2} bytes")
    return int(hex_data[:WORD_HEX], 16)


def decode_string(result: str) -> str:
    """Decode an ABI ``string`` return, accepting legacy ``bytes32`` symbols."""
    hex_data = _strip_0x(result)
    if len(hex_data) < WORD_HEX:
        raise ContractCallError("Empty string return")

    if len(hex_data) == WORD_HEX:
        # bytes32, right padded with zeros (MKR, SAI and friends)
        raw = bytes.fromhex(hex_data).rstrip(b"\x00")
    else:
        offset = int(hex_data[:WORD_HEX], 16) * 2
        length_end = offset + WORD_HEX
        if length_end > len(hex_data):
            raise ContractCallError("String offset out of range")
        length = int(hex_data[offset:length_end], 16) * 2
        if length_end + length > len(hex_data):
            raise ContractCallError("String length out of range")
        raw = bytes.fromhex(hex_data[length_end:length_end + length])

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ContractCallError("String return is not valid UTF-8") from e


class ERC20Contract:
    """Call handle for one ERC-20 contract."""

    def __init__(self, address: str, rpc: JsonRpcClient):
        self.address = normalize_address(address)
        self.rpc = rpc

    def __repr__(self) -> str:
        return f"ERC20Contract({self.address})"

    async def _call(self, data: str) -> str:
        result = await self.rpc.eth_call(self.address, data)
        if _strip_0x(result) == "":
            # Calls to accounts without code, or to missing functions without a fallback
            raise ContractCallError(f"{self.address} returned no data")
        return result

    async def symbol(self) -> str:
        return decode_string(await self._call(SYMBOL_SELECTOR))

    async def decimals(self) -> int:
        value = decode_uint(await self._call(DECIMALS_SELECTOR))
        if value > 255:
            raise ContractCallError(f"decimals() out of range: {value}")
        return value

    async def total_supply(self) -> int:
        return decode_uint(await self._call(TOTAL_SUPPLY_SELECTOR))

    async def balance_of(self, owner: str) -> int:
        return decode_uint(await self._call(BALANCE_OF_SELECTOR + encode_address(owner)))
