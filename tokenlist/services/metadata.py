"""
Token metadata resolution.

Supply and balance always come from the contract itself. Symbol and decimals
come from the community token list when it has the token, otherwise from
``symbol()`` / ``decimals()`` calls.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

from ..providers.base import ProviderError, TokenListLookupError
from ..providers.token_list import CommunityTokenList
from ..types import ContractRef, TokenMetadata

logger = logging.getLogger(__name__)


class MetadataResolutionError(Exception):
    """The contract could not be read as an ERC-20 token."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"{address}: {reason}")


class MetadataResolver:
    def __init__(self, token_list: Optional[CommunityTokenList] = None):
        self.token_list = token_list or CommunityTokenList()

    async def close(self) -> None:
        await self.token_list.close()

    async def resolve(self, contract_ref: ContractRef, owner: str) -> TokenMetadata:
        """Resolve metadata for ``contract_ref`` as seen by ``owner``.

        Raises:
            MetadataResolutionError: supply/balance or symbol/decimals could
                not be read from the contract
        """
        contract = contract_ref.contract

        try:
            total_supply, balance = await asyncio.gather(
                contract.total_supply(),
                contract.balance_of(owner),
            )
        except ProviderError as e:
            raise MetadataResolutionError(contract_ref.address, f"supply/balance call failed: {e}") from e

        symbol, decimals, source = await self._resolve_symbol_and_decimals(contract_ref)

        return TokenMetadata(
            symbol=symbol,
            decimals=decimals,
            total_supply=str(total_supply),
            balance=str(balance),
            source=source,
        )

    async def _resolve_symbol_and_decimals(self, contract_ref: ContractRef) -> Tuple[str, int, str]:
        try:
            entry = await self.token_list.lookup(contract_ref.address)
            return entry.symbol, entry.decimals, "token_list"
        except TokenListLookupError as e:
            logger.debug("Token list miss, falling back to contract calls: %s", e)

        contract = contract_ref.contract
        try:
            symbol = await contract.symbol()
            decimals = await contract.decimals()
        except ProviderError as e:
            raise MetadataResolutionError(contract_ref.address, f"symbol/decimals call failed: {e}") from e
        return symbol, decimals, "contract"
