"""
Token metadata lookups against the ethereum-lists community token list.

Each token lives in its own JSON file named after its checksummed address,
which makes the list a cheap symbol/decimals source before falling back to
contract calls.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import settings
from ..services.address import normalize_address
from .base import Provider, TokenListLookupError

logger = logging.getLogger(__name__)


class TokenListEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    symbol: str = Field(min_length=1)
    decimals: int = Field(ge=0, le=255)


class CommunityTokenList(Provider):
    """Address-indexed symbol/decimals source"""

    name = "token_list"
    timeout_s = settings.request_timeout_seconds

    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        super().__init__(client)
        self.base_url = (base_url or settings.token_list_base_url).rstrip("/")

    def url_for(self, address: str) -> str:
        return f"{self.base_url}/{normalize_address(address)}.json"

    async def lookup(self, address: str) -> TokenListEntry:
        """Return symbol and decimals for ``address``.

        Raises:
            TokenListLookupError: not listed, unreachable, or malformed entry
        """
        url = self.url_for(address)
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            raise TokenListLookupError(f"Token list unreachable for {address}: {e}") from e

        if response.status_code == 404:
            raise TokenListLookupError(f"{address} not in token list")
        if response.is_error:
            raise TokenListLookupError(f"Token list returned {response.status_code} for {address}")

        try:
            return TokenListEntry.model_validate_json(response.content)
        except ValidationError as e:
            raise TokenListLookupError(f"Malformed token list entry for {address}") from e
