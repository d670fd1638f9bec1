import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..types import BalanceEntry
from .base import IndexerError, IndexerProvider

logger = logging.getLogger(__name__)


class EthplorerProvider(IndexerProvider):
    """Ethplorer API provider for address token balances"""

    name = "ethplorer"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(client)
        self.api_key = api_key or settings.ethplorer_api_key
        self.base_url = (base_url or settings.ethplorer_base_url).rstrip("/")

    async def get_address_info(self, address: str) -> Dict[str, Any]:
        try:
            response = await self._get_client().get(
                f"{self.base_url}/getAddressInfo/{address}",
                params={"apiKey": self.api_key},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise IndexerError(f"Ethplorer request failed: {e}") from e
        except ValueError as e:
            raise IndexerError("Ethplorer returned invalid JSON") from e

        if not isinstance(data, dict):
            raise IndexerError("Ethplorer returned unexpected payload")
        if "error" in data:
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise IndexerError(f"Ethplorer error: {message}")
        return data

    async def get_token_balances(self, address: str) -> List[BalanceEntry]:
        """Get every token Ethplorer reports for ``address``.

        Entries are returned as reported, including ones without a symbol.
        """
        data = await self.get_address_info(address)

        entries = []
        for token in data.get("tokens") or []:
            try:
                entries.append(BalanceEntry.from_ethplorer(token))
            except (KeyError, TypeError, ValueError) as e:
                raise IndexerError(f"Malformed Ethplorer token entry: {e}") from e

        logger.info("Ethplorer reported %d tokens for %s", len(entries), address)
        return entries
