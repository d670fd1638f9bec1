from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx

from ..config import settings


class ProviderError(Exception):
    """Base error for failures at an external data boundary."""


class RpcError(ProviderError):
    """JSON-RPC transport failure or error response."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class IndexerError(ProviderError):
    """Balance indexer request failed or returned an error payload."""


class TokenListLookupError(ProviderError):
    """Community token list has no usable entry for a contract."""


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def close(self) -> None:
        """Close HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


class EventSource(Provider):
    """Provider for historical approval events"""

    @abstractmethod
    async def get_approvals(self, owner: str) -> List[Any]:
        """Get every Approval event where ``owner`` is the approving address"""
        pass


class IndexerProvider(Provider):
    """Provider for indexed token balance data"""

    timeout_s = settings.request_timeout_seconds

    @abstractmethod
    async def get_token_balances(self, address: str) -> List[Any]:
        """Get all token balances reported for an address"""
        pass
