import itertools
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from .base import Provider, RpcError

logger = logging.getLogger(__name__)


class JsonRpcClient(Provider):
    """Minimal JSON-RPC 2.0 client for an Ethereum node.

    A single instance is shared by every contract handle and adapter in a
    process; it holds no per-request state beyond the request id counter.
    """

    name = "rpc"
    timeout_s = settings.request_timeout_seconds

    def __init__(self, url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        super().__init__(client)
        self.url = url or settings.rpc_url
        self._ids = itertools.count(1)

    async def call(self, method: str, params: List[Any]) -> Any:
        """Send one request and return its ``result`` field."""
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }

        try:
            response = await self._get_client().post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise RpcError(f"{method} transport error: {e}") from e
        except ValueError as e:
            raise RpcError(f"{method} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RpcError(f"{method} returned unexpected payload")
        if data.get("error"):
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(f"{method} failed: {error.get('message')}", code=error.get("code"))
            raise RpcError(f"{method} failed: {error}")
        if "result" not in data:
            raise RpcError(f"{method} response missing result")
        return data["result"]

    async def get_logs(self, log_filter: Dict[str, Any]) -> List[Dict[str, Any]]:
        result = await self.call("eth_getLogs", [log_filter])
        if not isinstance(result, list):
            raise RpcError("eth_getLogs returned a non-list result")
        return result

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        result = await self.call("eth_call", [{"to": to, "data": data}, block])
        if not isinstance(result, str):
            raise RpcError("eth_call returned a non-string result")
        return result
