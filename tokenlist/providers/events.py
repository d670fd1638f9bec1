import logging
from typing import Any, Dict, List

from eth_utils import keccak

from ..services.address import address_to_topic
from ..types import ApprovalEvent
from .base import EventSource, RpcError
from .rpc import JsonRpcClient

logger = logging.getLogger(__name__)

APPROVAL_TOPIC = "0x" + keccak(text="Approval(address,address,uint256)").hex()


class ApprovalEventSource(EventSource):
    """Reads the full Approval history of an owner from a JSON-RPC node"""

    name = "approval_logs"

    def __init__(self, rpc: JsonRpcClient):
        super().__init__(client=None)
        self.rpc = rpc

    async def close(self) -> None:
        # The RPC client is shared; its owner closes it.
        return None

    def build_filter(self, owner: str) -> Dict[str, Any]:
        return {
            "fromBlock": "earliest",
            "toBlock": "latest",
            "topics": [APPROVAL_TOPIC, address_to_topic(owner)],
        }

    async def get_approvals(self, owner: str) -> List[ApprovalEvent]:
        logs = await self.rpc.get_logs(self.build_filter(owner))

        events = []
        for log in logs:
            try:
                events.append(ApprovalEvent.from_log(log))
            except (KeyError, ValueError) as e:
                raise RpcError(f"Malformed Approval log: {e}") from e

        logger.info("Fetched %d approval events for %s", len(events), owner)
        return events
