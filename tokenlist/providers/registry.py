"""
Curated registry membership via the Kleros ArbitrableAddressList.

The ERC20 badge list exposes ``addresses(address) -> (Status, uint256)``
where Status is Absent(0), Registered(1), RegistrationRequested(2) or
ClearingRequested(3). A token stays listed while a removal request is
pending.
"""

import logging
from typing import Optional

from ..config import settings
from ..services.address import normalize_address
from .base import ProviderError
from .erc20 import decode_uint, encode_address, selector
from .rpc import JsonRpcClient

logger = logging.getLogger(__name__)

ADDRESSES_SELECTOR = selector("addresses(address)")

STATUS_ABSENT = 0
STATUS_REGISTERED = 1
STATUS_REGISTRATION_REQUESTED = 2
STATUS_CLEARING_REQUESTED = 3

LISTED_STATUSES = frozenset({STATUS_REGISTERED, STATUS_CLEARING_REQUESTED})


class RegistryChecker:
    """Answers whether a token contract is on the curated list.

    Failures never propagate: an unreachable or misbehaving registry reports
    every token as unregistered.
    """

    def __init__(
        self,
        rpc: JsonRpcClient,
        registry_address: Optional[str] = None,
        enabled: Optional[bool] = None,
    ):
        self.rpc = rpc
        self.enabled = settings.has_registry if enabled is None else enabled
        raw_address = registry_address or settings.registry_address
        self.registry_address = normalize_address(raw_address) if self.enabled else raw_address

    async def get_status(self, token_address: str) -> int:
        result = await self.rpc.eth_call(
            self.registry_address,
            ADDRESSES_SELECTOR + encode_address(token_address),
        )
        return decode_uint(result)

    async def is_registered(self, token_address: str) -> bool:
        if not self.enabled:
            return False
        try:
            status = await self.get_status(token_address)
        except (ProviderError, ValueError) as e:
            logger.warning("Registry check failed for %s, treating as unregistered: %s", token_address, e)
            return False
        return status in LISTED_STATUSES
