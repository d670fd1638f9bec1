"""
Token discovery pipeline.

Candidates come from two mandatory sources: the owner's Approval history and
the balance indexer. Both lists are deduplicated by checksummed address
(first occurrence wins), concatenated with approval-derived contracts first,
and deduplicated again. Each candidate is then resolved concurrently; a
contract whose metadata cannot be read is dropped without failing the run.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..config import settings
from ..providers.base import EventSource, IndexerProvider
from ..providers.erc20 import ERC20Contract
from ..providers.ethplorer import EthplorerProvider
from ..providers.events import ApprovalEventSource
from ..providers.registry import RegistryChecker
from ..providers.rpc import JsonRpcClient
from ..types import (
    ApprovalEvent,
    BalanceEntry,
    ContractRef,
    ResolutionResult,
    TokenRecord,
    records_of,
)
from .address import normalize_address
from .metadata import MetadataResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")

ContractRefFactory = Callable[[str], ContractRef]


def unique_by_address(items: Iterable[T], key: Callable[[T], str]) -> List[T]:
    """Drop items whose normalized address was already seen, keeping order."""
    seen = set()
    unique = []
    for item in items:
        address = normalize_address(key(item))
        if address in seen:
            continue
        seen.add(address)
        unique.append(item)
    return unique


def collect_candidates(
    approvals: Sequence[ApprovalEvent],
    balances: Sequence[BalanceEntry],
    make_ref: ContractRefFactory,
) -> List[ContractRef]:
    """Merge both sources into one list of distinct contracts."""
    from_approvals = [
        make_ref(event.contract_address)
        for event in unique_by_address(approvals, lambda e: e.contract_address)
    ]
    from_balances = [
        make_ref(entry.contract_address)
        for entry in unique_by_address(
            (b for b in balances if b.has_symbol),
            lambda b: b.contract_address,
        )
    ]
    return unique_by_address([*from_approvals, *from_balances], lambda ref: ref.address)


def approvals_for(address: str, approvals: Sequence[ApprovalEvent]) -> tuple[ApprovalEvent, ...]:
    target = normalize_address(address)
    return tuple(event for event in approvals if normalize_address(event.contract_address) == target)


def sort_tokens(records: Iterable[TokenRecord]) -> List[TokenRecord]:
    """Order by symbol, case-insensitively, with the raw symbol as tie break."""
    return sorted(records, key=lambda r: (r.symbol.casefold(), r.symbol))


class DiscoveryPipeline:
    """
    Discovers the ERC-20 tokens an address has approved or holds.

    Usage:
        async with DiscoveryPipeline() as pipeline:
            tokens = await pipeline.discover("0x...")
    """

    def __init__(
        self,
        rpc: Optional[JsonRpcClient] = None,
        event_source: Optional[EventSource] = None,
        indexer: Optional[IndexerProvider] = None,
        metadata_resolver: Optional[MetadataResolver] = None,
        registry: Optional[RegistryChecker] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.rpc = rpc or JsonRpcClient()
        self.event_source = event_source or ApprovalEventSource(self.rpc)
        self.indexer = indexer or EthplorerProvider()
        self.metadata_resolver = metadata_resolver or MetadataResolver()
        self.registry = registry or RegistryChecker(self.rpc)
        self.max_concurrency = max_concurrency or settings.max_concurrent_requests

    async def __aenter__(self) -> "DiscoveryPipeline":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.indexer.close()
        await self.metadata_resolver.close()
        await self.event_source.close()
        await self.rpc.close()

    def make_ref(self, address: str) -> ContractRef:
        contract = ERC20Contract(address, self.rpc)
        return ContractRef(address=contract.address, contract=contract)

    async def fetch_sources(self, owner: str) -> tuple[List[ApprovalEvent], List[BalanceEntry]]:
        """Fetch both sources concurrently; the first failure aborts the other."""
        approvals_task = asyncio.ensure_future(self.event_source.get_approvals(owner))
        balances_task = asyncio.ensure_future(self.indexer.get_token_balances(owner))
        try:
            approvals, balances = await asyncio.gather(approvals_task, balances_task)
        except BaseException:
            for task in (approvals_task, balances_task):
                task.cancel()
            await asyncio.gather(approvals_task, balances_task, return_exceptions=True)
            raise
        return approvals, balances

    async def resolve_contract(
        self,
        contract_ref: ContractRef,
        owner: str,
        approvals: Sequence[ApprovalEvent],
    ) -> ResolutionResult:
        token_approvals = approvals_for(contract_ref.address, approvals)
        registered, metadata = await asyncio.gather(
            self.registry.is_registered(contract_ref.address),
            self.metadata_resolver.resolve(contract_ref, owner),
            return_exceptions=True,
        )
        for outcome in (registered, metadata):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome

        if isinstance(metadata, Exception):
            # Not an ERC-20 token as far as this pipeline is concerned
            logger.debug("Dropping %s: %s", contract_ref.address, metadata)
            return ResolutionResult.failure(contract_ref, metadata)
        if isinstance(registered, Exception):
            logger.warning("Registry check raised for %s, treating as unregistered: %s", contract_ref.address, registered)
            registered = False

        return ResolutionResult.success(
            TokenRecord(
                metadata=metadata,
                contract_ref=contract_ref,
                registered=registered,
                approvals=token_approvals,
            )
        )

    async def resolve_all(
        self,
        candidates: Sequence[ContractRef],
        owner: str,
        approvals: Sequence[ApprovalEvent],
    ) -> List[ResolutionResult]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded(contract_ref: ContractRef) -> ResolutionResult:
            async with semaphore:
                return await self.resolve_contract(contract_ref, owner, approvals)

        return list(await asyncio.gather(*(_bounded(ref) for ref in candidates)))

    async def discover(self, address: str) -> List[TokenRecord]:
        """Run one discovery for ``address``.

        Raises:
            InvalidAddressError: ``address`` is not a hex address
            ProviderError: either source failed; no partial result exists
        """
        owner = normalize_address(address)
        start = time.monotonic()

        approvals, balances = await self.fetch_sources(owner)
        candidates = collect_candidates(approvals, balances, self.make_ref)

        if not candidates:
            logger.info("No candidate contracts for %s", owner)
            return []

        results = await self.resolve_all(candidates, owner, approvals)
        tokens = sort_tokens(records_of(results))

        logger.info(
            "Discovered %d tokens for %s (%d candidates, %d dropped) in %dms",
            len(tokens),
            owner,
            len(candidates),
            len(candidates) - len(tokens),
            int((time.monotonic() - start) * 1000),
        )
        return tokens
