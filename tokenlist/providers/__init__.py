from .base import (
    EventSource,
    IndexerError,
    IndexerProvider,
    Provider,
    ProviderError,
    RpcError,
    TokenListLookupError,
)
from .erc20 import ContractCallError, ERC20Contract
from .ethplorer import EthplorerProvider
from .events import APPROVAL_TOPIC, ApprovalEventSource
from .registry import RegistryChecker
from .rpc import JsonRpcClient
from .token_list import CommunityTokenList, TokenListEntry

__all__ = [
    "APPROVAL_TOPIC",
    "ApprovalEventSource",
    "CommunityTokenList",
    "ContractCallError",
    "ERC20Contract",
    "EthplorerProvider",
    "EventSource",
    "IndexerError",
    "IndexerProvider",
    "JsonRpcClient",
    "Provider",
    "ProviderError",
    "RegistryChecker",
    "RpcError",
    "TokenListEntry",
    "TokenListLookupError",
]
