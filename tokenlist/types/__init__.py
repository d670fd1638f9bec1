from .tokens import (
    ApprovalEvent,
    BalanceEntry,
    ContractRef,
    ResolutionResult,
    TokenMetadata,
    TokenRecord,
    records_of,
)

__all__ = [
    "ApprovalEvent",
    "BalanceEntry",
    "ContractRef",
    "ResolutionResult",
    "TokenMetadata",
    "TokenRecord",
    "records_of",
]
