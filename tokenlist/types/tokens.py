from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..services.address import normalize_address, topic_to_address

if TYPE_CHECKING:
    from ..providers.erc20 import ERC20Contract


def _hex_to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    raw = str(value).strip()
    if not raw:
        return None
    return int(raw, 16) if raw.startswith("0x") else int(raw)


class ApprovalEvent(BaseModel):
    """A single ERC-20 Approval log emitted on behalf of the queried owner."""

    model_config = ConfigDict(frozen=True)

    contract_address: str = Field(description="Checksummed address of the emitting token contract")
    owner: Optional[str] = Field(default=None, description="Approving address (topic 1)")
    spender: Optional[str] = Field(default=None, description="Approved spender (topic 2)")
    value: Optional[str] = Field(default=None, description="Approved amount in base units, decimal encoded")
    block_number: Optional[int] = None
    transaction_hash: Optional[str] = None
    log_index: Optional[int] = None
    topics: Tuple[str, ...] = ()
    data: str = "0x"

    @classmethod
    def from_log(cls, log: Dict[str, Any]) -> "ApprovalEvent":
        """Build an event from a raw ``eth_getLogs`` entry."""
        topics = tuple(log.get("topics") or ())
        data = log.get("data") or "0x"
        value_hex = data[2:] if data.startswith("0x") else data

        return cls(
            contract_address=normalize_address(log["address"]),
            owner=topic_to_address(topics[1]) if len(topics) > 1 else None,
            spender=topic_to_address(topics[2]) if len(topics) > 2 else None,
            value=str(int(value_hex[:64], 16)) if value_hex else None,
            block_number=_hex_to_int(log.get("blockNumber")),
            transaction_hash=log.get("transactionHash"),
            log_index=_hex_to_int(log.get("logIndex")),
            topics=topics,
            data=data,
        )


class BalanceEntry(BaseModel):
    """A token reported by the balance indexer for an address."""

    model_config = ConfigDict(frozen=True)

    contract_address: str
    symbol: Optional[str] = None

    @property
    def has_symbol(self) -> bool:
        return self.symbol is not None

    @classmethod
    def from_ethplorer(cls, token: Dict[str, Any]) -> "BalanceEntry":
        """Build an entry from an item of Ethplorer's ``tokens`` list.

        Symbol-less entries are never candidates, so their address is kept
        as reported instead of being checksummed.
        """
        info = token.get("tokenInfo") or {}
        symbol = info.get("symbol")
        if symbol is None:
            return cls(contract_address=str(info.get("address") or ""), symbol=None)
        return cls(contract_address=normalize_address(info["address"]), symbol=symbol)


class TokenMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str = Field(description="Token symbol (e.g. DAI)")
    decimals: int = Field(ge=0, description="Token decimal places")
    total_supply: str = Field(description="Total supply in base units, decimal encoded")
    balance: str = Field(description="Owner balance in base units, decimal encoded")
    source: Literal["token_list", "contract"] = Field(
        default="contract",
        description="Where symbol and decimals came from",
    )


@dataclass(frozen=True, eq=False)
class ContractRef:
    """Checksummed contract address plus a handle for calling it."""

    address: str
    contract: "ERC20Contract" = field(repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContractRef):
            return NotImplemented
        return self.address == other.address

    def __hash__(self) -> int:
        return hash(self.address)


@dataclass(frozen=True)
class TokenRecord:
    """A discovered token, ready for display."""

    metadata: TokenMetadata
    contract_ref: ContractRef
    registered: bool
    approvals: Tuple[ApprovalEvent, ...] = ()

    @property
    def address(self) -> str:
        return self.contract_ref.address

    @property
    def symbol(self) -> str:
        return self.metadata.symbol


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one candidate contract."""

    contract_ref: ContractRef
    record: Optional[TokenRecord] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def success(cls, record: TokenRecord) -> "ResolutionResult":
        return cls(contract_ref=record.contract_ref, record=record)

    @classmethod
    def failure(cls, contract_ref: ContractRef, error: BaseException) -> "ResolutionResult":
        return cls(contract_ref=contract_ref, error=error)


def records_of(results: List[ResolutionResult]) -> List[TokenRecord]:
    return [result.record for result in results if result.record is not None]
