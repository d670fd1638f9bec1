"""Helpers for validating, normalizing and topic-encoding EVM addresses."""

from __future__ import annotations

import re
from functools import lru_cache

from eth_utils import to_checksum_address

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


class InvalidAddressError(ValueError):
    """Raised when a string is not a 20-byte hex address."""


def is_valid_address(address: str | None) -> bool:
    if not address:
        return False
    return bool(_EVM_ADDRESS_RE.fullmatch(address.strip()))


@lru_cache(maxsize=4096)
def normalize_address(address: str) -> str:
    """Return the EIP-55 checksummed form of ``address``.

    Mixed-case input is accepted regardless of its checksum; the result is the
    canonical key used for deduplication across data sources.
    """

    if not is_valid_address(address):
        raise InvalidAddressError(f"Invalid address: {address!r}")
    return to_checksum_address(address.strip().lower())


def address_to_topic(address: str) -> str:
    """Left-pad an address to a 32-byte log topic."""

    return "0x" + normalize_address(address)[2:].lower().rjust(64, "0")


def topic_to_address(topic: str) -> str:
    """Extract the checksummed address held in the low 20 bytes of a topic."""

    hex_part = topic[2:] if topic.startswith("0x") else topic
    if len(hex_part) != 64:
        raise InvalidAddressError(f"Invalid address topic: {topic!r}")
    return normalize_address("0x" + hex_part[-40:])


__all__ = [
    "InvalidAddressError",
    "is_valid_address",
    "normalize_address",
    "address_to_topic",
    "topic_to_address",
]
