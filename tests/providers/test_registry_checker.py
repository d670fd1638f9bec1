from unittest.mock import AsyncMock

import pytest

from tokenlist.providers.base import RpcError
from tokenlist.providers.registry import (
    ADDRESSES_SELECTOR,
    STATUS_ABSENT,
    STATUS_CLEARING_REQUESTED,
    STATUS_REGISTERED,
    STATUS_REGISTRATION_REQUESTED,
    RegistryChecker,
)

REGISTRY = "0x" + "12" * 20
TOKEN = "0x" + "34" * 20


def status_result(status: int) -> str:
    return "0x" + hex(status)[2:].rjust(64, "0") + "0" * 63 + "1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,expected",
    [
        (STATUS_ABSENT, False),
        (STATUS_REGISTERED, True),
        (STATUS_REGISTRATION_REQUESTED, False),
        (STATUS_CLEARING_REQUESTED, True),
    ],
)
async def test_status_mapping(status, expected):
    rpc = AsyncMock()
    rpc.eth_call.return_value = status_result(status)
    checker = RegistryChecker(rpc, registry_address=REGISTRY, enabled=True)

    assert await checker.is_registered(TOKEN) is expected

    to, data = rpc.eth_call.await_args.args
    assert to.lower() == REGISTRY
    assert data == ADDRESSES_SELECTOR + "0" * 24 + "34" * 20


@pytest.mark.asyncio
async def test_rpc_failure_means_unregistered():
    rpc = AsyncMock()
    rpc.eth_call.side_effect = RpcError("execution reverted")
    checker = RegistryChecker(rpc, registry_address=REGISTRY, enabled=True)

    assert await checker.is_registered(TOKEN) is False


@pytest.mark.asyncio
async def test_malformed_return_means_unregistered():
    rpc = AsyncMock()
    rpc.eth_call.return_value = "0x"
    checker = RegistryChecker(rpc, registry_address=REGISTRY, enabled=True)

    assert await checker.is_registered(TOKEN) is False


@pytest.mark.asyncio
async def test_disabled_registry_never_calls_out():
    rpc = AsyncMock()
    checker = RegistryChecker(rpc, enabled=False)

    assert await checker.is_registered(TOKEN) is False
    rpc.eth_call.assert_not_awaited()
