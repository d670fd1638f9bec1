import json

import httpx
import pytest

from tokenlist.providers.base import RpcError
from tokenlist.providers.rpc import JsonRpcClient


def make_rpc(handler) -> JsonRpcClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JsonRpcClient(url="https://rpc.test", client=client)


@pytest.mark.asyncio
async def test_call_returns_result_and_sends_jsonrpc_envelope():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x10"})

    rpc = make_rpc(handler)
    assert await rpc.call("eth_blockNumber", []) == "0x10"
    assert seen["body"]["jsonrpc"] == "2.0"
    assert seen["body"]["method"] == "eth_blockNumber"
    assert seen["body"]["params"] == []


@pytest.mark.asyncio
async def test_request_ids_increase():
    ids = []

    def handler(request: httpx.Request) -> httpx.Response:
        ids.append(json.loads(request.content)["id"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": ids[-1], "result": "0x1"})

    rpc = make_rpc(handler)
    await rpc.call("eth_chainId", [])
    await rpc.call("eth_chainId", [])
    assert ids == [1, 2]


@pytest.mark.asyncio
async def test_error_response_raises_rpc_error_with_code():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "query returned more than 10000 results"}},
        )

    rpc = make_rpc(handler)
    with pytest.raises(RpcError) as exc_info:
        await rpc.get_logs({"fromBlock": "earliest"})
    assert exc_info.value.code == -32005
    assert "10000 results" in str(exc_info.value)


@pytest.mark.asyncio
async def test_http_failure_raises_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    rpc = make_rpc(handler)
    with pytest.raises(RpcError):
        await rpc.eth_call("0x" + "1" * 40, "0x18160ddd")


@pytest.mark.asyncio
async def test_transport_failure_raises_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    rpc = make_rpc(handler)
    with pytest.raises(RpcError):
        await rpc.call("eth_blockNumber", [])

