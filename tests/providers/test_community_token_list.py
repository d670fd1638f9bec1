import httpx
import pytest

from tokenlist.providers.base import TokenListLookupError
from tokenlist.providers.token_list import CommunityTokenList

DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"


def make_list(handler) -> CommunityTokenList:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CommunityTokenList(base_url="https://lists.test/tokens/eth", client=client)


@pytest.mark.asyncio
async def test_lookup_uses_checksummed_file_name():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        return httpx.Response(200, json={"symbol": "DAI", "name": "Dai Stablecoin", "decimals": 18, "address": DAI})

    entry = await make_list(handler).lookup(DAI)

    assert seen["path"] == "/tokens/eth/0x6B175474E89094C44Da98b954EedeAC495271d0F.json"
    assert entry.symbol == "DAI"
    assert entry.decimals == 18


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, text="404: Not Found"),
        httpx.Response(500, text="oops"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"symbol": "DAI"}),
        httpx.Response(200, json={"symbol": "DAI", "decimals": "18"}),
        httpx.Response(200, json={"symbol": "DAI", "decimals": -1}),
        httpx.Response(200, json={"symbol": "DAI", "decimals": 1000}),
        httpx.Response(200, json={"symbol": "", "decimals": 18}),
    ],
)
async def test_lookup_failures(response):
    with pytest.raises(TokenListLookupError):
        await make_list(lambda request: response).lookup(DAI)


@pytest.mark.asyncio
async def test_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TokenListLookupError):
        await make_list(handler).lookup(DAI)
