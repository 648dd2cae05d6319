import aiohttp
import pytest

from errors import OracleUnavailable
from services.price import NativePriceOracle
from conftest import FakeSession


@pytest.mark.asyncio
async def test_fetch_price():
    session = FakeSession(payload={"ethereum": {"usd": 3012.5}})
    oracle = NativePriceOracle(base_url="https://feed.test/api/v3/", session=session)

    assert await oracle.fetch_price("ethereum") == 3012.5
    assert session.requests == [
        ("https://feed.test/api/v3/simple/price", {"ids": "ethereum", "vs_currencies": "usd"})
    ]


@pytest.mark.asyncio
async def test_http_error_status():
    oracle = NativePriceOracle(session=FakeSession(status=500, payload={}))

    with pytest.raises(OracleUnavailable, match="HTTP 500"):
        await oracle.fetch_price("ethereum")


@pytest.mark.asyncio
async def test_network_error():
    session = FakeSession(error=aiohttp.ClientConnectionError("connection reset"))
    oracle = NativePriceOracle(session=session)

    with pytest.raises(OracleUnavailable, match="request failed"):
        await oracle.fetch_price("binancecoin")


@pytest.mark.asyncio
async def test_invalid_json():
    oracle = NativePriceOracle(session=FakeSession(payload=ValueError("Expecting value")))

    with pytest.raises(OracleUnavailable):
        await oracle.fetch_price("ethereum")


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"ethereum": {}},
        {"ethereum": {"eur": 2800}},
        {"ethereum": {"usd": "n/a"}},
        {"ethereum": {"usd": 0}},
        {"ethereum": {"usd": float("inf")}},
        {"ethereum": {"usd": "Infinity"}},
        {"ethereum": {"usd": float("nan")}},
        ["ethereum"],
    ],
)
@pytest.mark.asyncio
async def test_missing_or_malformed_price(payload):
    oracle = NativePriceOracle(session=FakeSession(payload=payload))

    with pytest.raises(OracleUnavailable) as exc_info:
        await oracle.fetch_price("ethereum")

    assert exc_info.value.stage == "oracle"

