from decimal import Decimal, localcontext

import pytest
from eth_abi.abi import decode as abi_decode, encode as abi_encode
from eth_utils import function_signature_to_4byte_selector, to_bytes
from web3 import AsyncWeb3
from web3.providers import AsyncHTTPProvider

from chains.ethereum import ethereum
from clients.evm.base import ADDRESS_ZERO, BaseWeb3Client
from clients.evm.dex.math import Q96, get_tick_at_sqrt_ratio

WETH = ethereum.wrapped_native.contract
# below WETH numerically -> token0
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
# above WETH numerically -> token1
USDT = "0xdAC17F958D2ee523a2206206994597C13D831ec7"

POOL_100 = "0x1000000000000000000000000000000000000100"
POOL_500 = "0x1000000000000000000000000000000000000500"
POOL_3000 = "0x1000000000000000000000000000000000003000"
POOL_10000 = "0x1000000000000000000000000000000000010000"


def ok(types: list[str], values: list) -> tuple[bool, bytes]:
    return True, abi_encode(types, values)


REVERT = (False, b"")


def sqrt_price_x96_for(price: Decimal, decimals0: int, decimals1: int) -> int:
    """sqrtPriceX96 for a human price of token0 in token1."""
    with localcontext() as ctx:
        ctx.prec = 80
        raw = Decimal(price) * Decimal(10) ** (decimals1 - decimals0)
        return int(raw.sqrt() * Q96)


class _PendingAggregate:
    def __init__(self, multicall: "FakeMulticall", calls: list[tuple]):
        self.multicall = multicall
        self.calls = calls

    async def call(self):
        return self.multicall.execute(self.calls)


class FakeMulticall:
    """In-memory Multicall3: routes each call by (target, selector)."""

    def __init__(self):
        self.functions = self
        self.handlers = {}
        self.batches = []
        self.fail_with: Exception | None = None
        self.get_pool_args = []

    def on(self, address: str, signature: str, handler):
        selector = function_signature_to_4byte_selector(signature)
        self.handlers[(address.lower(), selector)] = handler

    def aggregate3(self, calls):
        return _PendingAggregate(self, calls)

    def execute(self, calls):
        if self.fail_with is not None:
            raise self.fail_with

        self.batches.append(list(calls))
        results = []
        for target, _allow_failure, calldata in calls:
            data = to_bytes(hexstr=calldata) if isinstance(calldata, str) else bytes(calldata)
            handler = self.handlers.get((target.lower(), data[:4]))
            results.append(handler(data[4:]) if handler else REVERT)
        return results

    # helpers mirroring the contracts the scanner talks to

    def token(self, address: str, name: str, symbol: str, decimals: int):
        self.on(address, "name()", lambda _: ok(["string"], [name]))
        self.on(address, "symbol()", lambda _: ok(["string"], [symbol]))
        self.on(address, "decimals()", lambda _: ok(["uint8"], [decimals]))

    def balances(self, token: str, balances: dict[str, int]):
        by_holder = {holder.lower(): value for holder, value in balances.items()}

        def balance_of(args: bytes):
            (holder,) = abi_decode(["address"], args)
            if holder.lower() not in by_holder:
                return REVERT
            return ok(["uint256"], [by_holder[holder.lower()]])

        self.on(token, "balanceOf(address)", balance_of)

    def factory(self, address: str, pools: dict[int, str], failing: tuple[int, ...] = ()):
        def get_pool(args: bytes):
            token_a, token_b, fee = abi_decode(["address", "address", "uint24"], args)
            self.get_pool_args.append((token_a, token_b, fee))
            if fee in failing:
                return REVERT
            return ok(["address"], [pools.get(fee, ADDRESS_ZERO)])

        self.on(address, "getPool(address,address,uint24)", get_pool)

    def pool(self, address: str, sqrt_price_x96: int, liquidity: int, tick: int | None = None):
        if tick is None:
            tick = get_tick_at_sqrt_ratio(sqrt_price_x96)
        slot0 = [sqrt_price_x96, tick, 0, 1, 1, 0, True]
        self.on(address, "liquidity()", lambda _: ok(["uint128"], [liquidity]))
        self.on(
            address,
            "slot0()",
            lambda _: ok(["uint160", "int24", "uint16", "uint16", "uint16", "uint8", "bool"], slot0),
        )


class FakeResponse:
    def __init__(self, status: int, payload):
        self.status = status
        self.payload = payload

    async def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Just enough of aiohttp.ClientSession for the price oracle."""

    def __init__(self, status: int = 200, payload=None, error: Exception | None = None):
        self.status = status
        self.payload = payload
        self.error = error
        self.requests = []

    def get(self, url, params=None):
        self.requests.append((url, params))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, self.payload)


@pytest.fixture
def chain_config():
    return ethereum


@pytest.fixture
def w3():
    # never contacted, calldata encoding only
    return AsyncWeb3(AsyncHTTPProvider("http://127.0.0.1:1"))


@pytest.fixture
def multicall(monkeypatch):
    fake = FakeMulticall()
    monkeypatch.setattr(BaseWeb3Client, "_get_multicall_contract", lambda self: fake)
    return fake
