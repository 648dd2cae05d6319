import pytest

from chains import registery
from chains.dto import ChainConfig
from chains.ethereum import ethereum
from chains.registery import ChainRegistry
from errors import ConfigurationError


def test_resolve_by_name():
    assert registery.resolve("ethereum") is ethereum
    assert registery.resolve("BSC").chain_id == 56


def test_resolve_by_id():
    assert registery.resolve("11155111").name == "sepolia"
    assert registery.resolve("97").name == "bsc-testnet"


def test_unconfigured_chain():
    with pytest.raises(ConfigurationError, match="Unconfigured chain"):
        registery.resolve("polygon")


def test_duplicate_chain_id():
    with pytest.raises(ConfigurationError):
        ChainRegistry([ethereum, ethereum])


@pytest.mark.parametrize("chain", registery.list(), ids=lambda c: c.name)
def test_every_chain_is_fully_configured(chain: ChainConfig):
    assert chain.factory_address
    assert chain.multicall3_address
    assert chain.wrapped_native.decimals == 18
    assert chain.price_feed_id in ("ethereum", "binancecoin")
