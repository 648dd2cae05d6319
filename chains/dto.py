from dataclasses import dataclass


@dataclass(frozen=True)
class WrappedNativeConfig:
    name: str
    symbol: str
    contract: str
    decimals: int


@dataclass(frozen=True)
class ChainConfig:
    chain_id: int
    name: str
    display_name: str
    symbol: str
    explorer: str
    rpc_url: str
    multicall3_address: str
    factory_address: str
    wrapped_native: WrappedNativeConfig
    # asset id understood by the native price feed
    price_feed_id: str
