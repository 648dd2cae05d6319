from chains.dto import ChainConfig, WrappedNativeConfig


ethereum = ChainConfig(
    chain_id=1,
    name="ethereum",
    display_name="Ethereum",
    symbol="ETH",
    explorer="https://etherscan.io/",
    rpc_url="https://eth.drpc.org",
    multicall3_address="0xcA11bde05977b3631167028862bE2a173976CA11",
    factory_address="0x1F98431c8aD98523631AE4a59f267346ea31F984",
    wrapped_native=WrappedNativeConfig(
        "Wrapped Ether", "WETH", "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", 18
    ),
    price_feed_id="ethereum",
)

sepolia = ChainConfig(
    chain_id=11155111,
    name="sepolia",
    display_name="Sepolia",
    symbol="ETH",
    explorer="https://sepolia.etherscan.io/",
    rpc_url="https://0xrpc.io/sep",
    multicall3_address="0xcA11bde05977b3631167028862bE2a173976CA11",
    factory_address="0x0227628f3F023bb0B980b67D528571c95c6DaC1c",
    wrapped_native=WrappedNativeConfig(
        "Wrapped Ether", "WETH", "0xfFf9976782d46CC05630D1f6eBAb18b2324d6B14", 18
    ),
    price_feed_id="ethereum",
)
