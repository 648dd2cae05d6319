from chains.dto import ChainConfig, WrappedNativeConfig


base = ChainConfig(
    chain_id=8453,
    name="base",
    display_name="Base",
    symbol="ETH",
    explorer="https://basescan.org/",
    rpc_url="https://base.drpc.org",
    multicall3_address="0xcA11bde05977b3631167028862bE2a173976CA11",
    factory_address="0x33128a8fC17869897dcE68Ed026d694621f6FDfD",
    wrapped_native=WrappedNativeConfig(
        "Wrapped Ether", "WETH", "0x4200000000000000000000000000000000000006", 18
    ),
    price_feed_id="ethereum",
)
