from chains.dto import ChainConfig, WrappedNativeConfig


bsc = ChainConfig(
    chain_id=56,
    name="bsc",
    display_name="BSC",
    symbol="BNB",
    explorer="https://bscscan.com/",
    rpc_url="https://bsc.rpc.blxrbdn.com",
    multicall3_address="0xcA11bde05977b3631167028862bE2a173976CA11",
    factory_address="0xdB1d10011AD0Ff90774D0C6Bb92e5C5c8b4461F7",
    wrapped_native=WrappedNativeConfig(
        "Wrapped BNB", "WBNB", "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c", 18
    ),
    price_feed_id="binancecoin",
)

bsc_testnet = ChainConfig(
    chain_id=97,
    name="bsc-testnet",
    display_name="BSC Testnet",
    symbol="tBNB",
    explorer="https://testnet.bscscan.com/",
    rpc_url="https://data-seed-prebsc-1-s1.bnbchain.org:8545",
    multicall3_address="0xcA11bde05977b3631167028862bE2a173976CA11",
    factory_address="0x0BFbCF9fa4f9C56B0F40a671Ad40E0805A091865",
    wrapped_native=WrappedNativeConfig(
        "Wrapped BNB", "WBNB", "0xae13d989daC2f0dEbFf460aC112a837C89BAa7cd", 18
    ),
    price_feed_id="binancecoin",
)
