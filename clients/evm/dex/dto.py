from dataclasses import dataclass

from chains.dto import ChainConfig
from clients.evm.dto import TokenMeta
from enums.fee import FeeAmount


@dataclass(frozen=True)
class TokenPair:
    token0: TokenMeta
    token1: TokenMeta


@dataclass(frozen=True)
class ScanContext:
    chain: ChainConfig
    # token under analysis
    token: TokenMeta
    wrapped: TokenMeta
    # canonical ordering, shared by discovery and pricing
    pair: TokenPair


@dataclass(frozen=True)
class PoolAddress:
    address: str
    fee: FeeAmount


@dataclass(frozen=True)
class PoolInfoV3:
    address: str
    fee: FeeAmount
    wrapped_reserves_raw: int
    token_reserves_raw: int
    wrapped_reserves: float
    token_reserves: float

    liquidity: int | None = None
    # target token per one wrapped native, 6 significant digits
    price: str | None = None
    price_usd: float | None = None
    tvl: float | None = None

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "fee": int(self.fee),
            "wrapped_reserves_raw": self.wrapped_reserves_raw,
            "token_reserves_raw": self.token_reserves_raw,
            "wrapped_reserves": self.wrapped_reserves,
            "token_reserves": self.token_reserves,
            "liquidity": self.liquidity,
            "price": self.price,
            "price_usd": self.price_usd,
            "tvl": self.tvl,
        }
