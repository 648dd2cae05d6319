from dataclasses import dataclass


@dataclass(frozen=True)
class TokenMeta:
    address: str
    name: str
    symbol: str
    decimals: int
