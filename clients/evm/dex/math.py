"""
Concentrated-liquidity price math.

Integer ports of the on-chain TickMath library plus a small pool-state object
that turns (sqrtPriceX96, tick, liquidity) into token exchange rates:

    price(token1 per token0) = sqrtPriceX96^2 / 2^192 * 10^(decimals0 - decimals1)
    sqrtPriceX96 = sqrt(1.0001^tick) * 2^96
"""

from dataclasses import dataclass
from decimal import Decimal, localcontext

from clients.evm.dto import TokenMeta
from enums.fee import FeeAmount

Q96 = 2**96
Q192 = 2**192

MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

PRICE_PRECISION = 60


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """sqrtPriceX96 at ``tick``, matching TickMath.getSqrtRatioAtTick."""
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"tick {tick} out of range [{MIN_TICK}, {MAX_TICK}]")

    abs_tick = abs(tick)

    ratio = 0xFFFCB933BD6FAD37AA2D162D1A594001 if abs_tick & 0x1 else 0x100000000000000000000000000000000

    if abs_tick & 0x2:
        ratio = (ratio * 0xFFF97272373D413259A46990580E213A) >> 128
    if abs_tick & 0x4:
        ratio = (ratio * 0xFFF2E50F5F656932EF12357CF3C7FDCC) >> 128
    if abs_tick & 0x8:
        ratio = (ratio * 0xFFE5CACA7E10E4E61C3624EAA0941CD0) >> 128
    if abs_tick & 0x10:
        ratio = (ratio * 0xFFCB9843D60F6159C9DB58835C926644) >> 128
    if abs_tick & 0x20:
        ratio = (ratio * 0xFF973B41FA98C081472E6896DFB254C0) >> 128
    if abs_tick & 0x40:
        ratio = (ratio * 0xFF2EA16466C96A3843EC78B326B52861) >> 128
    if abs_tick & 0x80:
        ratio = (ratio * 0xFE5DEE046A99A2A811C461F1969C3053) >> 128
    if abs_tick & 0x100:
        ratio = (ratio * 0xFCBE86C7900A88AEDCFFC83B479AA3A4) >> 128
    if abs_tick & 0x200:
        ratio = (ratio * 0xF987A7253AC413176F2B074CF7815E54) >> 128
    if abs_tick & 0x400:
        ratio = (ratio * 0xF3392B0822B70005940C7A398E4B70F3) >> 128
    if abs_tick & 0x800:
        ratio = (ratio * 0xE7159475A2C29B7443B29C7FA6E889D9) >> 128
    if abs_tick & 0x1000:
        ratio = (ratio * 0xD097F3BDFD2022B8845AD8F792AA5825) >> 128
    if abs_tick & 0x2000:
        ratio = (ratio * 0xA9F746462D870FDF8A65DC1F90E061E5) >> 128
    if abs_tick & 0x4000:
        ratio = (ratio * 0x70D869A156D2A1B890BB3DF62BAF32F7) >> 128
    if abs_tick & 0x8000:
        ratio = (ratio * 0x31BE135F97D08FD981231505542FCFA6) >> 128
    if abs_tick & 0x10000:
        ratio = (ratio * 0x9AA508B5B7A84E1C677DE54F3E99BC9) >> 128
    if abs_tick & 0x20000:
        ratio = (ratio * 0x5D6AF8DEDB81196699C329225EE604) >> 128
    if abs_tick & 0x40000:
        ratio = (ratio * 0x2216E584F5FA1EA926041BEDFE98) >> 128
    if abs_tick & 0x80000:
        ratio = (ratio * 0x48A170391F7DC42444E8FA2) >> 128

    if tick > 0:
        ratio = (2**256 - 1) // ratio

    # Q128.128 -> Q64.96, rounding up
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """Greatest tick whose sqrt ratio is <= ``sqrt_price_x96``."""
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise ValueError(f"sqrtPriceX96 {sqrt_price_x96} out of range")

    ratio = sqrt_price_x96 << 32

    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141

    tick_low = (log_sqrt10001 - 3402992956809132418596140100660247210) >> 128
    tick_high = (log_sqrt10001 + 291339464771989622907027621153398088495) >> 128

    if tick_low == tick_high:
        return tick_low

    return tick_high if get_sqrt_ratio_at_tick(tick_high) <= sqrt_price_x96 else tick_low


def sqrt_price_to_price(sqrt_price_x96: int, decimals0: int, decimals1: int) -> Decimal:
    """Human price of token0 denominated in token1."""
    with localcontext() as ctx:
        ctx.prec = PRICE_PRECISION
        sqrt_p = Decimal(sqrt_price_x96)
        price_raw = (sqrt_p * sqrt_p) / Decimal(Q192)
        return +(price_raw * (Decimal(10) ** (decimals0 - decimals1)))


@dataclass(frozen=True)
class V3PoolState:
    """Spot state of a single pool, token0/token1 in canonical order."""

    token0: TokenMeta
    token1: TokenMeta
    fee: FeeAmount
    sqrt_price_x96: int
    liquidity: int
    tick: int

    def __post_init__(self):
        if int(self.token0.address, 16) >= int(self.token1.address, 16):
            raise ValueError("token0 must have the lower address")
        if self.liquidity < 0:
            raise ValueError(f"negative liquidity {self.liquidity}")
        if not MIN_SQRT_RATIO <= self.sqrt_price_x96 < MAX_SQRT_RATIO:
            raise ValueError(f"sqrtPriceX96 {self.sqrt_price_x96} out of range")

        lower = get_sqrt_ratio_at_tick(self.tick)
        upper = get_sqrt_ratio_at_tick(self.tick + 1) if self.tick < MAX_TICK else MAX_SQRT_RATIO
        # a zeroForOne swap ending on an initialized tick leaves sqrtPriceX96 at the upper bound
        if not lower <= self.sqrt_price_x96 <= upper:
            raise ValueError(
                f"sqrtPriceX96 {self.sqrt_price_x96} is outside tick {self.tick} bounds"
            )

    @property
    def token0_price(self) -> Decimal:
        return sqrt_price_to_price(
            self.sqrt_price_x96, self.token0.decimals, self.token1.decimals
        )

    @property
    def token1_price(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = PRICE_PRECISION
            return Decimal(1) / self.token0_price

    def price_of(self, token: TokenMeta) -> Decimal:
        """Amount of the other token paid for one unit of ``token``."""
        if token.address.lower() == self.token0.address.lower():
            return self.token0_price
        if token.address.lower() == self.token1.address.lower():
            return self.token1_price
        raise ValueError(f"token {token.address} is not in this pool")
