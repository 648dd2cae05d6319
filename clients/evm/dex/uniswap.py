import logging
from dataclasses import replace

from eth_abi.abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from web3 import AsyncWeb3

from clients.evm.base import ADDRESS_ZERO, BaseWeb3Client
from clients.evm.dex.dto import PoolAddress, PoolInfoV3, ScanContext, TokenPair
from clients.evm.dex.math import V3PoolState
from clients.evm.dto import TokenMeta
from enums.fee import FEE_TIERS, FeeAmount
from errors import DiscoveryPartialFailure, PricingDecodeError, ReserveReadError
from services.price import NativePriceOracle
from utils.utils import human_amount, to_significant

module_logger = logging.getLogger(__name__)

SLOT0_TYPES = ["uint160", "int24", "uint16", "uint16", "uint16", "uint8", "bool"]


def sort_tokens(token_a: TokenMeta, token_b: TokenMeta) -> TokenPair:
    """Canonical pool ordering: the numerically lower address is token0."""
    if int(token_a.address, 16) < int(token_b.address, 16):
        return TokenPair(token_a, token_b)
    return TokenPair(token_b, token_a)


class UniswapV3Client(BaseWeb3Client):
    FEE_TIERS = FEE_TIERS

    FACTORY_ABI = [
        {
            "inputs": [
                {"internalType": "address", "name": "tokenA", "type": "address"},
                {"internalType": "address", "name": "tokenB", "type": "address"},
                {"internalType": "uint24", "name": "fee", "type": "uint24"},
            ],
            "name": "getPool",
            "outputs": [{"internalType": "address", "name": "pool", "type": "address"}],
            "stateMutability": "view",
            "type": "function",
        }
    ]

    POOL_ABI = [
        {
            "inputs": [],
            "name": "slot0",
            "outputs": [
                {"internalType": "uint160", "name": "sqrtPriceX96", "type": "uint160"},
                {"internalType": "int24", "name": "tick", "type": "int24"},
                {"internalType": "uint16", "name": "observationIndex", "type": "uint16"},
                {"internalType": "uint16", "name": "observationCardinality", "type": "uint16"},
                {"internalType": "uint16", "name": "observationCardinalityNext", "type": "uint16"},
                {"internalType": "uint8", "name": "feeProtocol", "type": "uint8"},
                {"internalType": "bool", "name": "unlocked", "type": "bool"},
            ],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [],
            "name": "liquidity",
            "outputs": [{"internalType": "uint128", "name": "", "type": "uint128"}],
            "stateMutability": "view",
            "type": "function",
        },
    ]

    def _get_factory_contract(self):
        return self.w3.eth.contract(
            AsyncWeb3.to_checksum_address(self.chain_config.factory_address),
            abi=self.FACTORY_ABI,
        )

    def _get_pool_contract(self, pool_address: str):
        return self.w3.eth.contract(
            AsyncWeb3.to_checksum_address(pool_address), abi=self.POOL_ABI
        )

    @staticmethod
    def _decode_pool_address(success: bool, data: bytes, fee: FeeAmount) -> str | None:
        if not success or not data:
            raise DiscoveryPartialFailure(f"getPool reverted for fee {fee.label}", fee=fee)

        try:
            pool_address = abi_decode(["address"], data)[0]
        except DecodingError as e:
            raise DiscoveryPartialFailure(
                f"getPool returned undecodable data for fee {fee.label}: {e}", fee=fee
            ) from e

        if pool_address.lower() == ADDRESS_ZERO:
            return None

        return AsyncWeb3.to_checksum_address(pool_address)

    async def get_pool_addresses(self, ctx: ScanContext) -> list[PoolAddress]:
        factory = self._get_factory_contract()
        token0, token1 = ctx.pair.token0.address, ctx.pair.token1.address

        calls = [
            self._create_call(
                factory.address,
                factory.functions.getPool(token0, token1, int(fee))._encode_transaction_data(),
            )
            for fee in self.FEE_TIERS
        ]

        results = await self._aggregate(calls, stage="discovery")

        pools = []
        for fee, (success, data) in zip(self.FEE_TIERS, results):
            try:
                pool_address = self._decode_pool_address(success, data, fee)
            except DiscoveryPartialFailure as e:
                e.address = factory.address
                module_logger.warning(f"Skipping fee tier: {e}")
                continue

            if pool_address is None:
                continue

            pools.append(PoolAddress(address=pool_address, fee=fee))

        module_logger.info(
            f"Found {len(pools)} pool(s) for {ctx.token.symbol}/{ctx.wrapped.symbol}"
            f" on {ctx.chain.display_name}"
        )
        return pools

    @staticmethod
    def _decode_balance(success: bool, data: bytes, pool: PoolAddress, token: TokenMeta) -> int:
        if not success or not data:
            raise ReserveReadError(
                f"balanceOf({pool.address}) on {token.symbol} failed", address=token.address
            )

        try:
            return int(abi_decode(["uint256"], data)[0])
        except DecodingError as e:
            raise ReserveReadError(
                f"balanceOf({pool.address}) on {token.symbol} returned undecodable data: {e}",
                address=token.address,
            ) from e

    async def get_pools_reserves(
        self, ctx: ScanContext, pools: list[PoolAddress]
    ) -> list[PoolInfoV3]:
        wrapped_contract = self._get_erc20_contract(ctx.wrapped.address)
        token_contract = self._get_erc20_contract(ctx.token.address)

        calls = []
        for pool in pools:
            calls.extend([
                self._create_call(
                    wrapped_contract.address,
                    wrapped_contract.functions.balanceOf(pool.address)._encode_transaction_data(),
                ),
                self._create_call(
                    token_contract.address,
                    token_contract.functions.balanceOf(pool.address)._encode_transaction_data(),
                ),
            ])

        results = await self._aggregate(calls, stage="reserves")

        pools_data = []
        for pool, wrapped_result, token_result in zip(pools, results[0::2], results[1::2]):
            wrapped_raw = self._decode_balance(*wrapped_result, pool, ctx.wrapped)
            token_raw = self._decode_balance(*token_result, pool, ctx.token)

            pools_data.append(
                PoolInfoV3(
                    address=pool.address,
                    fee=pool.fee,
                    wrapped_reserves_raw=wrapped_raw,
                    token_reserves_raw=token_raw,
                    wrapped_reserves=human_amount(wrapped_raw, ctx.wrapped.decimals),
                    token_reserves=human_amount(token_raw, ctx.token.decimals),
                )
            )

        return pools_data

    @staticmethod
    def _decode_pool_state(
        ctx: ScanContext,
        pool: PoolInfoV3,
        liquidity_result: tuple[bool, bytes],
        slot0_result: tuple[bool, bytes],
    ) -> V3PoolState:
        liq_ok, liq_bytes = liquidity_result
        slot_ok, slot_bytes = slot0_result

        if not liq_ok or not liq_bytes:
            raise PricingDecodeError("liquidity() call failed", address=pool.address)
        if not slot_ok or not slot_bytes:
            raise PricingDecodeError("slot0() call failed", address=pool.address)

        try:
            liquidity = abi_decode(["uint128"], liq_bytes)[0]
            sqrt_price_x96, tick, *_ = abi_decode(SLOT0_TYPES, slot_bytes)
        except DecodingError as e:
            raise PricingDecodeError(
                f"unexpected liquidity/slot0 shape: {e}", address=pool.address
            ) from e

        try:
            return V3PoolState(
                token0=ctx.pair.token0,
                token1=ctx.pair.token1,
                fee=pool.fee,
                sqrt_price_x96=int(sqrt_price_x96),
                liquidity=int(liquidity),
                tick=int(tick),
            )
        except ValueError as e:
            raise PricingDecodeError(f"inconsistent pool state: {e}", address=pool.address) from e

    async def get_pool_states(
        self, ctx: ScanContext, pools: list[PoolInfoV3]
    ) -> list[V3PoolState]:
        calls = []
        for pool in pools:
            pool_contract = self._get_pool_contract(pool.address)
            calls.extend([
                self._create_call(
                    pool_contract.address,
                    pool_contract.functions.liquidity()._encode_transaction_data(),
                ),
                self._create_call(
                    pool_contract.address,
                    pool_contract.functions.slot0()._encode_transaction_data(),
                ),
            ])

        results = await self._aggregate(calls, stage="pricing")

        return [
            self._decode_pool_state(ctx, pool, liquidity_result, slot0_result)
            for pool, liquidity_result, slot0_result in zip(pools, results[0::2], results[1::2])
        ]

    @staticmethod
    def price_pool(
        ctx: ScanContext, pool: PoolInfoV3, state: V3PoolState, native_price: float
    ) -> PoolInfoV3:
        price = to_significant(state.price_of(ctx.wrapped), 6)
        price_usd = float(price) * native_price
        # both legs at spot, not integrated over ticks
        tvl = price_usd * pool.token_reserves + native_price * pool.wrapped_reserves

        return replace(
            pool,
            liquidity=state.liquidity,
            price=price,
            price_usd=price_usd,
            tvl=tvl,
        )

    async def get_pools_pricing(
        self, ctx: ScanContext, pools: list[PoolInfoV3], price_oracle: NativePriceOracle
    ) -> list[PoolInfoV3]:
        """Attach liquidity, price, USD price and TVL to every pool.

        All-or-nothing: a single undecodable pool aborts the batch. The native
        USD price is fetched once, after the pool state batch.
        """
        if not pools:
            return []

        states = await self.get_pool_states(ctx, pools)
        native_price = await price_oracle.fetch_price(ctx.chain.price_feed_id)

        return [
            self.price_pool(ctx, pool, state, native_price)
            for pool, state in zip(pools, states)
        ]
