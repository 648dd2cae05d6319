import logging

from web3 import AsyncWeb3
from web3.providers import AsyncHTTPProvider

from chains.dto import ChainConfig
from clients.evm.dex.dto import PoolInfoV3, ScanContext
from clients.evm.dex.uniswap import UniswapV3Client, sort_tokens
from clients.evm.dto import TokenMeta
from clients.evm.token import TokenService
from errors import ConfigurationError, InvalidTokenError
from services.price import NativePriceOracle

module_logger = logging.getLogger(__name__)


class PoolScanner:
    """Finds and prices the V3 pools of a token against the wrapped native currency.

    One scanner holds one node connection. Each ``get_pools`` call builds its
    own ``ScanContext``; nothing about the scanned token is kept on the instance.
    """

    def __init__(
        self,
        chain_config: ChainConfig,
        w3: AsyncWeb3 | None = None,
        price_oracle: NativePriceOracle | None = None,
    ):
        self.chain_config = chain_config
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(chain_config.rpc_url))
        self.token_service = TokenService(chain_config, self._w3)
        self.uniswap = UniswapV3Client(chain_config, self._w3)
        self.price_oracle = price_oracle or NativePriceOracle()

        wrapped = chain_config.wrapped_native
        self.wrapped_token = TokenMeta(
            address=AsyncWeb3.to_checksum_address(wrapped.contract),
            name=wrapped.name,
            symbol=wrapped.symbol,
            decimals=wrapped.decimals,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.token_service.close()

    async def verify_chain(self):
        chain_id = await self.token_service.get_chain_id()

        if chain_id != self.chain_config.chain_id:
            raise ConfigurationError(
                f"RPC {self.chain_config.rpc_url} serves chain {chain_id}, "
                f"expected {self.chain_config.chain_id} ({self.chain_config.name})"
            )

    def _validate_token_address(self, token_address: str) -> str:
        if not AsyncWeb3.is_address(token_address):
            raise InvalidTokenError("not a valid address", address=token_address)

        token = AsyncWeb3.to_checksum_address(token_address)

        if int(token, 16) == int(self.wrapped_token.address, 16):
            raise InvalidTokenError(
                f"token is the wrapped native {self.wrapped_token.symbol} itself",
                address=token,
            )

        return token

    async def build_context(self, token_address: str) -> ScanContext:
        token_address = self._validate_token_address(token_address)
        token = await self.token_service.fetch_token_meta(token_address)

        return ScanContext(
            chain=self.chain_config,
            token=token,
            wrapped=self.wrapped_token,
            pair=sort_tokens(token, self.wrapped_token),
        )

    async def get_pools(self, token_address: str) -> list[PoolInfoV3]:
        ctx = await self.build_context(token_address)

        addresses = await self.uniswap.get_pool_addresses(ctx)
        reserves = await self.uniswap.get_pools_reserves(ctx, addresses)
        pools = await self.uniswap.get_pools_pricing(ctx, reserves, self.price_oracle)

        module_logger.info(
            f"Scan of {ctx.token.symbol} on {ctx.chain.display_name} done: {len(pools)} pool(s)"
        )
        return pools
