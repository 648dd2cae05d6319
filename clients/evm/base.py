import asyncio
import logging
from abc import ABC

import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception
from web3.providers import AsyncHTTPProvider

from chains.dto import ChainConfig
from errors import ChainReadError

module_logger = logging.getLogger(__name__)

ADDRESS_ZERO = "0x0000000000000000000000000000000000000000"


class BaseWeb3Client(ABC):
    MULTICALL3_ABI = [
        {
            "inputs": [
                {
                    "components": [
                        {
                            "internalType": "address",
                            "name": "target",
                            "type": "address",
                        },
                        {
                            "internalType": "bool",
                            "name": "allowFailure",
                            "type": "bool",
                        },
                        {"internalType": "bytes", "name": "callData", "type": "bytes"},
                    ],
                    "internalType": "struct Multicall3.Call3[]",
                    "name": "calls",
                    "type": "tuple[]",
                }
            ],
            "name": "aggregate3",
            "outputs": [
                {
                    "components": [
                        {"internalType": "bool", "name": "success", "type": "bool"},
                        {
                            "internalType": "bytes",
                            "name": "returnData",
                            "type": "bytes",
                        },
                    ],
                    "internalType": "struct Multicall3.Result[]",
                    "name": "returnData",
                    "type": "tuple[]",
                }
            ],
            "stateMutability": "payable",
            "type": "function",
        }
    ]

    ERC20_ABI = [
        {
            "inputs": [],
            "name": "name",
            "outputs": [{"name": "", "type": "string"}],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [],
            "name": "symbol",
            "outputs": [{"name": "", "type": "string"}],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [],
            "name": "decimals",
            "outputs": [{"name": "", "type": "uint8"}],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [{"name": "owner", "type": "address"}],
            "name": "balanceOf",
            "outputs": [{"name": "", "type": "uint256"}],
            "stateMutability": "view",
            "type": "function",
        },
    ]

    def __init__(self, chain_config: ChainConfig, w3: AsyncWeb3 | None = None):
        self.chain_config = chain_config
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(chain_config.rpc_url))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self._w3.provider.disconnect()

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    @staticmethod
    def _create_call(target: str, calldata: bytes, allow_failure: bool = True) -> tuple:
        return (target, allow_failure, calldata)

    def _get_multicall_contract(self):
        return self.w3.eth.contract(
            AsyncWeb3.to_checksum_address(self.chain_config.multicall3_address),
            abi=self.MULTICALL3_ABI,
        )

    def _get_erc20_contract(self, token_address: str):
        return self.w3.eth.contract(
            AsyncWeb3.to_checksum_address(token_address), abi=self.ERC20_ABI
        )

    async def _aggregate(self, calls: list[tuple], stage: str) -> list[tuple[bool, bytes]]:
        """Run ``calls`` through Multicall3 in one round trip.

        Result i always belongs to call i. Individual reverts come back as
        ``(False, data)``; a failure of the round trip itself raises
        ``ChainReadError`` tagged with ``stage``.
        """
        if not calls:
            return []

        multicall = self._get_multicall_contract()

        try:
            results = await multicall.functions.aggregate3(calls).call()
        except (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ChainReadError(
                f"aggregate3 with {len(calls)} calls failed: {e}",
                stage=stage,
                address=self.chain_config.multicall3_address,
            ) from e

        if len(results) != len(calls):
            raise ChainReadError(
                f"aggregate3 returned {len(results)} results for {len(calls)} calls",
                stage=stage,
                address=self.chain_config.multicall3_address,
            )

        module_logger.debug(f"{stage}: aggregate3 -> {len(calls)} calls")
        return [(bool(success), bytes(data)) for success, data in results]

    async def get_chain_id(self) -> int:
        try:
            return await self.w3.eth.chain_id
        except (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ChainReadError(
                f"eth_chainId failed: {e}",
                stage="config",
                address=self.chain_config.rpc_url,
            ) from e
