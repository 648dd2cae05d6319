import logging

from eth_abi.abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from web3 import AsyncWeb3

from clients.evm.base import BaseWeb3Client
from clients.evm.dto import TokenMeta
from errors import MetadataUnavailable

module_logger = logging.getLogger(__name__)


class TokenService(BaseWeb3Client):
    async def fetch_token_meta(self, token_address: str) -> TokenMeta:
        token = AsyncWeb3.to_checksum_address(token_address)
        contract = self._get_erc20_contract(token)

        calls = [
            self._create_call(
                token, contract.functions.name()._encode_transaction_data()
            ),
            self._create_call(
                token, contract.functions.symbol()._encode_transaction_data()
            ),
            self._create_call(
                token, contract.functions.decimals()._encode_transaction_data()
            ),
        ]

        results = await self._aggregate(calls, stage="metadata")

        fields = ("name", "symbol", "decimals")
        for field, (success, data) in zip(fields, results):
            if not success or not data:
                raise MetadataUnavailable(f"{field}() call failed", address=token)

        (_, name_bytes), (_, symbol_bytes), (_, decimals_bytes) = results

        try:
            name = abi_decode(["string"], name_bytes)[0]
            symbol = abi_decode(["string"], symbol_bytes)[0]
            decimals = abi_decode(["uint8"], decimals_bytes)[0]
        except (DecodingError, UnicodeDecodeError) as e:
            raise MetadataUnavailable(
                f"non-standard token metadata: {e}", address=token
            ) from e

        module_logger.info(f"Resolved token {symbol} ({name}), decimals={decimals}")

        return TokenMeta(
            address=token,
            name=name,
            symbol=symbol,
            decimals=decimals,
        )
