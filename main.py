import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace

from chains import registery
from chains.dto import ChainConfig
from clients.evm.scanner import PoolScanner
from config import settings
from errors import PoolScanError

module_logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List Uniswap V3 pools of a token against the wrapped native currency."
    )
    parser.add_argument("chain", help="configured chain name or chain id, e.g. ethereum or 56")
    parser.add_argument("token", help="token contract address")
    return parser.parse_args(argv)


def resolve_chain(selector: str) -> ChainConfig:
    chain = registery.resolve(selector)
    rpc_url = settings.RPC_URLS.get(chain.name)

    if rpc_url:
        chain = replace(chain, rpc_url=rpc_url)

    return chain


async def run(chain: ChainConfig, token_address: str) -> list[dict]:
    async with PoolScanner(chain) as scanner:
        await scanner.verify_chain()
        pools = await scanner.get_pools(token_address)

    return [pool.to_dict() for pool in pools]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        chain = resolve_chain(args.chain)
        pools = asyncio.run(run(chain, args.token))
    except PoolScanError as e:
        module_logger.error(f"Scan failed: {e}")
        return 1

    print(json.dumps(pools, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
