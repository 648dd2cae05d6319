from chains.registery import ChainRegistry
from chains.ethereum import ethereum, sepolia
from chains.base import base
from chains.bsc import bsc, bsc_testnet


registery = ChainRegistry([ethereum, sepolia, base, bsc, bsc_testnet])
