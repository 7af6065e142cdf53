import sys
import logging
import os
from types import MappingProxyType
from dotenv import load_dotenv

# Configure basic logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)-8s %(name)-10s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    stream=sys.stdout
)

load_dotenv()


def _freeze(value):
    """Recursively wrap dicts in read-only mapping proxies"""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


# Network the Aave action provider operates on
SUPPORTED_NETWORK_ID = "base-mainnet"

# Native coin of the supported network, supplied to Aave as WETH
NATIVE_ASSET = "ETH"

# Chain configuration keyed by network id
CHAIN_CONFIG = _freeze({
    "base-mainnet": {
        "chain_id": 8453,
        "name": "Base mainnet",
        "rpc_url": os.getenv("BASE_RPC_URL", "https://mainnet.base.org"),
    },
    "base-sepolia": {
        "chain_id": 84532,
        "name": "Base Sepolia",
        "rpc_url": os.getenv("BASE_SEPOLIA_RPC_URL", "https://sepolia.base.org"),
    },
})

# RPC endpoints configuration (derived from CHAIN_CONFIG)
RPC_ENDPOINTS = _freeze({
    network_id: config["rpc_url"]
    for network_id, config in CHAIN_CONFIG.items()
})

# Aave V3 contract addresses per supported network
AAVE_V3_ADDRESSES = _freeze({
    "base-mainnet": {
        "POOL": "0xA238Dd80C259a72e81d7e4664a9801593F98d1c5",
        "WETH_GATEWAY": "0x8be473dCfA93132658821E67CbEB684ec8Ea2E74",  # WrappedTokenGatewayV3
        "ASSETS": {
            "ETH": "0x4200000000000000000000000000000000000006",  # WETH
            "WETH": "0x4200000000000000000000000000000000000006",
            "USDC": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        },
        "ATOKENS": {
            "ETH": "0xD4a0e0b9149BCee3C920d2E00b5dE09138fd8bb7",  # aBasWETH
            "WETH": "0xD4a0e0b9149BCee3C920d2E00b5dE09138fd8bb7",
            "USDC": "0x4e65fE4DbA92790696d040ac24Aa414708F5c0AB",  # aBasUSDC
        },
    },
})

# Decimal precision of each asset symbol
ASSET_DECIMALS = _freeze({
    "ETH": 18,
    "WETH": 18,
    "USDC": 6,
})


def get_network_display_name(network_id: str) -> str:
    """Human readable name for a network id, falling back to the id itself"""
    config = CHAIN_CONFIG.get(network_id)
    if config:
        return config["name"]
    return network_id
