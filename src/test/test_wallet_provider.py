"""Tests for the Web3 wallet provider against an in-memory eth namespace"""
import asyncio
from types import SimpleNamespace

import pytest
from eth_account import Account
from web3 import Web3

from config import AAVE_V3_ADDRESSES, RPC_ENDPOINTS
from tools.aave_tool import AaveActionProvider
from utils.wallet_provider import Network, Web3WalletProvider

TEST_PRIVATE_KEY = "0x" + "11" * 32
TEST_ADDRESS = Account.from_key(TEST_PRIVATE_KEY).address
RAW_TX_HASH = bytes.fromhex("ab" * 32)
POOL = AAVE_V3_ADDRESSES["base-mainnet"]["POOL"]


class FakeEth:
    def __init__(self):
        self.raw_transactions = []
        self.estimated = []
        self.waited = []

    async def get_transaction_count(self, address, block_identifier):
        return 7

    async def estimate_gas(self, transaction):
        self.estimated.append(transaction)
        return 50_000

    @property
    def gas_price(self):
        return self._gas_price()

    async def _gas_price(self):
        return 1_000_000_000

    async def send_raw_transaction(self, raw_transaction):
        self.raw_transactions.append(raw_transaction)
        return RAW_TX_HASH

    async def wait_for_transaction_receipt(self, tx_hash, timeout):
        self.waited.append((tx_hash, timeout))
        return {"status": 1, "blockNumber": 99}


@pytest.fixture
def wallet():
    provider = Web3WalletProvider(
        rpc_url="http://localhost:8545",
        private_key=TEST_PRIVATE_KEY,
        network_id="base-mainnet",
        chain_id=8453
    )
    provider.w3 = SimpleNamespace(eth=FakeEth())
    return provider


def test_wallet_identity(wallet):
    assert wallet.get_address() == TEST_ADDRESS
    assert wallet.get_network() == Network(protocol_family="evm", network_id="base-mainnet", chain_id=8453)
    assert AaveActionProvider().supports_network(wallet.get_network())
    assert asyncio.run(wallet.get_provider()) is wallet.w3


def test_send_transaction_signs_and_broadcasts(wallet):
    tx_hash = asyncio.run(wallet.send_transaction({
        "to": POOL.lower(),
        "data": "0x1234",
        "from": TEST_ADDRESS,
        "value": 5,
    }))

    assert tx_hash == "0x" + "ab" * 32

    (estimated,) = wallet.w3.eth.estimated
    assert estimated["from"] == TEST_ADDRESS
    assert estimated["to"] == Web3.to_checksum_address(POOL)
    assert estimated["nonce"] == 7
    assert estimated["chainId"] == 8453
    assert estimated["value"] == 5

    (raw,) = wallet.w3.eth.raw_transactions
    assert Account.recover_transaction(raw) == TEST_ADDRESS


def test_send_transaction_keeps_explicit_gas(wallet):
    asyncio.run(wallet.send_transaction({"to": POOL, "data": "0x", "gas": 21_000, "gasPrice": 2}))

    assert wallet.w3.eth.estimated == []
    assert len(wallet.w3.eth.raw_transactions) == 1


def test_wait_for_receipt_uses_timeout(wallet):
    receipt = asyncio.run(wallet.wait_for_transaction_receipt("0x" + "ab" * 32))

    assert receipt["status"] == 1
    assert wallet.w3.eth.waited == [("0x" + "ab" * 32, 120)]


def test_from_env(monkeypatch):
    monkeypatch.setenv("PRIVATE_KEY", TEST_PRIVATE_KEY)

    wallet = Web3WalletProvider.from_env("base-sepolia")

    assert wallet.get_address() == TEST_ADDRESS
    assert wallet.get_network().network_id == "base-sepolia"
    assert wallet.get_network().chain_id == 84532
    assert wallet.w3.provider.endpoint_uri == RPC_ENDPOINTS["base-sepolia"]
    assert not AaveActionProvider().supports_network(wallet.get_network())


def test_from_env_requires_private_key(monkeypatch):
    monkeypatch.delenv("PRIVATE_KEY", raising=False)

    with pytest.raises(ValueError, match="PRIVATE_KEY"):
        Web3WalletProvider.from_env("base-mainnet")


def test_from_env_rejects_unknown_network():
    with pytest.raises(ValueError, match="Unknown network"):
        Web3WalletProvider.from_env("solana-mainnet", private_key=TEST_PRIVATE_KEY)
