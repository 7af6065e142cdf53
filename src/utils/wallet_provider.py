"""
EVM wallet abstraction used by the action providers, plus a Web3 implementation
backed by a local private key.
"""
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

logger = logging.getLogger(__name__)

DEFAULT_RECEIPT_TIMEOUT = 120


@dataclass(frozen=True)
class Network:
    """Network a wallet is connected to"""
    protocol_family: str
    network_id: Optional[str] = None
    chain_id: Optional[int] = None


class EvmWalletProvider(ABC):
    """Wallet interface consumed by the action providers"""

    @abstractmethod
    def get_address(self) -> str:
        ...

    @abstractmethod
    def get_network(self) -> Network:
        ...

    @abstractmethod
    async def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """Sign and broadcast a transaction, returning its hash"""

    @abstractmethod
    async def wait_for_transaction_receipt(self, tx_hash: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def get_provider(self) -> Any:
        ...


class Web3WalletProvider(EvmWalletProvider):
    """
    Wallet that signs locally with an eth_account key and broadcasts through
    an AsyncWeb3 HTTP provider.
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        network_id: str,
        chain_id: int,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    ):
        self.w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self.account = Account.from_key(private_key)
        self.network_id = network_id
        self.chain_id = chain_id
        self.receipt_timeout = receipt_timeout

    @classmethod
    def from_env(cls, network_id: str, private_key: Optional[str] = None) -> "Web3WalletProvider":
        """
        Create a wallet for a configured network.

        Args:
            network_id: Network id from CHAIN_CONFIG (e.g. "base-mainnet")
            private_key: Optional private key (defaults to PRIVATE_KEY env var)
        """
        from config import CHAIN_CONFIG, RPC_ENDPOINTS

        if not private_key:
            private_key = os.getenv("PRIVATE_KEY")
            if not private_key:
                raise ValueError("PRIVATE_KEY not provided and not found in environment")

        chain_config = CHAIN_CONFIG.get(network_id)
        if not chain_config:
            raise ValueError(f"Unknown network: {network_id}")

        return cls(
            rpc_url=RPC_ENDPOINTS[network_id],
            private_key=private_key,
            network_id=network_id,
            chain_id=chain_config["chain_id"]
        )

    def get_address(self) -> str:
        return self.account.address

    def get_network(self) -> Network:
        return Network(protocol_family="evm", network_id=self.network_id, chain_id=self.chain_id)

    async def get_provider(self) -> AsyncWeb3:
        return self.w3

    async def send_transaction(self, transaction: Dict[str, Any]) -> str:
        address = self.account.address
        tx = {
            "to": Web3.to_checksum_address(transaction["to"]),
            "data": transaction.get("data", "0x"),
            "value": int(transaction.get("value") or 0),
            "chainId": self.chain_id,
            "nonce": await self.w3.eth.get_transaction_count(address, "pending"),
        }

        tx["gas"] = transaction.get("gas") or await self.w3.eth.estimate_gas({**tx, "from": address})
        tx["gasPrice"] = transaction.get("gasPrice") or await self.w3.eth.gas_price

        signed_tx = self.account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash = Web3.to_hex(tx_hash)

        logger.info(f"Sent transaction {tx_hash} to {tx['to']} (nonce {tx['nonce']})")
        return tx_hash

    async def wait_for_transaction_receipt(self, tx_hash: str) -> Dict[str, Any]:
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        logger.info(f"Transaction {tx_hash} mined in block {receipt['blockNumber']} with status {receipt['status']}")
        return receipt
