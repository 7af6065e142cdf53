"""
Aave V3 action provider: supply and withdraw through an EVM wallet.

Every action resolves to a human-readable string. Failures are reported as
prefixed error text and never raised to the caller.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union
from pydantic import BaseModel, Field, ValidationError
import logging

from config import (
    AAVE_V3_ADDRESSES,
    ASSET_DECIMALS,
    NATIVE_ASSET,
    SUPPORTED_NETWORK_ID,
    get_network_display_name,
)
from utils.aave_contract_helpers import Pool, TransactionBuilder, WETHGateway
from utils.erc20 import approve, receipt_failed
from utils.units import parse_units
from utils.wallet_provider import EvmWalletProvider, Network

logger = logging.getLogger(__name__)

SUPPLY_ERROR_PREFIX = "Error supplying to Aave"
WITHDRAW_ERROR_PREFIX = "Error withdrawing from Aave"
POOL_APPROVAL_ERROR_PREFIX = "Error approving Aave Pool as spender"
GATEWAY_APPROVAL_ERROR_PREFIX = "Error approving Aave WETH Gateway as spender"

SUPPORTED_ACTIONS = ("supply", "withdraw")


class AaveActionArgs(BaseModel):
    chain: str = Field(description="The blockchain network, currently only 'base-mainnet'")
    amount: str = Field(description="The amount in human-readable decimal format (e.g. '0.1', '100')")
    asset: str = Field(description="The asset symbol (e.g. 'ETH', 'USDC')")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DEPENDENCY = "dependency"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an action: a success message or a tagged error"""
    message: str
    error: Optional[ErrorKind] = None
    prefix: Optional[str] = None
    tx_hash: Optional[str] = None

    @classmethod
    def success(cls, message: str, tx_hash: str) -> "ActionResult":
        return cls(message=message, tx_hash=tx_hash)

    @classmethod
    def failure(cls, kind: ErrorKind, prefix: str, detail: str) -> "ActionResult":
        return cls(message=detail, error=kind, prefix=prefix)

    @property
    def ok(self) -> bool:
        return self.error is None

    def format(self) -> str:
        if self.prefix:
            return f"{self.prefix}: {self.message}"
        return self.message

    def __str__(self):
        return self.format()


class AaveActionError(Exception):
    """Expected failure raised inside an action pipeline"""

    def __init__(self, kind: ErrorKind, detail: str, prefix: Optional[str] = None):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.prefix = prefix


class AaveActionProvider:
    """Supplies to and withdraws from Aave V3 on Base mainnet"""

    def __init__(
        self,
        addresses: Mapping[str, Any] = AAVE_V3_ADDRESSES,
        asset_decimals: Mapping[str, int] = ASSET_DECIMALS,
        network_id: str = SUPPORTED_NETWORK_ID
    ):
        self.addresses = addresses
        self.asset_decimals = asset_decimals
        self.network_id = network_id

    # ===========================================
    # Public actions
    # ===========================================

    async def supply(self, wallet: EvmWalletProvider, args: Union[AaveActionArgs, Mapping[str, Any]]) -> str:
        """
        Supply an asset to Aave.

        Args:
            wallet: Wallet sending the transactions
            args: {"chain", "amount", "asset"}

        Returns:
            Success message with the transaction hash, or an error message
        """
        result = await self.execute("supply", wallet, args)
        return result.format()

    async def withdraw(self, wallet: EvmWalletProvider, args: Union[AaveActionArgs, Mapping[str, Any]]) -> str:
        """
        Withdraw an asset from Aave.

        Args:
            wallet: Wallet sending the transactions
            args: {"chain", "amount", "asset"}

        Returns:
            Success message with the transaction hash, or an error message
        """
        result = await self.execute("withdraw", wallet, args)
        return result.format()

    def supports_network(self, network: Network) -> bool:
        return (
            getattr(network, "protocol_family", None) == "evm"
            and getattr(network, "network_id", None) == self.network_id
        )

    async def execute(self, action: str, wallet: EvmWalletProvider, args) -> ActionResult:
        """Run an action and return its ActionResult"""
        if action == "supply":
            handler, prefix = self._supply, SUPPLY_ERROR_PREFIX
        elif action == "withdraw":
            handler, prefix = self._withdraw, WITHDRAW_ERROR_PREFIX
        else:
            return ActionResult.failure(
                ErrorKind.VALIDATION,
                "Error",
                f"Invalid action: {action}. Must be one of {', '.join(SUPPORTED_ACTIONS)}"
            )

        try:
            return await handler(wallet, self._parse_args(args))
        except AaveActionError as e:
            logger.warning(f"Aave {action} rejected ({e.kind.value}): {e.detail}")
            return ActionResult.failure(e.kind, e.prefix or prefix, e.detail)
        except Exception as e:
            logger.error(f"Error in Aave {action}: {e}")
            return ActionResult.failure(ErrorKind.UNEXPECTED, prefix, str(e))

    # ===========================================
    # Pipelines
    # ===========================================

    async def _supply(self, wallet: EvmWalletProvider, args: AaveActionArgs) -> ActionResult:
        addresses = self._resolve_chain(wallet, args.chain)
        asset = args.asset.upper()
        if asset not in addresses["ASSETS"]:
            raise AaveActionError(ErrorKind.VALIDATION, f"Asset {args.asset} is not supported")

        amount = self._to_atomic(args.amount, asset)
        user = wallet.get_address()
        token_address = addresses["ASSETS"][asset]
        pool = Pool(addresses["POOL"])

        if asset == NATIVE_ASSET:
            gateway = self._gateway(addresses)
            await self._submit(wallet, gateway.deposit_eth(user, amount))

        await self._approve(wallet, token_address, addresses["POOL"], amount, POOL_APPROVAL_ERROR_PREFIX)
        tx_hash = await self._submit(wallet, pool.supply(user, token_address, amount))

        logger.info(f"Supplied {args.amount} {asset} to Aave on {args.chain}. TX: {tx_hash}")
        return ActionResult.success(
            f"Successfully supplied {args.amount} {asset} to Aave. Transaction hash: {tx_hash}",
            tx_hash
        )

    async def _withdraw(self, wallet: EvmWalletProvider, args: AaveActionArgs) -> ActionResult:
        addresses = self._resolve_chain(wallet, args.chain)
        asset = args.asset.upper()
        if asset not in addresses["ASSETS"]:
            raise AaveActionError(ErrorKind.VALIDATION, f"Unsupported asset: {args.asset}")

        amount = self._to_atomic(args.amount, asset)
        user = wallet.get_address()

        if asset == NATIVE_ASSET:
            gateway = self._gateway(addresses)
            await self._approve(
                wallet,
                addresses["ATOKENS"][asset],
                addresses["WETH_GATEWAY"],
                amount,
                GATEWAY_APPROVAL_ERROR_PREFIX
            )
            builders = gateway.withdraw_eth(user, amount)
        else:
            builders = Pool(addresses["POOL"]).withdraw(user, addresses["ASSETS"][asset], amount)

        tx_hash = await self._submit(wallet, builders)

        logger.info(f"Withdrew {args.amount} {asset} from Aave on {args.chain}. TX: {tx_hash}")
        return ActionResult.success(
            f"Successfully withdrew {args.amount} {asset} from Aave. Transaction hash: {tx_hash}",
            tx_hash
        )

    # ===========================================
    # Helpers
    # ===========================================

    @staticmethod
    def _parse_args(args) -> AaveActionArgs:
        if isinstance(args, AaveActionArgs):
            return args
        try:
            return AaveActionArgs.model_validate(args)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'args'}: {error['msg']}"
                for error in e.errors()
            )
            raise AaveActionError(ErrorKind.VALIDATION, f"Invalid arguments: {details}")

    def _resolve_chain(self, wallet: EvmWalletProvider, chain: str) -> Mapping[str, Any]:
        """Check the wallet network and the requested chain, returning its address table"""
        current_network = getattr(wallet.get_network(), "network_id", None)
        if current_network != self.network_id:
            raise AaveActionError(
                ErrorKind.VALIDATION,
                f"Aave is only available on {get_network_display_name(self.network_id)}. "
                f"Current network is {get_network_display_name(current_network)}. "
                f"Please switch to {get_network_display_name(self.network_id)} to interact with Aave",
                prefix="Error"
            )

        addresses = self.addresses.get(chain)
        if chain != self.network_id or addresses is None:
            raise AaveActionError(ErrorKind.VALIDATION, f"Chain {chain} is not supported")
        return addresses

    def _to_atomic(self, amount: str, asset: str) -> int:
        try:
            return parse_units(amount, self.asset_decimals[asset])
        except ValueError as e:
            raise AaveActionError(ErrorKind.VALIDATION, str(e))

    @staticmethod
    def _gateway(addresses: Mapping[str, Any]) -> WETHGateway:
        return WETHGateway(
            gateway_address=addresses["WETH_GATEWAY"],
            weth_address=addresses["ASSETS"][NATIVE_ASSET],
            pool_address=addresses["POOL"]
        )

    @staticmethod
    async def _approve(wallet: EvmWalletProvider, token: str, spender: str, amount: int, error_prefix: str):
        result = await approve(wallet, token, spender, amount)
        if result.startswith("Error"):
            raise AaveActionError(ErrorKind.DEPENDENCY, result, prefix=error_prefix)

    @staticmethod
    async def _submit(wallet: EvmWalletProvider, builders: List[TransactionBuilder]) -> str:
        """Send each transaction in order, waiting for its receipt. Returns the last hash."""
        tx_hash = None
        for builder in builders:
            tx_hash = await wallet.send_transaction(builder.tx())
            receipt = await wallet.wait_for_transaction_receipt(tx_hash)
            if receipt_failed(receipt):
                raise AaveActionError(ErrorKind.UNEXPECTED, f"Transaction {tx_hash} reverted")
        return tx_hash


# ===========================================
# LLM-Friendly Interface with Subtool Pattern
# ===========================================

def create_aave_tool(
    wallet: EvmWalletProvider,
    provider: Optional[AaveActionProvider] = None
) -> Dict[str, Any]:
    """
    Create an Aave tool builder function that returns LLM-callable functions.

    The wallet is bound at creation time; the returned function only takes the
    parameters an LLM needs to supply.

    Args:
        wallet: Wallet used for every operation
        provider: Optional AaveActionProvider (a default one is created otherwise)

    Returns:
        Dictionary containing the configured Aave tool function and metadata
    """
    provider = provider or AaveActionProvider()
    network = wallet.get_network()

    async def aave_operation(
        chain: str,
        amount: str,
        asset: str,
        action: str = "supply"
    ) -> str:
        """
        Execute Aave lending operation (supply or withdraw).

        Args:
            chain: Network id (e.g. "base-mainnet")
            amount: Amount in human-readable format (e.g. "0.1")
            asset: Asset symbol (e.g. "ETH", "USDC")
            action: Operation to perform - "supply" or "withdraw"

        Returns:
            Result message including the transaction hash, or an error message
        """
        args = {"chain": chain, "amount": amount, "asset": asset}
        result = await provider.execute(action, wallet, args)
        return result.format()

    return {
        "tool": aave_operation,
        "metadata": {
            "name": "aave_lending",
            "description": f"Supply or withdraw assets on Aave V3 ({get_network_display_name(provider.network_id)})",
            "network": getattr(network, "network_id", None),
            "supported": provider.supports_network(network),
            "address": wallet.get_address(),
            "parameters": {
                "chain": "Network id (e.g. base-mainnet)",
                "amount": "Amount in human-readable format",
                "asset": "Asset symbol (e.g. ETH, USDC)",
                "action": "Operation type: 'supply' or 'withdraw'"
            }
        }
    }
