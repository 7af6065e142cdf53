"""
Aave V3 contract helpers that build unsigned transactions for the Pool and the
WETH gateway.

Each entry point returns a list of TransactionBuilder objects; callers submit
them in order through a wallet.
"""
from typing import Any, Dict, List, Optional
from web3 import Web3
from eth_abi import encode

# Aave V3 Pool, WrappedTokenGatewayV3 and WETH9 function signatures
POOL_SUPPLY_SIGNATURE = "supply(address,uint256,address,uint16)"
POOL_WITHDRAW_SIGNATURE = "withdraw(address,uint256,address)"
GATEWAY_WITHDRAW_ETH_SIGNATURE = "withdrawETH(address,uint256,address)"
WETH_DEPOSIT_SIGNATURE = "deposit()"


def _selector(signature: str) -> bytes:
    return Web3.keccak(text=signature)[:4]


def _encode_aave_supply(asset_address: str, amount: int, on_behalf_of: str, referral_code: int = 0) -> bytes:
    """Encode Aave V3 supply function call data."""
    encoded_params = encode(
        ["address", "uint256", "address", "uint16"],
        [Web3.to_checksum_address(asset_address), amount, Web3.to_checksum_address(on_behalf_of), referral_code]
    )
    return _selector(POOL_SUPPLY_SIGNATURE) + encoded_params


def _encode_aave_withdraw(asset_address: str, amount: int, to: str) -> bytes:
    """Encode Aave V3 withdraw function call data."""
    encoded_params = encode(
        ["address", "uint256", "address"],
        [Web3.to_checksum_address(asset_address), amount, Web3.to_checksum_address(to)]
    )
    return _selector(POOL_WITHDRAW_SIGNATURE) + encoded_params


def _encode_gateway_withdraw_eth(pool_address: str, amount: int, to: str) -> bytes:
    """Encode WrappedTokenGatewayV3 withdrawETH function call data."""
    encoded_params = encode(
        ["address", "uint256", "address"],
        [Web3.to_checksum_address(pool_address), amount, Web3.to_checksum_address(to)]
    )
    return _selector(GATEWAY_WITHDRAW_ETH_SIGNATURE) + encoded_params


def _validate_amount(amount: int):
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValueError(f"Amount must be a positive integer in atomic units, got {amount!r}")


class TransactionBuilder:
    """Unsigned transaction produced by a contract helper"""

    def __init__(self, to: str, data: bytes, sender: str, value: int = 0):
        self.to = Web3.to_checksum_address(to)
        self.data = data
        self.sender = Web3.to_checksum_address(sender)
        self.value = value

    def tx(self) -> Dict[str, Any]:
        return {
            "to": self.to,
            "data": Web3.to_hex(self.data),
            "from": self.sender,
            "value": self.value,
        }

    def __repr__(self):
        return f"TransactionBuilder(to={self.to}, value={self.value})"


class Pool:
    """Builds supply and withdraw transactions for an Aave V3 Pool"""

    def __init__(self, pool_address: str):
        self.pool_address = Web3.to_checksum_address(pool_address)

    def supply(
        self,
        user: str,
        reserve: str,
        amount: int,
        on_behalf_of: Optional[str] = None,
        referral_code: int = 0
    ) -> List[TransactionBuilder]:
        """
        Supply an ERC-20 reserve to the pool.

        The pool must already be approved to spend `amount` of `reserve`.

        Args:
            user: Address sending the transaction
            reserve: Token address of the reserve
            amount: Amount in atomic units
            on_behalf_of: Address receiving the aTokens (defaults to user)
            referral_code: Aave referral code
        """
        _validate_amount(amount)
        call_data = _encode_aave_supply(
            asset_address=reserve,
            amount=amount,
            on_behalf_of=on_behalf_of or user,
            referral_code=referral_code
        )
        return [TransactionBuilder(to=self.pool_address, data=call_data, sender=user)]

    def withdraw(
        self,
        user: str,
        reserve: str,
        amount: int,
        to: Optional[str] = None
    ) -> List[TransactionBuilder]:
        """Withdraw an ERC-20 reserve from the pool to `to` (defaults to user)."""
        _validate_amount(amount)
        call_data = _encode_aave_withdraw(
            asset_address=reserve,
            amount=amount,
            to=to or user
        )
        return [TransactionBuilder(to=self.pool_address, data=call_data, sender=user)]


class WETHGateway:
    """Moves the native coin in and out of the pool through WETH"""

    def __init__(self, gateway_address: str, weth_address: str, pool_address: str):
        self.gateway_address = Web3.to_checksum_address(gateway_address)
        self.weth_address = Web3.to_checksum_address(weth_address)
        self.pool_address = Web3.to_checksum_address(pool_address)

    def deposit_eth(self, user: str, amount: int) -> List[TransactionBuilder]:
        """Wrap `amount` wei of the native coin into WETH held by user."""
        _validate_amount(amount)
        return [
            TransactionBuilder(
                to=self.weth_address,
                data=_selector(WETH_DEPOSIT_SIGNATURE),
                sender=user,
                value=amount
            )
        ]

    def withdraw_eth(self, user: str, amount: int, to: Optional[str] = None) -> List[TransactionBuilder]:
        """
        Withdraw WETH from the pool and receive it unwrapped.

        The gateway must already be approved to spend `amount` of the user's aWETH.
        """
        _validate_amount(amount)
        call_data = _encode_gateway_withdraw_eth(
            pool_address=self.pool_address,
            amount=amount,
            to=to or user
        )
        return [TransactionBuilder(to=self.gateway_address, data=call_data, sender=user)]
