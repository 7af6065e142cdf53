"""
ERC-20 helpers shared by the action providers
"""
import logging
from web3 import Web3
from eth_abi import encode

logger = logging.getLogger(__name__)

ERC20_APPROVE_SIGNATURE = "approve(address,uint256)"


def _encode_approve(spender_address: str, amount: int) -> bytes:
    """Encode ERC-20 approve function call data."""
    function_selector = Web3.keccak(text=ERC20_APPROVE_SIGNATURE)[:4]
    encoded_params = encode(
        ["address", "uint256"],
        [Web3.to_checksum_address(spender_address), amount]
    )
    return function_selector + encoded_params


def receipt_failed(receipt) -> bool:
    """True when a receipt reports a reverted transaction"""
    return receipt.get("status") in (0, "reverted")


async def approve(wallet, token_address: str, spender_address: str, amount: int) -> str:
    """
    Approve a spender to move `amount` of a token held by the wallet.

    Args:
        wallet: EvmWalletProvider sending the approval
        token_address: ERC-20 token contract address
        spender_address: Address allowed to spend the tokens
        amount: Allowance in atomic units

    Returns:
        Success message, or a message starting with "Error" on failure
    """
    try:
        tx_hash = await wallet.send_transaction({
            "to": Web3.to_checksum_address(token_address),
            "data": Web3.to_hex(_encode_approve(spender_address, amount)),
        })
        receipt = await wallet.wait_for_transaction_receipt(tx_hash)

        if receipt_failed(receipt):
            return f"Error: Approval transaction {tx_hash} reverted"

        logger.info(f"Approved {spender_address} to spend {amount} of token {token_address}. TX: {tx_hash}")
        return f"Successfully approved {spender_address} to spend {amount} of token {token_address}"

    except Exception as e:
        logger.error(f"Error approving token {token_address}: {e}")
        return f"Error approving tokens: {str(e)}"
