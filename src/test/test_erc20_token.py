"""Tests for the ERC-20 approval helper"""
import asyncio

from web3 import Web3

from config import AAVE_V3_ADDRESSES
from conftest import MOCK_TX_HASH
from utils.erc20 import approve, receipt_failed

BASE = AAVE_V3_ADDRESSES["base-mainnet"]
APPROVE_SELECTOR = Web3.to_hex(Web3.keccak(text="approve(address,uint256)")[:4])


def test_approve_sends_encoded_approval(mock_wallet):
    result = asyncio.run(approve(mock_wallet, BASE["ASSETS"]["USDC"], BASE["POOL"], 100_000_000))

    assert result.startswith("Successfully approved")
    mock_wallet.send_transaction.assert_called_once()
    tx = mock_wallet.send_transaction.call_args.args[0]
    assert tx["to"] == Web3.to_checksum_address(BASE["ASSETS"]["USDC"])
    assert tx["data"] == APPROVE_SELECTOR + (
        BASE["POOL"][2:].lower().rjust(64, "0")
        + hex(100_000_000)[2:].rjust(64, "0")
    )
    mock_wallet.wait_for_transaction_receipt.assert_called_once_with(MOCK_TX_HASH)


def test_approve_reports_reverted_receipt(mock_wallet):
    mock_wallet.wait_for_transaction_receipt.return_value = {"status": 0, "blockNumber": 10}

    result = asyncio.run(approve(mock_wallet, BASE["ASSETS"]["USDC"], BASE["POOL"], 1))

    assert result == f"Error: Approval transaction {MOCK_TX_HASH} reverted"


def test_approve_reports_wallet_errors(mock_wallet):
    mock_wallet.send_transaction.side_effect = RuntimeError("insufficient funds for gas")

    result = asyncio.run(approve(mock_wallet, BASE["ASSETS"]["USDC"], BASE["POOL"], 1))

    assert result == "Error approving tokens: insufficient funds for gas"


def test_receipt_failed():
    assert receipt_failed({"status": 0})
    assert receipt_failed({"status": "reverted"})
    assert not receipt_failed({"status": 1})
    assert not receipt_failed({"status": "success"})
