from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from utils.wallet_provider import EvmWalletProvider, Network

MOCK_ADDRESS = "0x1234567890123456789012345678901234567890"
MOCK_TX_HASH = "0xabcdef1234567890"
MOCK_RECEIPT = {"status": 1, "blockNumber": 1234567}


def make_wallet(network_id: str = "base-mainnet", protocol_family: str = "evm") -> MagicMock:
    wallet = MagicMock(spec=EvmWalletProvider)
    wallet.get_address.return_value = MOCK_ADDRESS
    wallet.get_network.return_value = Network(protocol_family=protocol_family, network_id=network_id)
    wallet.send_transaction = AsyncMock(return_value=MOCK_TX_HASH)
    wallet.wait_for_transaction_receipt = AsyncMock(return_value=MOCK_RECEIPT)
    wallet.get_provider = AsyncMock(return_value=MagicMock())
    return wallet


@pytest.fixture
def mock_wallet():
    return make_wallet()


@pytest.fixture
def mock_approve():
    with patch("tools.aave_tool.approve", new_callable=AsyncMock) as approve:
        approve.return_value = "Approval successful"
        yield approve
