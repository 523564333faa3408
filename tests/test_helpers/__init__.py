"""
Shared helpers and constants for the walletcalls SDK tests.
"""
from .fake_node import FakeNode, RecordingTransport, REVERT_SELECTOR, TRANSFER_TOPIC

# anvil account #0
TEST_PRIV_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ACCOUNT = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
TEST_CONTRACT = "0xFBA3912Ca04dd458c843e2EE08967fC04f3579c2"
MINT_DATA = "0x1249c58b"
TEST_RPC_URL = "https://wallet.example.com/rpc"

MINT_ABI = [
    {
        "inputs": [],
        "name": "mint",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]

RAW_RECEIPT = {
    "blockHash": "0x" + "ab" * 32,
    "blockNumber": "0xf86cc3",
    "gasUsed": "0x13232",
    "logs": [
        {
            "address": TEST_CONTRACT,
            "data": "0x",
            "logIndex": "0x0",
            "removed": False,
            "topics": [TRANSFER_TOPIC],
            "transactionHash": "0x" + "11" * 32,
        }
    ],
    "status": "0x1",
    "transactionHash": "0x" + "11" * 32,
}


def raw_receipt(tx_byte: str = "11", status: str = "0x1"):
    """Copy of RAW_RECEIPT with its own transaction hash."""
    receipt = dict(RAW_RECEIPT)
    receipt["transactionHash"] = "0x" + tx_byte * 32
    receipt["status"] = status
    return receipt
