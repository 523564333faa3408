#!/usr/bin/env python3
"""
Example of bundling calls against a local anvil node.

Start a node first (``anvil``), then run this script. The development
wallet executes each call as a plain transaction from an unlocked anvil
account.
"""
import os
import time

from web3 import Web3

from walletcalls_sdk import (
    NetworkConfig,
    NodeBackedWallet,
    WalletCallsClient,
    Web3ProviderTransport,
)

# anvil account #0
SENDER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
RECIPIENT = "0x70997970C51812dc3A04C807Ca5Ba2C8C2a6b6Cf"


def main():
    """
    Demonstrate sending a bundle and polling it until it settles.

    This example shows how to:
    1. Wrap a node in the development wallet
    2. Send a bundle of two value transfers
    3. Poll the bundle status and print its receipts
    """
    rpc_url = NetworkConfig.get_rpc_url("anvil", override=os.environ.get("RPC_URL"))
    chain_id = NetworkConfig.get_chain_id("anvil")

    node = Web3ProviderTransport(Web3.HTTPProvider(rpc_url))
    wallet = NodeBackedWallet(node, capabilities={"atomicBatch": {"supported": False}})

    with WalletCallsClient(wallet) as client:
        print(f"Capabilities: {client.get_capabilities(SENDER)}")

        bundle_id = client.send_calls(
            sender=SENDER,
            chain_id=chain_id,
            calls=[
                {"to": RECIPIENT, "value": 10**15},
                {"to": RECIPIENT, "value": 2 * 10**15},
            ],
        )
        print(f"Bundle id: {bundle_id}")

        status = client.get_calls_status(bundle_id)
        while not status.is_terminal:
            time.sleep(1)
            status = client.get_calls_status(bundle_id)

        print(f"Bundle {status.state.value}")
        for receipt in status.receipts:
            print(f"  {receipt.transaction_hash} block={receipt.block_number} gas={receipt.gas_used}")


if __name__ == "__main__":
    main()
