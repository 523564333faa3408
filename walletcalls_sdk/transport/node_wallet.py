"""
Development wallet backed by a node's JSON-RPC.

``NodeBackedWallet`` answers the wallet-facing methods itself and executes
each call as a plain transaction on the node (for example a local anvil or
hardhat node with unlocked accounts). It is meant for tests and local
development, where no real bundling wallet is available.
"""
import logging
import threading
import uuid
from typing import Any, Dict, List, Optional, Sequence

from .base import RpcResponseError, WalletTransport

logger = logging.getLogger(__name__)

RECEIPT_FIELDS = ("blockHash", "blockNumber", "gasUsed", "logs", "status", "transactionHash")


class NodeBackedWallet(WalletTransport):
    """
    Simulates an EIP-5792 wallet on top of a node transport.

    Each call in a bundle is first simulated with ``eth_call`` and then sent
    with ``eth_sendTransaction`` from the bundle's ``from`` account, in
    order. Bundle ids are random and never reused.
    """

    def __init__(
        self,
        node: WalletTransport,
        supported_versions: Sequence[str] = ("1.0",),
        capabilities: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the development wallet.

        Args:
            node: Transport reaching the node
            supported_versions: wallet_sendCalls versions this wallet accepts
            capabilities: Capabilities advertised for the node's chain
        """
        self.node = node
        self.supported_versions = tuple(supported_versions)
        self.capabilities = capabilities or {}
        self._bundles: Dict[str, List[str]] = {}
        self._lock = threading.RLock()

    def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        params = list(params or [])
        if method == "wallet_sendCalls":
            return self._send_calls(params)
        if method == "wallet_getCallsStatus":
            return self._get_calls_status(params)
        if method == "wallet_getCapabilities":
            return self._get_capabilities(params)
        raise RpcResponseError(-32601, f"Method not found: {method}")

    def _chain_id(self) -> str:
        return hex(int(self.node.request("eth_chainId", []), 16))

    def _send_calls(self, params: List[Any]) -> str:
        if len(params) != 1 or not isinstance(params[0], dict):
            raise RpcResponseError(-32602, "wallet_sendCalls expects a single bundle object")
        bundle = params[0]

        for field in ("version", "chainId", "from", "calls"):
            if field not in bundle:
                raise RpcResponseError(-32602, f"Missing bundle field: {field}")

        if bundle["version"] not in self.supported_versions:
            raise RpcResponseError(-32000, f"Unsupported version {bundle['version']}")

        for name, capability in (bundle.get("capabilities") or {}).items():
            optional = isinstance(capability, dict) and capability.get("optional")
            if name not in self.capabilities and not optional:
                raise RpcResponseError(5700, f"Unsupported non-optional capability: {name}")

        chain_id = self._chain_id()
        if int(bundle["chainId"], 16) != int(chain_id, 16):
            raise RpcResponseError(5710, f"Unsupported chain id {bundle['chainId']}")

        hashes = []
        for call in bundle["calls"]:
            tx = {"from": bundle["from"], "to": call["to"], "data": call.get("data", "0x")}
            if call.get("value") is not None:
                tx["value"] = call["value"]
            self.node.request("eth_call", [tx, "latest"])
            hashes.append(self.node.request("eth_sendTransaction", [tx]))

        bundle_id = "0x" + uuid.uuid4().hex
        with self._lock:
            self._bundles[bundle_id] = hashes
        logger.debug(f"NodeBackedWallet stored bundle {bundle_id} with {len(hashes)} transactions")
        return bundle_id

    def _get_calls_status(self, params: List[Any]) -> Dict[str, Any]:
        if len(params) != 1 or not isinstance(params[0], str):
            raise RpcResponseError(-32602, "wallet_getCallsStatus expects a single bundle id")
        bundle_id = params[0]

        with self._lock:
            hashes = self._bundles.get(bundle_id)
        if hashes is None:
            raise RpcResponseError(5730, f"Unknown bundle id: {bundle_id}")

        receipts = []
        for tx_hash in hashes:
            try:
                receipt = self.node.request("eth_getTransactionReceipt", [tx_hash])
            except RpcResponseError as e:
                raise RpcResponseError(-32000, f"Receipt not found for {tx_hash}: {e.message}") from e
            if receipt is None:
                # later calls cannot be mined before earlier ones
                break
            receipts.append({field: receipt.get(field) for field in RECEIPT_FIELDS})

        if len(receipts) < len(hashes):
            return {"status": "PENDING", "receipts": receipts}
        return {"status": "CONFIRMED", "receipts": receipts}

    def _get_capabilities(self, params: List[Any]) -> Dict[str, Any]:
        return {self._chain_id(): dict(self.capabilities)}

    def close(self) -> None:
        self.node.close()
