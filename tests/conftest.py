"""
Pytest fixtures for the walletcalls SDK tests.
"""
import pytest
from unittest.mock import MagicMock

from walletcalls_sdk import WalletCallsClient
from walletcalls_sdk._rate_limited_log import reset_rate_limited_log
from walletcalls_sdk.config import NetworkConfig
from walletcalls_sdk.transport import NodeBackedWallet, WalletTransport

from tests.test_helpers import FakeNode, RecordingTransport, TEST_CONTRACT, MINT_DATA


@pytest.fixture(autouse=True)
def _reset_module_state():
    """Clear module-level caches between tests."""
    reset_rate_limited_log()
    NetworkConfig._networks_cache = None
    yield
    reset_rate_limited_log()
    NetworkConfig._networks_cache = None


@pytest.fixture
def node():
    """In-memory node on chain 1 with automine disabled"""
    return FakeNode(chain_id=1)


@pytest.fixture
def wallet(node):
    """Development wallet on top of the fake node, wrapped to record requests"""
    return RecordingTransport(NodeBackedWallet(node, capabilities={"atomicBatch": {"supported": True}}))


@pytest.fixture
def client(wallet):
    return WalletCallsClient(wallet)


@pytest.fixture
def mint_calls():
    """Three identical mint() calls"""
    return [{"to": TEST_CONTRACT, "data": MINT_DATA} for _ in range(3)]


@pytest.fixture
def mock_transport():
    """Transport mock whose responses each test scripts itself"""
    return MagicMock(spec=WalletTransport)
