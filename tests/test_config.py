"""
Tests for ClientSettings and NetworkConfig.
"""
import os
import pytest
from unittest.mock import patch

from walletcalls_sdk import WalletCallsClient
from walletcalls_sdk.config import ClientSettings, NetworkConfig
from walletcalls_sdk.models import DEFAULT_VERSION

# Sample network configuration
MOCK_NETWORKS = {
    "test-network": {
        "chainId": 123,
        "rpc": "https://test.example.com"
    }
}


class TestClientSettings:
    """Test ClientSettings.from_env."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = ClientSettings.from_env()

        assert settings.rpc_url is None
        assert settings.timeout == 30
        assert settings.default_version == DEFAULT_VERSION
        assert settings.include_call_chain_id is False

    def test_from_env(self):
        env = {
            "WALLETCALLS_RPC_URL": "https://wallet.example.com",
            "WALLETCALLS_TIMEOUT": "5",
            "WALLETCALLS_DEFAULT_VERSION": "2.0.0",
            "WALLETCALLS_CALL_CHAIN_ID": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = ClientSettings.from_env()

        assert settings.rpc_url == "https://wallet.example.com"
        assert settings.timeout == 5
        assert settings.default_version == "2.0.0"
        assert settings.include_call_chain_id is True

    @pytest.mark.parametrize("timeout", ["abc", "0", "-3"])
    def test_invalid_timeout(self, timeout):
        with patch.dict(os.environ, {"WALLETCALLS_TIMEOUT": timeout}, clear=True):
            with pytest.raises(ValueError, match="WALLETCALLS_TIMEOUT"):
                ClientSettings.from_env()

    def test_client_from_settings(self):
        settings = ClientSettings(rpc_url="https://wallet.example.com", timeout=7, default_version="2.0.0")

        client = WalletCallsClient.from_settings(settings)

        assert client.transport.rpc_url == "https://wallet.example.com"
        assert client.transport.timeout == 7
        assert client.default_version == "2.0.0"

    def test_client_from_settings_without_url(self):
        with pytest.raises(ValueError, match="RPC URL"):
            WalletCallsClient.from_settings(ClientSettings())


class TestNetworkConfig:
    """Test NetworkConfig class."""

    def test_load_networks_cached(self):
        """Networks are read once and then served from the cache."""
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch("importlib.resources.files") as mock_files:
            result = NetworkConfig.load_networks()

            mock_files.assert_not_called()

        assert result == MOCK_NETWORKS

    def test_bundled_networks(self):
        networks = NetworkConfig.load_networks()

        assert networks["ethereum-mainnet"]["chainId"] == 1
        assert networks["anvil"]["chainId"] == 31337

    def test_get_network(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        result = NetworkConfig.get_network("test-network")

        assert result["chainId"] == 123
        assert result["rpc"] == "https://test.example.com"

    def test_get_network_not_found(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with pytest.raises(ValueError) as excinfo:
            NetworkConfig.get_network("non-existent-network")

        assert "Unknown network 'non-existent-network'" in str(excinfo.value)
        assert "test-network" in str(excinfo.value)

    def test_get_chain_id(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        assert NetworkConfig.get_chain_id("test-network") == 123

    def test_get_rpc_url_default(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch.dict(os.environ, {}, clear=True):
            assert NetworkConfig.get_rpc_url("test-network") == "https://test.example.com"

    def test_get_rpc_url_env(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch.dict(os.environ, {"TEST_NETWORK_RPC_URL": "https://env.example.com"}):
            assert NetworkConfig.get_rpc_url("test-network") == "https://env.example.com"

    def test_get_rpc_url_override(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch.dict(os.environ, {"TEST_NETWORK_RPC_URL": "https://env.example.com"}):
            url = NetworkConfig.get_rpc_url("test-network", override="https://override.example.com")

        assert url == "https://override.example.com"

    def test_client_from_network(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS

        with patch.dict(os.environ, {}, clear=True):
            client = WalletCallsClient.from_network("test-network")

        assert client.transport.rpc_url == "https://test.example.com"
