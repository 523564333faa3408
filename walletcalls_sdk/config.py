"""
Configuration for the walletcalls SDK.

Settings come from environment variables; named networks come from the
bundled ``networks.json``.
"""
import importlib.resources
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .models import DEFAULT_VERSION

logger = logging.getLogger(__name__)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


@dataclass
class ClientSettings:
    """
    Client settings.

    Attributes:
        rpc_url: Default wallet endpoint (WALLETCALLS_RPC_URL)
        timeout: HTTP timeout in seconds (WALLETCALLS_TIMEOUT, default 30)
        default_version: wallet_sendCalls version (WALLETCALLS_DEFAULT_VERSION)
        include_call_chain_id: Stamp each call with the chain id
            (WALLETCALLS_CALL_CHAIN_ID)
    """
    rpc_url: Optional[str] = None
    timeout: int = 30
    default_version: str = DEFAULT_VERSION
    include_call_chain_id: bool = False
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """
        Read settings from the environment.

        Raises:
            ValueError: If WALLETCALLS_TIMEOUT is not a positive integer
        """
        timeout_raw = os.environ.get("WALLETCALLS_TIMEOUT", "30")
        try:
            timeout = int(timeout_raw)
        except ValueError:
            raise ValueError(f"WALLETCALLS_TIMEOUT must be an integer (got: {timeout_raw!r})")
        if timeout <= 0:
            raise ValueError(f"WALLETCALLS_TIMEOUT must be positive (got: {timeout})")

        return cls(
            rpc_url=os.environ.get("WALLETCALLS_RPC_URL") or None,
            timeout=timeout,
            default_version=os.environ.get("WALLETCALLS_DEFAULT_VERSION", DEFAULT_VERSION),
            include_call_chain_id=_env_flag("WALLETCALLS_CALL_CHAIN_ID"),
        )


class NetworkConfig:
    """Lookup of named networks."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network definitions, caching them after the first read.

        Returns:
            Mapping of network name to its configuration
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("walletcalls_sdk").joinpath("networks.json")
            cls._networks_cache = json.loads(resource.read_text(encoding="utf-8"))
            logger.debug(f"Loaded {len(cls._networks_cache)} network definitions")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration of a named network.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL of a network.

        Precedence: ``override``, then ``<NETWORK>_RPC_URL`` from the
        environment, then the bundled default.
        """
        if override:
            return override
        env_name = network.upper().replace("-", "_") + "_RPC_URL"
        env_url = os.environ.get(env_name)
        if env_url:
            return env_url
        return cls.get_network(network)["rpc"]
