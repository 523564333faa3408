"""
Adapter exposing a web3.py provider as a transport.
"""
import logging
from typing import Any, Optional, Sequence, Union

import requests
from web3 import Web3
from web3.providers import BaseProvider

from .base import RpcResponseError, TransportError, WalletTransport

logger = logging.getLogger(__name__)


class Web3ProviderTransport(WalletTransport):
    """
    Routes requests through ``provider.make_request``.

    Useful for injected providers and for the node RPC surface that the
    development wallet resolves receipts against.
    """

    def __init__(self, provider: Union[BaseProvider, Web3]):
        if isinstance(provider, Web3):
            provider = provider.provider
        self.provider = provider

    def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        try:
            response = self.provider.make_request(method, list(params or []))
        except (requests.RequestException, ConnectionError, TimeoutError) as e:
            raise TransportError(f"Provider request {method} failed: {e}") from e

        error = response.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcResponseError(error.get("code"), str(error.get("message", "")), error.get("data"))
            raise RpcResponseError(None, str(error))
        return response.get("result")
