"""
Transports for the walletcalls SDK.

The core only needs ``request(method, params)``; these modules adapt HTTP
endpoints, web3.py providers and plain callables to that contract.
"""
import logging
from typing import Any, Union

from web3 import Web3
from web3.providers import BaseProvider

from .base import CustomTransport, RpcResponseError, TransportError, WalletTransport
from .http import HTTPTransport
from .node_wallet import NodeBackedWallet
from .web3_provider import Web3ProviderTransport

__all__ = [
    'WalletTransport', 'RpcResponseError', 'TransportError', 'CustomTransport',
    'HTTPTransport', 'Web3ProviderTransport', 'NodeBackedWallet', 'get_transport',
]

logger = logging.getLogger(__name__)


def get_transport(target: Union[str, Web3, BaseProvider, WalletTransport, Any], **kwargs) -> WalletTransport:
    """
    Get the transport implementation for a target.

    Args:
        target: RPC URL, Web3 instance, web3 provider, existing transport,
            or a ``handler(method, params)`` callable
        **kwargs: Passed to HTTPTransport when target is a URL

    Returns:
        Transport implementation

    Raises:
        TypeError: If no transport fits the target
    """
    if isinstance(target, WalletTransport):
        return target
    if isinstance(target, str):
        logger.info("Using HTTP transport")
        return HTTPTransport(target, **kwargs)
    if isinstance(target, (Web3, BaseProvider)):
        logger.info("Using web3 provider transport")
        return Web3ProviderTransport(target)
    if callable(target):
        logger.info("Using custom transport")
        return CustomTransport(target)
    raise TypeError(f"Cannot build a transport from {type(target).__name__}")
