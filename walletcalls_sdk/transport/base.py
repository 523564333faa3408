"""
Transport layer for wallet-facing JSON-RPC requests.

This module provides the abstraction that every transport implementation
follows, regardless of how requests reach the wallet (HTTP, an injected
web3 provider, or an in-process test double).
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a request cannot reach the other side (timeout, refused connection)."""
    pass


class RpcResponseError(Exception):
    """Raised when the remote side answers with a structured JSON-RPC error."""

    def __init__(self, code: Optional[int], message: str, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC error {code}: {message}")

    def to_dict(self) -> dict:
        error = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class WalletTransport(ABC):
    """
    Abstract base class for transports.

    A transport only has to turn ``request(method, params)`` into either a
    result or one of the two exceptions above. It owns its connection
    handling; callers never inspect connection state.
    """

    @abstractmethod
    def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Send one JSON-RPC request.

        Args:
            method: JSON-RPC method name
            params: Positional parameters

        Returns:
            The ``result`` member of the response

        Raises:
            RpcResponseError: If the remote side returned an error object
            TransportError: If the request could not be completed
        """
        pass

    def close(self) -> None:
        """Close any open connections or resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class CustomTransport(WalletTransport):
    """
    Transport backed by a caller-supplied request handler.

    The handler receives ``(method, params)`` and returns the result, raising
    ``RpcResponseError`` or ``TransportError`` on failure.
    """

    def __init__(self, handler: Callable[[str, List[Any]], Any]):
        self.handler = handler

    def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        logger.debug(f"CustomTransport.request {method}")
        return self.handler(method, list(params or []))
