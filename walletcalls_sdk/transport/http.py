"""
JSON-RPC over HTTP.
"""
import itertools
import logging
import os
import threading
import urllib.parse
from typing import Any, Dict, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter

from .base import RpcResponseError, TransportError, WalletTransport

logger = logging.getLogger(__name__)


class HTTPTransport(WalletTransport):
    """
    Sends JSON-RPC 2.0 requests to a wallet or node over HTTP(S).

    The session is mounted without any retry policy: a wallet_sendCalls
    request that timed out may still have been executed, so replaying it is
    left to the caller.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: int = 30,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize the HTTP transport

        Args:
            rpc_url: JSON-RPC endpoint URL
            timeout: Timeout for each request in seconds
            verify_ssl: Whether to verify SSL certificates
            session: Optional pre-configured requests session
            headers: Extra headers sent with every request

        Raises:
            ValueError: If the URL doesn't use https (unless it's a loopback
                address or WALLETCALLS_INSECURE_RPC=1)
        """
        self._validate_url(rpc_url)
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.headers = headers or {}

        self.session = session or requests.Session()
        self.session.mount("http://", HTTPAdapter(max_retries=0))
        self.session.mount("https://", HTTPAdapter(max_retries=0))

        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()

    @staticmethod
    def _validate_url(url: str) -> None:
        parsed = urllib.parse.urlparse(url)
        host = parsed.hostname or ""
        is_local = host in ("localhost", "127.0.0.1", "::1")
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"Invalid RPC URL '{url}': scheme must be http or https")
        if parsed.scheme != "https" and not is_local:
            if os.environ.get("WALLETCALLS_INSECURE_RPC") != "1":
                raise ValueError(
                    f"RPC URL must use https:// for security (got: {parsed.scheme}://). "
                    "Set WALLETCALLS_INSECURE_RPC=1 to allow HTTP for development."
                )

    def _next_id(self) -> int:
        with self._ids_lock:
            return next(self._ids)

    def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": self._next_id(),
            "method": method,
            "params": list(params or []),
        }
        logger.debug(f"POST {self.rpc_url} {method}")

        try:
            response = self.session.post(
                self.rpc_url,
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.Timeout as e:
            raise TransportError(f"Request {method} to {self.rpc_url} timed out: {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"Request {method} to {self.rpc_url} failed: {e}") from e

        content_type = response.headers.get("Content-Type", "")
        if content_type and "application/json" not in content_type:
            logger.warning(f"Unexpected Content-Type: {content_type} (expected application/json)")

        try:
            body = response.json()
        except ValueError as e:
            if response.status_code >= 400:
                raise TransportError(f"HTTP {response.status_code} from {self.rpc_url}") from e
            raise TransportError(f"Invalid JSON response from {self.rpc_url}: {e}") from e

        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]
            raise RpcResponseError(error.get("code"), str(error.get("message", "")), error.get("data"))

        if response.status_code >= 400:
            raise TransportError(f"HTTP {response.status_code} from {self.rpc_url}")

        if not isinstance(body, dict) or "result" not in body:
            raise TransportError(f"Response from {self.rpc_url} has no result: {body!r}")
        return body["result"]

    def close(self) -> None:
        self.session.close()
