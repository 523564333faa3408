"""
Bundle submitter: sends one wallet_sendCalls request and returns the bundle id.
"""
import logging
from typing import Any, Optional

from .classifier import TRANSPORT_EXCEPTIONS, classify, extract_rpc_error, to_exception
from .exceptions import ErrorKind, ProtocolViolationError, SubmissionError
from .models import BundleId, WireBundle
from .transport.base import RpcResponseError, WalletTransport

SEND_CALLS_METHOD = "wallet_sendCalls"


class BundleSubmitter:
    """
    Submits encoded bundles to a wallet.

    Submission is never retried here: resubmitting a bundle that carries
    value transfers could execute them twice. Retrying is the caller's call.
    """

    def __init__(self, transport: WalletTransport, logger: Optional[logging.Logger] = None):
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)

    def submit(self, wire: WireBundle) -> BundleId:
        """
        Submit a bundle.

        Args:
            wire: Encoded bundle

        Returns:
            Opaque bundle id issued by the wallet

        Raises:
            SubmissionError: If the transport failed
            ValidationError: If the wallet rejected the request shape
            CapabilityError: If the wallet lacks a required capability or version
            UnclassifiedError: For wallet errors matching no known kind
            ProtocolViolationError: If the wallet answered without a bundle id
        """
        params = [wire.to_rpc()]
        self.logger.debug(f"Submitting bundle of {len(wire.calls)} calls on chain {wire.chain_id}")

        try:
            result = self.transport.request(SEND_CALLS_METHOD, params)
        except TRANSPORT_EXCEPTIONS as e:
            self.logger.error(f"Bundle submission failed: {e}")
            raise SubmissionError(f"Bundle submission failed: {e}") from e
        except RpcResponseError as e:
            raise self._wallet_error(e) from e

        bundle_id = self._extract_id(result)
        self.logger.info(f"Bundle submitted: {bundle_id}")
        return bundle_id

    def _wallet_error(self, error: RpcResponseError):
        kind = classify(error)
        code, message, data = extract_rpc_error(error)
        self.logger.error(f"Wallet rejected bundle ({kind.value}): {message}")
        if kind == ErrorKind.TRANSPORT:
            return SubmissionError(f"Bundle submission failed: {message}", code=code, data=data)
        return to_exception(kind, f"Wallet rejected bundle: {message}", code=code, data=data)

    def _extract_id(self, result: Any) -> BundleId:
        # EIP-5792 v2 wallets answer with {"id": ..., "capabilities": ...}
        if isinstance(result, dict):
            result = result.get("id")
        if not isinstance(result, str) or not result:
            self.logger.error(f"Wallet returned no bundle id: {result!r}")
            raise ProtocolViolationError(f"Wallet returned no bundle id: {result!r}")
        return result
