"""
Status poller and receipt reconciler.

``StatusPoller.get_status`` performs exactly one wallet_getCallsStatus
request per call. It never loops, sleeps or retries; callers own the polling
cadence and stop polling to cancel.

Observed externally, a bundle id moves PENDING -> PENDING ... -> CONFIRMED
or FAILED. Terminal states are final: a wallet that later reports anything
else for the same id is a protocol violation.
"""
import logging
import threading
from typing import Any, Dict, List, Optional, Tuple, Union

from ._rate_limited_log import rate_limited_log
from .classifier import TRANSPORT_EXCEPTIONS, classify, extract_rpc_error, to_exception
from .exceptions import (
    ErrorKind, ProtocolViolationError, ReceiptResolutionError, StatusQueryError
)
from .models import (
    BundleId, BundleState, BundleStatus, CallReceipt, ConfirmedStatus,
    FailedStatus, PendingStatus
)
from .receipts import normalize
from .transport.base import RpcResponseError, WalletTransport

GET_CALLS_STATUS_METHOD = "wallet_getCallsStatus"


class BundleRegistry:
    """
    Per-session record of issued bundle ids.

    Holds only what reconciliation needs: how many calls each id carried,
    and the first terminal status seen for it. The wallet stays the source
    of truth for everything else.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._call_counts: Dict[BundleId, int] = {}
        self._terminal: Dict[BundleId, BundleStatus] = {}

    def register(self, bundle_id: BundleId, call_count: int) -> None:
        """
        Remember a freshly issued bundle id.

        Raises:
            ProtocolViolationError: If the wallet already issued this id in this session
        """
        with self._lock:
            if bundle_id in self._call_counts:
                raise ProtocolViolationError(f"Wallet reissued bundle id {bundle_id}")
            self._call_counts[bundle_id] = call_count

    def call_count(self, bundle_id: BundleId) -> Optional[int]:
        with self._lock:
            return self._call_counts.get(bundle_id)

    def check_and_record(self, bundle_id: BundleId, status: BundleStatus) -> Optional[BundleStatus]:
        """
        Return the terminal status already seen for an id, recording ``status``
        if it is the first terminal one. Lookup and record happen under one lock.
        """
        with self._lock:
            previous = self._terminal.get(bundle_id)
            if previous is None and status.is_terminal:
                self._terminal[bundle_id] = status
            return previous

    def __contains__(self, bundle_id: BundleId) -> bool:
        with self._lock:
            return bundle_id in self._call_counts


def parse_wallet_state(status: Union[str, int, None]) -> BundleState:
    """
    Map a wallet status onto a BundleState.

    Accepts the string statuses (``PENDING``, ``CONFIRMED``, ``FAILED``) and
    the numeric EIP-5792 codes: 1xx pending, 2xx confirmed, 4xx-6xx failed.

    Raises:
        ProtocolViolationError: For any other value
    """
    if isinstance(status, str) and status.upper() in BundleState.__members__:
        return BundleState(status.upper())
    if isinstance(status, int) and not isinstance(status, bool):
        if 100 <= status < 200:
            return BundleState.PENDING
        if 200 <= status < 300:
            return BundleState.CONFIRMED
        if 400 <= status < 700:
            return BundleState.FAILED
    raise ProtocolViolationError(f"Wallet reported unrecognised bundle status: {status!r}")


def _tx_hashes(status: BundleStatus) -> Tuple[str, ...]:
    return tuple(receipt.transaction_hash for receipt in status.receipts)


class StatusPoller:
    """
    Resolves the consolidated status of a bundle from one wallet query.
    """

    def __init__(
        self,
        transport: WalletTransport,
        registry: Optional[BundleRegistry] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.transport = transport
        self.registry = registry or BundleRegistry()
        self.logger = logger or logging.getLogger(__name__)

    def get_status(self, bundle_id: BundleId, call_count: Optional[int] = None) -> BundleStatus:
        """
        Query the wallet once and reconcile its answer.

        Args:
            bundle_id: Identifier returned when the bundle was submitted
            call_count: Number of calls in the bundle; defaults to the count
                recorded when this session submitted it

        Returns:
            PendingStatus, ConfirmedStatus or FailedStatus

        Raises:
            StatusQueryError: If the transport failed
            UnknownBundleError: If the wallet has no record of the id
            ReceiptResolutionError: If a receipt could not be resolved
            MalformedReceiptError: If a receipt is missing required fields
            ProtocolViolationError: If the answer is inconsistent
        """
        result = self._query(bundle_id)
        if not isinstance(result, dict):
            self.logger.error(f"Wallet returned malformed status for {bundle_id}: {result!r}")
            raise ProtocolViolationError(f"Wallet returned malformed status for {bundle_id}: {result!r}")

        wallet_status = result.get("status")
        state = parse_wallet_state(wallet_status)
        receipts = self._normalize_receipts(bundle_id, result.get("receipts"))

        expected = call_count if call_count is not None else self.registry.call_count(bundle_id)
        status = self._reconcile(bundle_id, state, wallet_status, receipts, expected, result)
        previous = self.registry.check_and_record(bundle_id, status)
        self._check_transition(bundle_id, previous, status)

        if status.is_terminal:
            self.logger.info(f"Bundle {bundle_id} is {status.state.value}")
        else:
            rate_limited_log(
                f"Bundle {bundle_id} pending ({len(status.receipts)} receipts)",
                level="debug",
                interval=30,
                logger_instance=self.logger,
            )
        return status

    def _query(self, bundle_id: BundleId) -> Any:
        try:
            return self.transport.request(GET_CALLS_STATUS_METHOD, [bundle_id])
        except TRANSPORT_EXCEPTIONS as e:
            self.logger.error(f"Status query for {bundle_id} failed: {e}")
            raise StatusQueryError(f"Status query failed: {e}") from e
        except RpcResponseError as e:
            kind = classify(e)
            code, message, data = extract_rpc_error(e)
            self.logger.error(f"Wallet status error for {bundle_id} ({kind.value}): {message}")
            if kind == ErrorKind.TRANSPORT:
                raise StatusQueryError(f"Status query failed: {message}", code=code, data=data) from e
            raise to_exception(kind, f"Status query for {bundle_id} failed: {message}", code=code, data=data) from e

    def _normalize_receipts(self, bundle_id: BundleId, raw_receipts: Any) -> Tuple[CallReceipt, ...]:
        if raw_receipts is None:
            return ()
        if not isinstance(raw_receipts, list):
            raise ProtocolViolationError(f"Wallet returned non-list receipts for {bundle_id}")

        receipts: List[CallReceipt] = []
        for index, raw in enumerate(raw_receipts):
            if raw is None:
                raise ReceiptResolutionError(f"Receipt {index} of bundle {bundle_id} could not be resolved")
            receipts.append(normalize(raw))
        return tuple(receipts)

    def _reconcile(
        self,
        bundle_id: BundleId,
        state: BundleState,
        wallet_status: Any,
        receipts: Tuple[CallReceipt, ...],
        expected: Optional[int],
        result: Dict[str, Any]
    ) -> BundleStatus:
        if state == BundleState.FAILED:
            reason = result.get("error") or result.get("reason") or f"wallet reported status {wallet_status}"
            return FailedStatus(reason=str(reason), wallet_status=wallet_status, receipts=receipts)

        if expected is None:
            if state == BundleState.CONFIRMED and receipts:
                return ConfirmedStatus(receipts=receipts)
            if state == BundleState.CONFIRMED:
                self.logger.warning(f"Wallet reported {bundle_id} confirmed without receipts")
            return PendingStatus(receipts=receipts)

        if len(receipts) > expected:
            raise ProtocolViolationError(
                f"Wallet returned {len(receipts)} receipts for a bundle of {expected} calls"
            )
        if receipts and len(receipts) == expected:
            return ConfirmedStatus(receipts=receipts)
        if state == BundleState.CONFIRMED:
            self.logger.warning(
                f"Wallet reported {bundle_id} confirmed with {len(receipts)} of {expected} receipts"
            )
        return PendingStatus(receipts=receipts)

    def _check_transition(
        self,
        bundle_id: BundleId,
        previous: Optional[BundleStatus],
        status: BundleStatus
    ) -> None:
        if previous is None:
            return
        if status.state != previous.state or _tx_hashes(status) != _tx_hashes(previous):
            self.logger.error(
                f"Bundle {bundle_id} regressed from {previous.state.value} to {status.state.value}"
            )
            raise ProtocolViolationError(
                f"Bundle {bundle_id} was {previous.state.value} and is now reported {status.state.value}"
            )
