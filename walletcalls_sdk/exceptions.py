"""
Exceptions for the walletcalls SDK.

Every error raised by the bundling and polling paths is a subclass of
:class:`WalletCallsError` and carries the :class:`ErrorKind` it was
classified as.
"""
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """
    Fixed error taxonomy shared by the submission and polling paths.
    """
    INVALID_BUNDLE = "INVALID_BUNDLE"
    VALIDATION = "VALIDATION"
    CAPABILITY = "CAPABILITY"
    TRANSPORT = "TRANSPORT"
    UNKNOWN_BUNDLE = "UNKNOWN_BUNDLE"
    RECEIPT_RESOLUTION = "RECEIPT_RESOLUTION"
    MALFORMED_RECEIPT = "MALFORMED_RECEIPT"
    PROTOCOL_VIOLATION = "PROTOCOL_VIOLATION"
    UNCLASSIFIED = "UNCLASSIFIED"


class WalletCallsError(Exception):
    """Base exception for all walletcalls errors."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        self.code = code
        self.data = data
        super().__init__(message)


class InvalidBundleError(WalletCallsError):
    """Raised when a bundle is malformed before any request is sent."""
    kind = ErrorKind.INVALID_BUNDLE


class ValidationError(WalletCallsError):
    """Raised when the wallet rejects the shape of a request."""
    kind = ErrorKind.VALIDATION


class CapabilityError(WalletCallsError):
    """Raised when the wallet lacks a required capability or version."""
    kind = ErrorKind.CAPABILITY


class SubmissionError(WalletCallsError):
    """Raised when the transport fails while submitting a bundle."""
    kind = ErrorKind.TRANSPORT


class StatusQueryError(WalletCallsError):
    """Raised when the transport fails while querying bundle status."""
    kind = ErrorKind.TRANSPORT


class UnknownBundleError(WalletCallsError):
    """Raised when the wallet has no record of a bundle identifier."""
    kind = ErrorKind.UNKNOWN_BUNDLE


class ReceiptResolutionError(WalletCallsError):
    """Raised when a call's receipt cannot be resolved."""
    kind = ErrorKind.RECEIPT_RESOLUTION


class MalformedReceiptError(WalletCallsError):
    """Raised when a receipt is missing required fields."""
    kind = ErrorKind.MALFORMED_RECEIPT


class ProtocolViolationError(WalletCallsError):
    """Raised when the wallet answers inconsistently with earlier answers."""
    kind = ErrorKind.PROTOCOL_VIOLATION


class UnclassifiedError(WalletCallsError):
    """Raised for error shapes that match no known kind."""
    kind = ErrorKind.UNCLASSIFIED
