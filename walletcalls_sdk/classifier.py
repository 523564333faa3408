"""
Error classification shared by the submission and polling paths.

Raw errors arrive in several shapes: JSON-RPC error objects, full JSON-RPC
responses, exceptions raised by transports, web3.py exceptions wrapping an
RPC error, or errors this SDK already raised. ``classify`` reduces all of
them to an :class:`ErrorKind`.
"""
import logging
import re
from typing import Any, Dict, Optional, Tuple, Type

import requests
from web3.exceptions import ProviderConnectionError, TimeExhausted

from .exceptions import (
    ErrorKind, WalletCallsError, InvalidBundleError, ValidationError,
    CapabilityError, SubmissionError, UnknownBundleError,
    ReceiptResolutionError, MalformedReceiptError, ProtocolViolationError,
    UnclassifiedError
)
from .transport.base import RpcResponseError, TransportError

logger = logging.getLogger(__name__)

# JSON-RPC 2.0, EIP-1193 and EIP-5792 error codes
CODE_KINDS: Dict[int, ErrorKind] = {
    -32700: ErrorKind.VALIDATION,         # parse error
    -32600: ErrorKind.VALIDATION,         # invalid request
    -32602: ErrorKind.VALIDATION,         # invalid params
    -32601: ErrorKind.CAPABILITY,         # method not found
    4200: ErrorKind.CAPABILITY,           # unsupported method
    5700: ErrorKind.CAPABILITY,           # unsupported non-optional capability
    5710: ErrorKind.CAPABILITY,           # unsupported chain id
    5720: ErrorKind.VALIDATION,           # duplicate id
    5730: ErrorKind.UNKNOWN_BUNDLE,       # unknown bundle id
    5740: ErrorKind.VALIDATION,           # bundle too large
    5750: ErrorKind.CAPABILITY,           # atomic-ready upgrade rejected
    5760: ErrorKind.CAPABILITY,           # atomicity not supported
}

MESSAGE_KINDS = [
    (re.compile(r"unknown bundle|bundle (id )?not found|no such bundle", re.I), ErrorKind.UNKNOWN_BUNDLE),
    (re.compile(r"receipt not found|transaction not found", re.I), ErrorKind.RECEIPT_RESOLUTION),
    (re.compile(r"unsupported (capability|version)|capability not supported", re.I), ErrorKind.CAPABILITY),
]

TRANSPORT_EXCEPTIONS = (
    TransportError,
    requests.RequestException,
    ProviderConnectionError,
    TimeExhausted,
    ConnectionError,
    TimeoutError,
)

EXCEPTION_TYPES: Dict[ErrorKind, Type[WalletCallsError]] = {
    ErrorKind.INVALID_BUNDLE: InvalidBundleError,
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.CAPABILITY: CapabilityError,
    ErrorKind.TRANSPORT: SubmissionError,
    ErrorKind.UNKNOWN_BUNDLE: UnknownBundleError,
    ErrorKind.RECEIPT_RESOLUTION: ReceiptResolutionError,
    ErrorKind.MALFORMED_RECEIPT: MalformedReceiptError,
    ErrorKind.PROTOCOL_VIOLATION: ProtocolViolationError,
    ErrorKind.UNCLASSIFIED: UnclassifiedError,
}


def _error_object(raw: Any) -> Optional[Dict[str, Any]]:
    """Find the JSON-RPC error object inside ``raw``, if it has one."""
    if isinstance(raw, RpcResponseError):
        return raw.to_dict()
    if isinstance(raw, dict):
        if isinstance(raw.get("error"), dict):
            return raw["error"]
        if "code" in raw or "message" in raw:
            return raw
        return None
    # web3 v7 keeps the raw response on the exception
    rpc_response = getattr(raw, "rpc_response", None)
    if isinstance(rpc_response, dict):
        return _error_object(rpc_response)
    # older web3 raised ValueError(error_dict)
    if isinstance(raw, Exception) and raw.args and isinstance(raw.args[0], dict):
        return _error_object(raw.args[0])
    return None


def extract_rpc_error(raw: Any) -> Tuple[Optional[int], str, Any]:
    """
    Pull ``(code, message, data)`` out of a raw error.

    Args:
        raw: Any of the error shapes accepted by :func:`classify`

    Returns:
        Tuple of code (None if absent or not an integer), message and data
    """
    error = _error_object(raw)
    if error is None:
        return None, str(raw), None

    code = error.get("code")
    try:
        code = int(code) if code is not None and not isinstance(code, bool) else None
    except (TypeError, ValueError):
        code = None
    return code, str(error.get("message", "")), error.get("data")


def classify(raw_error: Any) -> ErrorKind:
    """
    Map a raw RPC error to the fixed error taxonomy.

    Args:
        raw_error: JSON-RPC error object, JSON-RPC response, or exception

    Returns:
        The matching ErrorKind; UNCLASSIFIED when nothing matches
    """
    if isinstance(raw_error, WalletCallsError):
        return raw_error.kind
    if isinstance(raw_error, TRANSPORT_EXCEPTIONS):
        return ErrorKind.TRANSPORT

    error = _error_object(raw_error)
    if error is None:
        logger.debug(f"Unrecognised error shape: {type(raw_error).__name__}")
        return ErrorKind.UNCLASSIFIED

    code, message, _ = extract_rpc_error(error)
    if code in CODE_KINDS:
        return CODE_KINDS[code]

    for pattern, kind in MESSAGE_KINDS:
        if pattern.search(message):
            return kind

    return ErrorKind.UNCLASSIFIED


def to_exception(kind: ErrorKind, message: str, code: Optional[int] = None, data: Any = None) -> WalletCallsError:
    """Build the exception instance for an ErrorKind."""
    return EXCEPTION_TYPES[kind](message, code=code, data=data)
