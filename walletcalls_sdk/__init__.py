"""
walletcalls SDK - EIP-5792 call bundling client.
"""
from .version import __version__
from .client import WalletCallsClient
from .classifier import classify
from .config import ClientSettings, NetworkConfig
from .encoder import decode_chain_id, encode, encode_contract_call
from .exceptions import (
    ErrorKind, WalletCallsError, InvalidBundleError, ValidationError,
    CapabilityError, SubmissionError, StatusQueryError, UnknownBundleError,
    ReceiptResolutionError, MalformedReceiptError, ProtocolViolationError,
    UnclassifiedError
)
from .models import (
    BundleId, BundleIntent, BundleState, BundleStatus, CallDescriptor,
    CallReceipt, ConfirmedStatus, ContractCall, FailedStatus, PendingStatus,
    ReceiptStatus, WireBundle, WireCall
)
from .poller import BundleRegistry, StatusPoller
from .receipts import normalize
from .submitter import BundleSubmitter
from .transport import (
    CustomTransport, HTTPTransport, NodeBackedWallet, RpcResponseError,
    TransportError, WalletTransport, Web3ProviderTransport, get_transport
)

__all__ = [
    "__version__",
    "WalletCallsClient",
    "BundleSubmitter",
    "StatusPoller",
    "BundleRegistry",
    "encode",
    "encode_contract_call",
    "decode_chain_id",
    "normalize",
    "classify",
    "ClientSettings",
    "NetworkConfig",
    "BundleId",
    "BundleIntent",
    "BundleState",
    "BundleStatus",
    "CallDescriptor",
    "CallReceipt",
    "ConfirmedStatus",
    "ContractCall",
    "FailedStatus",
    "PendingStatus",
    "ReceiptStatus",
    "WireBundle",
    "WireCall",
    "ErrorKind",
    "WalletCallsError",
    "InvalidBundleError",
    "ValidationError",
    "CapabilityError",
    "SubmissionError",
    "StatusQueryError",
    "UnknownBundleError",
    "ReceiptResolutionError",
    "MalformedReceiptError",
    "ProtocolViolationError",
    "UnclassifiedError",
    "WalletTransport",
    "CustomTransport",
    "HTTPTransport",
    "Web3ProviderTransport",
    "NodeBackedWallet",
    "RpcResponseError",
    "TransportError",
    "get_transport",
]
