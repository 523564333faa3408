"""
WalletCallsClient - Main client for EIP-5792 call bundling.
"""
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from eth_account.signers.base import BaseAccount
from pydantic import ValidationError as PydanticValidationError

from .classifier import TRANSPORT_EXCEPTIONS, classify, extract_rpc_error, to_exception
from .config import ClientSettings, NetworkConfig
from .encoder import encode, encode_contract_call
from .exceptions import ErrorKind, InvalidBundleError, ProtocolViolationError, StatusQueryError
from .models import (
    DEFAULT_VERSION, BundleId, BundleStatus, CallDescriptor, ContractCall, WireBundle
)
from .poller import BundleRegistry, StatusPoller
from .submitter import BundleSubmitter
from .transport import RpcResponseError, WalletTransport, get_transport

GET_CAPABILITIES_METHOD = "wallet_getCapabilities"

Sender = Union[str, BaseAccount]
CallLike = Union[CallDescriptor, Mapping[str, Any]]


class WalletCallsClient:
    """
    Client for submitting call bundles to a wallet and tracking them.

    This client handles:
    1. Encoding calls into the wallet_sendCalls shape
    2. Submitting bundles (exactly once, never retried)
    3. Reconciling wallet_getCallsStatus answers into a BundleStatus

    Polling is caller-driven: ``get_calls_status`` performs one request per
    invocation. The client remembers which ids it was issued so it can tell
    partial receipt sets from complete ones and detect wallets whose answers
    regress.
    """

    def __init__(
        self,
        transport: Any,
        default_version: Optional[str] = None,
        include_call_chain_id: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the WalletCallsClient

        Args:
            transport: WalletTransport, RPC URL, Web3 instance, web3 provider
                or ``handler(method, params)`` callable
            default_version: wallet_sendCalls version used when a call to
                ``send_calls`` does not pass one (default "1.0")
            include_call_chain_id: Stamp each call with the bundle chain id
            logger: Optional logger instance to use for debug/info logging
        """
        self.transport: WalletTransport = get_transport(transport)
        self.default_version = default_version or DEFAULT_VERSION
        self.include_call_chain_id = include_call_chain_id
        self.logger = logger or logging.getLogger(__name__)

        self.registry = BundleRegistry()
        self.submitter = BundleSubmitter(self.transport, logger=self.logger)
        self.poller = StatusPoller(self.transport, registry=self.registry, logger=self.logger)

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None, **kwargs) -> "WalletCallsClient":
        """
        Create a client from ClientSettings (read from the environment by default).

        Raises:
            ValueError: If no RPC URL is configured
        """
        settings = settings or ClientSettings.from_env()
        if not settings.rpc_url:
            raise ValueError("No RPC URL configured; set WALLETCALLS_RPC_URL")
        transport = get_transport(settings.rpc_url, timeout=settings.timeout, headers=settings.headers)
        return cls(
            transport,
            default_version=settings.default_version,
            include_call_chain_id=settings.include_call_chain_id,
            **kwargs
        )

    @classmethod
    def from_network(cls, network: str, rpc_url: Optional[str] = None, **kwargs) -> "WalletCallsClient":
        """Create a client for a named network from networks.json."""
        url = NetworkConfig.get_rpc_url(network, override=rpc_url)
        return cls(url, **kwargs)

    @staticmethod
    def _address(sender: Sender) -> str:
        return sender.address if isinstance(sender, BaseAccount) else sender

    def encode(
        self,
        sender: Sender,
        chain_id: int,
        calls: Iterable[CallLike],
        version: Optional[str] = None,
        capabilities: Optional[Dict[str, Any]] = None
    ) -> WireBundle:
        """
        Encode calls into the wire shape without sending anything.

        Raises:
            InvalidBundleError: If the bundle is malformed
        """
        intent = {
            "sender": self._address(sender),
            "chain_id": chain_id,
            "calls": list(calls),
            "version": version or self.default_version,
            "capabilities": capabilities,
        }
        return encode(intent, include_call_chain_id=self.include_call_chain_id)

    def send_calls(
        self,
        sender: Sender,
        chain_id: int,
        calls: Iterable[CallLike],
        version: Optional[str] = None,
        capabilities: Optional[Dict[str, Any]] = None
    ) -> BundleId:
        """
        Submit calls as one bundle.

        Args:
            sender: Sending account address (or eth_account account)
            chain_id: Chain the calls execute on
            calls: Ordered calls (CallDescriptor or mappings with to/data/value)
            version: wallet_sendCalls version
            capabilities: Capabilities map, sent verbatim when given

        Returns:
            Bundle id issued by the wallet

        Raises:
            InvalidBundleError: If the bundle is malformed (nothing is sent)
            SubmissionError: If the transport failed
            ValidationError: If the wallet rejected the request shape
            CapabilityError: If the wallet lacks a capability or version
            ProtocolViolationError: If the wallet reissued a known bundle id
        """
        wire = self.encode(sender, chain_id, calls, version=version, capabilities=capabilities)
        bundle_id = self.submitter.submit(wire)
        self.registry.register(bundle_id, len(wire.calls))
        return bundle_id

    def write_contracts(
        self,
        sender: Sender,
        chain_id: int,
        contracts: Iterable[Union[ContractCall, Mapping[str, Any]]],
        version: Optional[str] = None,
        capabilities: Optional[Dict[str, Any]] = None
    ) -> BundleId:
        """
        ABI-encode contract function calls and submit them as one bundle.

        Each entry needs ``address``, ``abi`` and ``function_name``; ``args``
        and ``value`` are optional.
        """
        calls = []
        for contract in contracts:
            if not isinstance(contract, ContractCall):
                try:
                    contract = ContractCall.model_validate(contract)
                except PydanticValidationError as e:
                    raise InvalidBundleError(f"Invalid contract call: {e}") from e
            calls.append(encode_contract_call(contract))
        return self.send_calls(sender, chain_id, calls, version=version, capabilities=capabilities)

    def get_calls_status(self, bundle_id: BundleId, call_count: Optional[int] = None) -> BundleStatus:
        """
        Query the status of a bundle once.

        Args:
            bundle_id: Id returned by ``send_calls``
            call_count: Number of calls in the bundle, for ids this client
                did not submit itself

        Returns:
            PendingStatus, ConfirmedStatus or FailedStatus
        """
        return self.poller.get_status(bundle_id, call_count=call_count)

    def get_capabilities(self, account: Sender) -> Dict[int, Dict[str, Any]]:
        """
        Ask the wallet which capabilities it supports for an account.

        Returns:
            Capabilities keyed by integer chain id

        Raises:
            StatusQueryError: If the transport failed
            CapabilityError: If the wallet does not implement the method
            ProtocolViolationError: If the answer is not a mapping
        """
        address = self._address(account)
        try:
            result = self.transport.request(GET_CAPABILITIES_METHOD, [address])
        except TRANSPORT_EXCEPTIONS as e:
            self.logger.error(f"Capability query failed: {e}")
            raise StatusQueryError(f"Capability query failed: {e}") from e
        except RpcResponseError as e:
            kind = classify(e)
            code, message, data = extract_rpc_error(e)
            self.logger.error(f"Wallet capability error ({kind.value}): {message}")
            if kind == ErrorKind.TRANSPORT:
                raise StatusQueryError(f"Capability query failed: {message}", code=code, data=data) from e
            raise to_exception(kind, f"Capability query failed: {message}", code=code, data=data) from e

        if not isinstance(result, dict):
            raise ProtocolViolationError(f"Wallet returned malformed capabilities: {result!r}")

        capabilities = {}
        for chain_id, chain_capabilities in result.items():
            try:
                key = int(chain_id, 16) if isinstance(chain_id, str) and chain_id.startswith("0x") else int(chain_id)
            except ValueError:
                raise ProtocolViolationError(f"Wallet returned malformed chain id {chain_id!r}")
            capabilities[key] = chain_capabilities
        return capabilities

    def close(self) -> None:
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
