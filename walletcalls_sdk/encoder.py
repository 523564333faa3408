"""
Call encoder: turns a BundleIntent into the wallet_sendCalls wire shape.
"""
import logging
import re
from typing import Any, Dict, Union

from pydantic import ValidationError as PydanticValidationError
from web3 import Web3
from web3.exceptions import Web3Exception

from .exceptions import InvalidBundleError
from .models import BundleIntent, CallDescriptor, ContractCall, WireBundle, WireCall

logger = logging.getLogger(__name__)

HEX_DATA_RE = re.compile(r"^0x(?:[0-9a-fA-F]{2})*$")


def _encode_data(data: Union[bytes, str], index: int) -> str:
    if isinstance(data, (bytes, bytearray)):
        return Web3.to_hex(bytes(data)) if data else "0x"
    if not HEX_DATA_RE.match(data):
        raise InvalidBundleError(f"Call {index} has invalid call data: {data!r}")
    return data


def _encode_call(call: CallDescriptor, index: int, chain_id_hex: str, include_chain_id: bool) -> WireCall:
    if not Web3.is_address(call.to):
        raise InvalidBundleError(f"Call {index} has malformed target address: {call.to!r}")

    value = None
    if call.value is not None:
        if call.value < 0:
            raise InvalidBundleError(f"Call {index} has negative value: {call.value}")
        value = hex(call.value)

    return WireCall(
        to=call.to,
        data=_encode_data(call.data, index),
        value=value,
        chain_id=chain_id_hex if include_chain_id else None,
        capabilities=call.capabilities,
    )


def encode(intent: Union[BundleIntent, Dict[str, Any]], include_call_chain_id: bool = False) -> WireBundle:
    """
    Encode a bundle intent into its wire shape.

    Args:
        intent: BundleIntent (or a mapping with the same fields)
        include_call_chain_id: Also stamp every call with the hex chain id

    Returns:
        WireBundle ready for wallet_sendCalls

    Raises:
        InvalidBundleError: If the call list is empty, the sender or a target
            is not an address, the chain id is not positive, a value is
            negative or call data is not hex
    """
    if not isinstance(intent, BundleIntent):
        try:
            intent = BundleIntent.model_validate(intent)
        except PydanticValidationError as e:
            raise InvalidBundleError(f"Invalid bundle intent: {e}") from e

    if not intent.calls:
        raise InvalidBundleError("Bundle must contain at least one call")

    if not intent.sender or not Web3.is_address(intent.sender):
        raise InvalidBundleError(f"Malformed sender address: {intent.sender!r}")

    if isinstance(intent.chain_id, bool) or intent.chain_id <= 0:
        raise InvalidBundleError(f"Chain id must be a positive integer, got: {intent.chain_id!r}")

    chain_id_hex = hex(intent.chain_id)
    calls = tuple(
        _encode_call(call, index, chain_id_hex, include_call_chain_id)
        for index, call in enumerate(intent.calls)
    )

    wire = WireBundle(
        version=intent.version,
        chain_id=chain_id_hex,
        sender=intent.sender,
        calls=calls,
        capabilities=intent.capabilities,
    )
    logger.debug(f"Encoded bundle of {len(calls)} calls for chain {chain_id_hex}")
    return wire


def decode_chain_id(wire: WireBundle) -> int:
    """Read the integer chain id back out of a wire bundle."""
    return int(wire.chain_id, 16)


_abi_codec = Web3()


def encode_contract_call(contract_call: ContractCall) -> CallDescriptor:
    """
    ABI-encode a contract function call into a CallDescriptor.

    Args:
        contract_call: Target address, ABI, function name and arguments

    Returns:
        CallDescriptor carrying the encoded call data

    Raises:
        InvalidBundleError: If the address is invalid or the arguments do
            not match the ABI
    """
    try:
        address = Web3.to_checksum_address(contract_call.address)
        contract = _abi_codec.eth.contract(address=address, abi=contract_call.abi)
        data = contract.encode_abi(contract_call.function_name, args=list(contract_call.args))
    except (ValueError, TypeError, Web3Exception) as e:
        raise InvalidBundleError(
            f"Cannot encode {contract_call.function_name} for {contract_call.address}: {e}"
        ) from e
    return CallDescriptor(to=address, data=data, value=contract_call.value)
