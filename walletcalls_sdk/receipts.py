"""
Receipt normalization.

Wallets and nodes report receipts with hex-string quantities, plain integers,
``HexBytes`` values (web3.py) or already-decoded statuses. ``normalize``
maps all of them onto :class:`CallReceipt`.
"""
from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from .exceptions import MalformedReceiptError
from .models import CallReceipt, ReceiptStatus

REQUIRED_FIELDS = ("transactionHash", "status")

_STATUS_MAP = {
    "success": ReceiptStatus.SUCCESS,
    "0x1": ReceiptStatus.SUCCESS,
    "1": ReceiptStatus.SUCCESS,
    "reverted": ReceiptStatus.REVERTED,
    "0x0": ReceiptStatus.REVERTED,
    "0": ReceiptStatus.REVERTED,
}


def parse_quantity(value: Any, field: str) -> Optional[int]:
    """
    Parse an unsigned integer that may arrive as hex string, decimal string or int.

    Raises:
        MalformedReceiptError: If the value is not a non-negative integer
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise MalformedReceiptError(f"Receipt field {field} is not a quantity: {value!r}")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        try:
            result = int(value, 16) if value.lower().startswith("0x") else int(value, 10)
        except ValueError:
            raise MalformedReceiptError(f"Receipt field {field} is not a quantity: {value!r}")
    else:
        raise MalformedReceiptError(f"Receipt field {field} is not a quantity: {value!r}")

    if result < 0:
        raise MalformedReceiptError(f"Receipt field {field} is negative: {value!r}")
    return result


def parse_status(value: Any) -> ReceiptStatus:
    if isinstance(value, ReceiptStatus):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str) and value.lower() in _STATUS_MAP:
        return _STATUS_MAP[value.lower()]
    raise MalformedReceiptError(f"Unrecognised receipt status: {value!r}")


def _to_hex(value: Any) -> Any:
    """Convert bytes to 0x hex, descending into nested mappings and lists."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, Mapping):
        return {key: _to_hex(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_hex(item) for item in value]
    return value


def normalize(raw_receipt: Mapping[str, Any]) -> CallReceipt:
    """
    Convert a raw receipt into a CallReceipt.

    Args:
        raw_receipt: Receipt mapping as returned by a wallet or node

    Returns:
        Normalized CallReceipt

    Raises:
        MalformedReceiptError: If required fields are missing or a field
            cannot be parsed
    """
    if not isinstance(raw_receipt, Mapping):
        raise MalformedReceiptError(f"Receipt must be a mapping, got {type(raw_receipt).__name__}")

    receipt = {key: _to_hex(value) for key, value in dict(raw_receipt).items()}

    missing = [field for field in REQUIRED_FIELDS if receipt.get(field) is None]
    if missing:
        raise MalformedReceiptError(f"Receipt missing required fields: {', '.join(missing)}")

    logs = receipt.get("logs")
    if logs is None:
        logs = []
    elif not isinstance(logs, (list, tuple)):
        raise MalformedReceiptError(f"Receipt logs must be a list, got {type(logs).__name__}")

    try:
        return CallReceipt(
            blockHash=receipt.get("blockHash"),
            blockNumber=parse_quantity(receipt.get("blockNumber"), "blockNumber"),
            gasUsed=parse_quantity(receipt.get("gasUsed"), "gasUsed"),
            logs=list(logs),
            status=parse_status(receipt["status"]),
            transactionHash=receipt["transactionHash"],
        )
    except PydanticValidationError as e:
        raise MalformedReceiptError(f"Invalid receipt: {e}") from e
