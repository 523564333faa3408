"""
Data models for the walletcalls SDK.
"""
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

BundleId = str

DEFAULT_VERSION = "1.0"


class CallDescriptor(BaseModel):
    """A single contract call inside a bundle"""
    model_config = ConfigDict(frozen=True)

    to: str
    data: Union[bytes, str] = b""
    value: Optional[int] = None
    capabilities: Optional[Dict[str, Any]] = None


class BundleIntent(BaseModel):
    """Everything needed to encode one wallet_sendCalls request"""
    model_config = ConfigDict(frozen=True)

    sender: str
    chain_id: int
    calls: Tuple[CallDescriptor, ...]
    version: str = DEFAULT_VERSION
    capabilities: Optional[Dict[str, Any]] = None


class WireCall(BaseModel):
    """Wire shape of one call"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: str
    data: str
    value: Optional[str] = None
    chain_id: Optional[str] = Field(None, alias="chainId")
    capabilities: Optional[Dict[str, Any]] = None

    def to_rpc(self) -> Dict[str, Any]:
        call: Dict[str, Any] = {"to": self.to, "data": self.data}
        if self.value is not None:
            call["value"] = self.value
        if self.chain_id is not None:
            call["chainId"] = self.chain_id
        if self.capabilities is not None:
            call["capabilities"] = self.capabilities
        return call


class WireBundle(BaseModel):
    """Wire shape of the single wallet_sendCalls parameter"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str
    chain_id: str = Field(..., alias="chainId")
    sender: str = Field(..., alias="from")
    calls: Tuple[WireCall, ...]
    capabilities: Optional[Dict[str, Any]] = None

    def to_rpc(self) -> Dict[str, Any]:
        """
        Build the JSON-RPC parameter object.

        Keys for absent optional members are left out entirely, so a wallet
        never sees a capabilities map or a zero value the caller did
        not ask for.
        """
        bundle: Dict[str, Any] = {
            "version": self.version,
            "chainId": self.chain_id,
            "from": self.sender,
            "calls": [call.to_rpc() for call in self.calls],
        }
        if self.capabilities is not None:
            bundle["capabilities"] = self.capabilities
        return bundle


class ReceiptStatus(str, Enum):
    SUCCESS = "success"
    REVERTED = "reverted"


class CallReceipt(BaseModel):
    """Canonical receipt of one mined call"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    block_hash: Optional[str] = Field(None, alias="blockHash")
    block_number: Optional[int] = Field(None, alias="blockNumber")
    gas_used: Optional[int] = Field(None, alias="gasUsed")
    logs: List[Dict[str, Any]] = Field(default_factory=list)
    status: ReceiptStatus
    transaction_hash: str = Field(..., alias="transactionHash")

    def to_rpc(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class BundleState(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class PendingStatus(BaseModel):
    """No receipts yet, or only some of them"""
    model_config = ConfigDict(frozen=True)

    state: Literal[BundleState.PENDING] = BundleState.PENDING
    receipts: Tuple[CallReceipt, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return False


class ConfirmedStatus(BaseModel):
    """Every call has a receipt, in submission order"""
    model_config = ConfigDict(frozen=True)

    state: Literal[BundleState.CONFIRMED] = BundleState.CONFIRMED
    receipts: Tuple[CallReceipt, ...]

    @property
    def is_terminal(self) -> bool:
        return True


class FailedStatus(BaseModel):
    """The wallet gave up on the bundle"""
    model_config = ConfigDict(frozen=True)

    state: Literal[BundleState.FAILED] = BundleState.FAILED
    reason: str
    wallet_status: Optional[Union[int, str]] = None
    receipts: Tuple[CallReceipt, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return True


BundleStatus = Annotated[
    Union[PendingStatus, ConfirmedStatus, FailedStatus],
    Field(discriminator="state"),
]


class ContractCall(BaseModel):
    """A contract function call to be ABI-encoded into a CallDescriptor"""
    model_config = ConfigDict(frozen=True)

    address: str
    abi: List[Dict[str, Any]]
    function_name: str
    args: Tuple[Any, ...] = ()
    value: Optional[int] = None
