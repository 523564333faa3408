"""
Tests for the call encoder.
"""
import pytest
from pydantic import ValidationError as PydanticValidationError

from walletcalls_sdk import (
    BundleIntent, CallDescriptor, ContractCall, InvalidBundleError,
    decode_chain_id, encode, encode_contract_call
)

from tests.test_helpers import TEST_ACCOUNT, TEST_CONTRACT, MINT_DATA, MINT_ABI


def _intent(**overrides):
    fields = {
        "sender": TEST_ACCOUNT,
        "chain_id": 1,
        "calls": [CallDescriptor(to=TEST_CONTRACT, data=MINT_DATA) for _ in range(3)],
    }
    fields.update(overrides)
    return BundleIntent(**fields)


def test_encode_three_mint_calls():
    """Scenario: three identical mint calls from account A on chain 1"""
    wire = encode(_intent())

    assert wire.to_rpc() == {
        "version": "1.0",
        "chainId": "0x1",
        "from": TEST_ACCOUNT,
        "calls": [
            {"to": TEST_CONTRACT, "data": MINT_DATA},
            {"to": TEST_CONTRACT, "data": MINT_DATA},
            {"to": TEST_CONTRACT, "data": MINT_DATA},
        ],
    }


def test_absent_value_and_capabilities_are_omitted():
    """No value means no key at all, not a zero"""
    rpc = encode(_intent()).to_rpc()

    assert "capabilities" not in rpc
    assert all("value" not in call for call in rpc["calls"])


def test_zero_value_is_kept_distinct_from_no_value():
    calls = [
        CallDescriptor(to=TEST_CONTRACT, data=MINT_DATA, value=0),
        CallDescriptor(to=TEST_CONTRACT, data=MINT_DATA),
        CallDescriptor(to=TEST_CONTRACT, data=MINT_DATA, value=10**18),
    ]
    rpc = encode(_intent(calls=calls)).to_rpc()

    assert rpc["calls"][0]["value"] == "0x0"
    assert "value" not in rpc["calls"][1]
    assert rpc["calls"][2]["value"] == "0xde0b6b3a7640000"


def test_capabilities_passed_through_verbatim():
    capabilities = {"paymasterService": {"url": "https://paymaster.example.com", "optional": None}}
    rpc = encode(_intent(capabilities=capabilities)).to_rpc()

    assert rpc["capabilities"] == capabilities


def test_empty_capabilities_map_is_kept():
    """An explicit empty map is the caller's choice and is sent as given"""
    rpc = encode(_intent(capabilities={})).to_rpc()

    assert rpc["capabilities"] == {}


def test_per_call_capabilities():
    calls = [CallDescriptor(to=TEST_CONTRACT, data=MINT_DATA, capabilities={"permissions": {"id": "0x01"}})]
    rpc = encode(_intent(calls=calls)).to_rpc()

    assert rpc["calls"][0]["capabilities"] == {"permissions": {"id": "0x01"}}


def test_custom_version():
    rpc = encode(_intent(version="2.0.0")).to_rpc()

    assert rpc["version"] == "2.0.0"


def test_bytes_call_data_is_hex_encoded():
    calls = [
        CallDescriptor(to=TEST_CONTRACT, data=bytes.fromhex("1249c58b")),
        CallDescriptor(to=TEST_CONTRACT, data=b""),
    ]
    rpc = encode(_intent(calls=calls)).to_rpc()

    assert rpc["calls"][0]["data"] == MINT_DATA
    assert rpc["calls"][1]["data"] == "0x"


def test_include_call_chain_id():
    rpc = encode(_intent(chain_id=10), include_call_chain_id=True).to_rpc()

    assert rpc["chainId"] == "0xa"
    assert all(call["chainId"] == "0xa" for call in rpc["calls"])


def test_call_order_is_preserved():
    targets = [
        "0x0000000000000000000000000000000000000001",
        "0x0000000000000000000000000000000000000002",
        "0x0000000000000000000000000000000000000003",
    ]
    calls = [CallDescriptor(to=target) for target in targets]
    rpc = encode(_intent(calls=calls)).to_rpc()

    assert [call["to"] for call in rpc["calls"]] == targets


def test_encode_accepts_mapping():
    wire = encode({
        "sender": TEST_ACCOUNT,
        "chain_id": 8453,
        "calls": [{"to": TEST_CONTRACT, "data": MINT_DATA}],
    })

    assert wire.chain_id == "0x2105"
    assert decode_chain_id(wire) == 8453


def test_empty_call_list_rejected():
    with pytest.raises(InvalidBundleError, match="at least one call"):
        encode(_intent(calls=[]))


@pytest.mark.parametrize("sender", ["", "0x1234", "not-an-address", "0xF39FD6E51AAD88F6F4CE6AB8827279CFFFB9226G"])
def test_malformed_sender_rejected(sender):
    with pytest.raises(InvalidBundleError, match="sender"):
        encode(_intent(sender=sender))


@pytest.mark.parametrize("chain_id", [0, -1])
def test_non_positive_chain_id_rejected(chain_id):
    with pytest.raises(InvalidBundleError, match="Chain id"):
        encode(_intent(chain_id=chain_id))


def test_malformed_target_rejected():
    calls = [CallDescriptor(to=TEST_CONTRACT), CallDescriptor(to="0xnothex")]
    with pytest.raises(InvalidBundleError, match="Call 1 has malformed target"):
        encode(_intent(calls=calls))


def test_negative_value_rejected():
    with pytest.raises(InvalidBundleError, match="negative value"):
        encode(_intent(calls=[CallDescriptor(to=TEST_CONTRACT, value=-1)]))


@pytest.mark.parametrize("data", ["1249c58b", "0x123", "0xzz"])
def test_invalid_call_data_rejected(data):
    with pytest.raises(InvalidBundleError, match="invalid call data"):
        encode(_intent(calls=[CallDescriptor(to=TEST_CONTRACT, data=data)]))


def test_invalid_mapping_rejected():
    with pytest.raises(InvalidBundleError, match="Invalid bundle intent"):
        encode({"sender": TEST_ACCOUNT, "chain_id": "mainnet", "calls": []})


def test_call_descriptor_is_immutable():
    call = CallDescriptor(to=TEST_CONTRACT, data=MINT_DATA)
    with pytest.raises(PydanticValidationError):
        call.value = 5


def test_encode_contract_call():
    call = encode_contract_call(ContractCall(address=TEST_CONTRACT.lower(), abi=MINT_ABI, function_name="mint"))

    assert call.to == TEST_CONTRACT
    assert call.data == MINT_DATA
    assert call.value is None


def test_encode_contract_call_unknown_function():
    with pytest.raises(InvalidBundleError, match="Cannot encode burn"):
        encode_contract_call(ContractCall(address=TEST_CONTRACT, abi=MINT_ABI, function_name="burn"))


def test_encode_contract_call_wrong_arguments():
    with pytest.raises(InvalidBundleError):
        encode_contract_call(ContractCall(address=TEST_CONTRACT, abi=MINT_ABI, function_name="mint", args=(1, 2)))
