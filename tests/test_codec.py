"""Tests for contract argument encoding and return value translation."""

from __future__ import annotations

import pytest
from stellar_sdk import Keypair, StrKey, scval, xdr

from soroban_relay.codec import (
    ORDER_PARAMS_SCHEMA,
    ArgType,
    coerce_integer,
    decode,
    encode,
    encode_order_params,
    encode_struct,
    to_native,
    validate_address,
)
from soroban_relay.constants import I64_MAX, I64_MIN
from soroban_relay.exceptions import ValidationError
from soroban_relay.types import OrderParams


def _corrupt_checksum(address: str) -> str:
    return address[:-1] + ("B" if address[-1] == "A" else "A")


class TestAddress:
    """Test address validation and encoding."""

    def test_account_round_trip(self, account_address):
        encoded = encode(account_address, ArgType.ADDRESS)
        assert encoded.type is ArgType.ADDRESS
        assert decode(encoded, ArgType.ADDRESS) == account_address

    def test_contract_round_trip(self, contract_address):
        encoded = encode(contract_address, "address")
        assert decode(encoded.sc_val, "address") == contract_address

    @pytest.mark.parametrize("value", ["", "GABC", "X" * 56, 12345, None])
    def test_structural_failures(self, value):
        with pytest.raises(ValidationError) as excinfo:
            encode(value, ArgType.ADDRESS, field="sender")
        assert excinfo.value.rule == "address_format"
        assert excinfo.value.field == "sender"

    def test_bad_checksum_is_reported_separately(self, account_address):
        with pytest.raises(ValidationError) as excinfo:
            validate_address(_corrupt_checksum(account_address), "sender")
        assert excinfo.value.rule == "address_checksum"

    def test_contract_only_prefix(self, account_address):
        with pytest.raises(ValidationError) as excinfo:
            validate_address(account_address, "contract", prefixes=("C",))
        assert excinfo.value.rule == "address_format"


class TestBytes32:
    """Test fixed 32-byte values."""

    def test_accepts_prefixed_and_bare_hex(self):
        bare = "ab" * 32
        assert encode("0x" + bare, ArgType.BYTES32).value == bytes.fromhex(bare)
        assert encode(bare.upper(), ArgType.BYTES32).value == bytes.fromhex(bare)

    def test_decodes_to_lowercase_hex(self):
        encoded = encode("0x" + "CD" * 32, ArgType.BYTES32)
        assert decode(encoded, ArgType.BYTES32) == "cd" * 32

    @pytest.mark.parametrize("value", ["0x1234", "zz" * 32, "ab" * 33, "0X" + "ab" * 32, 7])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError) as excinfo:
            encode(value, ArgType.BYTES32, field="order_id")
        assert excinfo.value.rule == "bytes32_format"


class TestIntegers:
    """Test i64 and i128 coercion and ranges."""

    def test_i64_boundaries(self):
        assert decode(encode(I64_MAX, ArgType.I64), ArgType.I64) == I64_MAX
        assert decode(encode(I64_MIN, ArgType.I64), ArgType.I64) == I64_MIN

    @pytest.mark.parametrize("value", [I64_MAX + 1, I64_MIN - 1])
    def test_i64_out_of_range(self, value):
        with pytest.raises(ValidationError) as excinfo:
            encode(value, ArgType.I64)
        assert excinfo.value.rule == "out_of_range"

    def test_i128_accepts_strings(self):
        encoded = encode("1000000000000000000000", ArgType.I128)
        assert encoded.value == 10**21
        assert decode(encoded, ArgType.I128) == 10**21

    def test_i128_out_of_range(self):
        with pytest.raises(ValidationError) as excinfo:
            encode(2**127, ArgType.I128)
        assert excinfo.value.rule == "out_of_range"

    @pytest.mark.parametrize("value", [True, 1.5, "12.5", "abc", None, "\u0661\u0662"])
    def test_not_an_integer(self, value):
        with pytest.raises(ValidationError) as excinfo:
            coerce_integer(value, "amount")
        assert excinfo.value.rule == "not_an_integer"


class TestStrings:
    def test_round_trip(self):
        assert decode(encode("hash-value", ArgType.STRING), ArgType.STRING) == "hash-value"

    def test_empty(self):
        with pytest.raises(ValidationError) as excinfo:
            encode("", ArgType.STRING)
        assert excinfo.value.rule == "empty_string"

    def test_not_a_string(self):
        with pytest.raises(ValidationError) as excinfo:
            encode(b"bytes", ArgType.STRING)
        assert excinfo.value.rule == "not_a_string"


def test_unsupported_type():
    with pytest.raises(ValidationError) as excinfo:
        encode(1, "u256")
    assert excinfo.value.rule == "unsupported_type"


def test_order_params_map_has_sorted_symbol_keys(contract_address):
    sender = Keypair.random().public_key
    params = OrderParams(
        order_id="0x" + "01" * 32,
        token=contract_address,
        sender=sender,
        amount=1000,
        rate=1,
        sender_fee_recipient=sender,
        sender_fee=0,
        refund_address=sender,
        message_hash="msg",
    )

    sc_val = encode_order_params(params)

    assert sc_val.type == xdr.SCValType.SCV_MAP
    entries = sc_val.map.sc_map
    assert len(entries) == 9
    keys = [scval.from_symbol(entry.key) for entry in entries]
    assert keys == sorted(ORDER_PARAMS_SCHEMA)

    native = to_native(sc_val)
    assert native["amount"] == "1000"
    assert native["rate"] == "1"
    assert native["order_id"] == "01" * 32
    assert native["sender"] == sender
    assert native["token"] == contract_address


def test_encode_struct_reports_missing_fields():
    with pytest.raises(ValidationError) as excinfo:
        encode_struct({"amount": 1}, ORDER_PARAMS_SCHEMA, field="order_params")
    assert excinfo.value.rule == "missing_field"
    assert "token" in excinfo.value.value


class TestToNative:
    """Test translation of simulated return values."""

    def test_scalars(self):
        assert to_native(scval.to_void()) is None
        assert to_native(scval.to_bool(True)) is True
        assert to_native(scval.to_uint32(7)) == 7
        assert to_native(scval.to_int32(-7)) == -7
        assert to_native(scval.to_int64(5)) == "5"
        assert to_native(scval.to_uint128(2**100)) == str(2**100)
        assert to_native(scval.to_symbol("ok")) == "ok"

    def test_accepts_base64_xdr(self):
        assert to_native(scval.to_int128(-42).to_xdr()) == "-42"

    def test_vec_and_address(self):
        contract = StrKey.encode_contract(bytes(32))
        value = scval.to_vec([scval.to_address(contract), scval.to_bytes(b"\x01\x02")])
        assert to_native(value) == [contract, "0102"]
