"""Conversion between domain values and Soroban contract arguments (``SCVal``).

Every argument the relay places in a contract invocation passes through
:func:`encode`, which validates the value against its declared type before
producing the wire representation. The module performs no I/O.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stellar_sdk import StrKey, scval, xdr

from .constants import I64_MAX, I64_MIN
from .exceptions import ValidationError
from .utils import strip_hex_prefix

ADDRESS_LENGTH = 56
BYTES32_HEX_LENGTH = 64

_HEX32_RE = re.compile(r"[0-9a-fA-F]{64}")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class ArgType(str, Enum):
    """Contract argument types accepted by the codec."""

    ADDRESS = "address"
    BYTES32 = "bytes"
    I64 = "i64"
    I128 = "i128"
    STRING = "string"


@dataclass(frozen=True)
class EncodedValue:
    """A validated domain value together with its wire encoding."""

    type: ArgType
    value: Any
    sc_val: xdr.SCVal


# ----------------------------------------------------------------------
# Validation predicates
# ----------------------------------------------------------------------
def validate_address(
    value: Any, field: str = "address", *, prefixes: tuple[str, ...] = ("G", "C")
) -> str:
    """Check the structure and checksum of a StrKey account/contract address."""

    if (
        not isinstance(value, str)
        or len(value) != ADDRESS_LENGTH
        or not value.startswith(prefixes)
    ):
        raise ValidationError(
            f"Invalid {field} address: {value}",
            field=field,
            value=value,
            details={"rule": "address_format", "prefixes": list(prefixes)},
        )

    if value.startswith("G"):
        valid = StrKey.is_valid_ed25519_public_key(value)
    else:
        valid = StrKey.is_valid_contract(value)

    if not valid:
        raise ValidationError(
            f"Invalid {field} address checksum: {value}",
            field=field,
            value=value,
            details={"rule": "address_checksum"},
        )

    return value


def coerce_integer(value: Any, field: str) -> int:
    """Coerce a native integer or an integer string to ``int``."""

    if isinstance(value, bool):
        raise ValidationError(
            f"Invalid {field}: must be a valid number, got {value}",
            field=field,
            value=value,
            details={"rule": "not_an_integer"},
        )

    if isinstance(value, int):
        return value

    if isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        return int(value.strip())

    raise ValidationError(
        f"Invalid {field}: must be a valid number, got {value}",
        field=field,
        value=value,
        details={"rule": "not_an_integer"},
    )


def decode_bytes32(value: Any, field: str) -> bytes:
    if not isinstance(value, str) or not _HEX32_RE.fullmatch(strip_hex_prefix(value)):
        raise ValidationError(
            f"Invalid {field}: must be a 32-byte hex string (64 chars), got {value}",
            field=field,
            value=value,
            details={"rule": "bytes32_format"},
        )
    return bytes.fromhex(strip_hex_prefix(value))


# ----------------------------------------------------------------------
# Per-type encoders
# ----------------------------------------------------------------------
def _encode_address(value: Any, field: str) -> EncodedValue:
    address = validate_address(value, field)
    return EncodedValue(ArgType.ADDRESS, address, scval.to_address(address))


def _encode_bytes32(value: Any, field: str) -> EncodedValue:
    raw = decode_bytes32(value, field)
    return EncodedValue(ArgType.BYTES32, raw, scval.to_bytes(raw))


def _encode_i64(value: Any, field: str) -> EncodedValue:
    number = coerce_integer(value, field)
    if number < I64_MIN or number > I64_MAX:
        raise ValidationError(
            f"{field} i64 value out of range: {number}",
            field=field,
            value=value,
            details={"rule": "out_of_range", "min": I64_MIN, "max": I64_MAX},
        )
    return EncodedValue(ArgType.I64, number, scval.to_int64(number))


def _encode_i128(value: Any, field: str) -> EncodedValue:
    number = coerce_integer(value, field)
    try:
        sc_val = scval.to_int128(number)
    except ValueError as exc:
        raise ValidationError(
            f"{field} i128 value out of range: {number}",
            field=field,
            value=value,
            details={"rule": "out_of_range", "error": str(exc)},
        ) from exc
    return EncodedValue(ArgType.I128, number, sc_val)


def _encode_string(value: Any, field: str) -> EncodedValue:
    if not isinstance(value, str):
        raise ValidationError(
            f"Invalid {field}: must be a string, got {value}",
            field=field,
            value=value,
            details={"rule": "not_a_string"},
        )
    if not value:
        raise ValidationError(
            f"Invalid {field}: must be a non-empty string",
            field=field,
            value=value,
            details={"rule": "empty_string"},
        )
    return EncodedValue(ArgType.STRING, value, scval.to_string(value))


def _decode_string(sc_val: xdr.SCVal) -> str:
    raw = scval.from_string(sc_val)
    return raw if isinstance(raw, str) else raw.decode("utf-8")


_ENCODERS: dict[ArgType, Callable[[Any, str], EncodedValue]] = {
    ArgType.ADDRESS: _encode_address,
    ArgType.BYTES32: _encode_bytes32,
    ArgType.I64: _encode_i64,
    ArgType.I128: _encode_i128,
    ArgType.STRING: _encode_string,
}

_DECODERS: dict[ArgType, Callable[[xdr.SCVal], Any]] = {
    ArgType.ADDRESS: lambda sc_val: scval.from_address(sc_val).address,
    ArgType.BYTES32: lambda sc_val: scval.from_bytes(sc_val).hex(),
    ArgType.I64: scval.from_int64,
    ArgType.I128: scval.from_int128,
    ArgType.STRING: _decode_string,
}


def _check_exhaustive(table: Mapping[ArgType, Any], name: str) -> None:
    missing = set(ArgType) - set(table)
    if missing:
        raise RuntimeError(f"{name} missing handlers for: {sorted(t.value for t in missing)}")


_check_exhaustive(_ENCODERS, "_ENCODERS")
_check_exhaustive(_DECODERS, "_DECODERS")


def _arg_type(declared_type: ArgType | str) -> ArgType:
    try:
        return ArgType(declared_type)
    except ValueError as exc:
        raise ValidationError(
            f"Unsupported type: {declared_type}",
            field="type",
            value=declared_type,
            details={"rule": "unsupported_type"},
        ) from exc


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def encode(value: Any, declared_type: ArgType | str, *, field: str | None = None) -> EncodedValue:
    """Validate ``value`` and encode it as a contract argument.

    Args:
        value: Domain value (address string, hex string, integer or text)
        declared_type: Target argument type (``ArgType`` or its wire name)
        field: Name reported in validation errors (defaults to the type name)

    Returns:
        The validated value with its ``SCVal`` encoding

    Raises:
        ValidationError: If the value violates the type's constraints
    """
    arg_type = _arg_type(declared_type)
    return _ENCODERS[arg_type](value, field or arg_type.value)


def decode(encoded: EncodedValue | xdr.SCVal, declared_type: ArgType | str) -> Any:
    """Decode a wire value back to its domain form.

    Addresses decode to their StrKey string and 32-byte values to lowercase
    hex without prefix.
    """
    arg_type = _arg_type(declared_type)
    sc_val = encoded.sc_val if isinstance(encoded, EncodedValue) else encoded
    return _DECODERS[arg_type](sc_val)


def encode_struct(
    fields: Mapping[str, Any], schema: Mapping[str, ArgType], *, field: str | None = None
) -> xdr.SCVal:
    """Encode a contract struct as an ``SCV_MAP`` with sorted symbol keys."""

    missing = sorted(name for name in schema if name not in fields)
    if missing:
        raise ValidationError(
            f"Missing {field or 'struct'} fields: {', '.join(missing)}",
            field=field,
            value=missing,
            details={"rule": "missing_field"},
        )

    entries = []
    for name in sorted(schema):
        encoded = encode(fields[name], schema[name], field=name)
        entries.append(xdr.SCMapEntry(scval.to_symbol(name), encoded.sc_val))

    return xdr.SCVal(xdr.SCValType.SCV_MAP, map=xdr.SCMap(entries))


ORDER_PARAMS_SCHEMA: dict[str, ArgType] = {
    "amount": ArgType.I128,
    "message_hash": ArgType.STRING,
    "order_id": ArgType.BYTES32,
    "rate": ArgType.I64,
    "refund_address": ArgType.ADDRESS,
    "sender": ArgType.ADDRESS,
    "sender_fee": ArgType.I128,
    "sender_fee_recipient": ArgType.ADDRESS,
    "token": ArgType.ADDRESS,
}


def encode_order_params(params: Any) -> xdr.SCVal:
    """Encode ``OrderParams`` (or an equivalent mapping) for ``create_order``."""

    fields = params.as_fields() if hasattr(params, "as_fields") else dict(params)
    return encode_struct(fields, ORDER_PARAMS_SCHEMA, field="order_params")


# ----------------------------------------------------------------------
# Simulated return values
# ----------------------------------------------------------------------
_BIG_INT_DECODERS: dict[xdr.SCValType, Callable[[xdr.SCVal], int]] = {
    xdr.SCValType.SCV_U64: scval.from_uint64,
    xdr.SCValType.SCV_I64: scval.from_int64,
    xdr.SCValType.SCV_U128: scval.from_uint128,
    xdr.SCValType.SCV_I128: scval.from_int128,
    xdr.SCValType.SCV_U256: scval.from_uint256,
    xdr.SCValType.SCV_I256: scval.from_int256,
}


def to_native(sc_val: xdr.SCVal | str) -> Any:
    """Translate a contract return value into plain, JSON-safe Python.

    64-bit and wider integers are returned as decimal strings so they survive
    transport without precision loss; 32-bit integers stay ``int``. Bytes are
    rendered as lowercase hex and addresses as StrKey strings.
    """
    if isinstance(sc_val, str):
        sc_val = xdr.SCVal.from_xdr(sc_val)

    sc_type = sc_val.type
    if sc_type == xdr.SCValType.SCV_VOID:
        return None
    if sc_type == xdr.SCValType.SCV_BOOL:
        return scval.from_bool(sc_val)
    if sc_type == xdr.SCValType.SCV_U32:
        return scval.from_uint32(sc_val)
    if sc_type == xdr.SCValType.SCV_I32:
        return scval.from_int32(sc_val)
    if sc_type in _BIG_INT_DECODERS:
        return str(_BIG_INT_DECODERS[sc_type](sc_val))
    if sc_type == xdr.SCValType.SCV_BYTES:
        return scval.from_bytes(sc_val).hex()
    if sc_type == xdr.SCValType.SCV_STRING:
        return _decode_string(sc_val)
    if sc_type == xdr.SCValType.SCV_SYMBOL:
        return scval.from_symbol(sc_val)
    if sc_type == xdr.SCValType.SCV_ADDRESS:
        return scval.from_address(sc_val).address
    if sc_type == xdr.SCValType.SCV_VEC:
        items = sc_val.vec.sc_vec if sc_val.vec is not None else []
        return [to_native(item) for item in items]
    if sc_type == xdr.SCValType.SCV_MAP:
        entries = sc_val.map.sc_map if sc_val.map is not None else []
        return {_map_key(entry.key): to_native(entry.val) for entry in entries}

    # Remaining host types are passed through as base64 XDR
    return sc_val.to_xdr()


def _map_key(sc_val: xdr.SCVal) -> Any:
    key = to_native(sc_val)
    if isinstance(key, list | dict):
        return sc_val.to_xdr()
    return key
