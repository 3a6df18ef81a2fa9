"""Conversion and comparison helpers for gNMI typed values."""

from __future__ import annotations

import enum
import json
import math
import struct
from dataclasses import dataclass
from typing import Any, Optional, Sequence

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1


class ScalarError(ValueError):
    """Raised when a value cannot be converted to or from a scalar."""


class ValueKind(enum.Enum):
    """The kind of payload a TypedValue carries."""

    STRING = "string_val"
    INT = "int_val"
    UINT = "uint_val"
    BOOL = "bool_val"
    BYTES = "bytes_val"
    FLOAT = "float_val"
    DOUBLE = "double_val"
    DECIMAL = "decimal_val"
    LEAFLIST = "leaflist_val"
    ANY = "any_val"
    JSON = "json_val"
    JSON_IETF = "json_ietf_val"
    ASCII = "ascii_val"
    PROTO_BYTES = "proto_bytes"


@dataclass(frozen=True)
class Decimal64:
    """A fixed-point decimal: digits scaled down by 10**precision."""

    digits: int = 0
    precision: int = 0


@dataclass
class TypedValue:
    """A gNMI value: a kind and its payload; an empty value has no kind.

    A LEAFLIST payload is a sequence of TypedValue (or None for no array),
    a DECIMAL payload is a Decimal64 and JSON payloads are raw bytes.
    """

    kind: Optional[ValueKind] = None
    value: Any = None


@dataclass(frozen=True)
class DeprecatedScalar:
    """A decoded value whose encoding is slated for removal from gNMI."""

    message: str
    value: Any


def from_scalar(value: Any) -> TypedValue:
    """Convert a native scalar (or a sequence of scalars) to a TypedValue."""
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise ScalarError(f"string {value!r} contains non-UTF-8 bytes") from None
        return TypedValue(ValueKind.STRING, value)
    if isinstance(value, bool):
        return TypedValue(ValueKind.BOOL, value)
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return TypedValue(ValueKind.INT, value)
        if _INT64_MAX < value <= _UINT64_MAX:
            return TypedValue(ValueKind.UINT, value)
        raise ScalarError(f"integer {value} does not fit in 64 bits")
    if isinstance(value, float):
        return TypedValue(ValueKind.DOUBLE, value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return TypedValue(ValueKind.BYTES, bytes(value))
    if isinstance(value, (list, tuple)):
        elements = []
        for item in value:
            try:
                elements.append(from_scalar(item))
            except ScalarError as exc:
                raise ScalarError(f"in sequence: {exc}") from exc
        return TypedValue(ValueKind.LEAFLIST, elements)
    raise ScalarError(f"non-scalar type {value!r}")


def _decimal_to_float(d: Decimal64) -> float:
    """Convert a Decimal64 to a value of single precision."""
    exact = float(d.digits) / math.pow(10, d.precision)
    return struct.unpack("f", struct.pack("f", exact))[0]


def _decode_json(raw: Any) -> Any:
    try:
        return json.loads(bytes(raw or b""), parse_int=float)
    except (ValueError, TypeError) as exc:
        raise ScalarError(f"invalid JSON value: {exc}") from exc


def to_scalar(tv: Optional[TypedValue]) -> Any:
    """Convert a TypedValue to its native Python value."""
    kind = tv.kind if tv is not None else None
    if kind is ValueKind.DECIMAL:
        return _decimal_to_float(tv.value or Decimal64())
    if kind is ValueKind.STRING:
        return tv.value
    if kind in (ValueKind.INT, ValueKind.UINT):
        return int(tv.value)
    if kind is ValueKind.BOOL:
        return bool(tv.value)
    if kind in (ValueKind.FLOAT, ValueKind.DOUBLE):
        return float(tv.value)
    if kind is ValueKind.LEAFLIST:
        result = []
        for element in tv.value or ():
            try:
                result.append(to_scalar(element))
            except ScalarError as exc:
                raise ScalarError(f"to_scalar for leaf-list element {element!r}: {exc}") from exc
        return result
    if kind is ValueKind.BYTES:
        return bytes(tv.value)
    if kind is ValueKind.JSON:
        return DeprecatedScalar("Deprecated TypedValue_JsonVal", _decode_json(tv.value))
    if kind is ValueKind.JSON_IETF:
        return DeprecatedScalar("Deprecated TypedValue_JsonIetfVal", _decode_json(tv.value))
    raise ScalarError(f"non-scalar type {tv.value if tv is not None else None!r}")


_PRIMITIVES = frozenset(
    {
        ValueKind.STRING,
        ValueKind.INT,
        ValueKind.UINT,
        ValueKind.BOOL,
        ValueKind.BYTES,
        ValueKind.DOUBLE,
        ValueKind.FLOAT,
    }
)


def equal(a: Optional[TypedValue], b: Optional[TypedValue]) -> bool:
    """Report whether two primitive or leaf-list values are the same.

    Values of any other kind, and empty values, never compare equal.
    """
    if a is None or b is None or a.kind is None or a.kind is not b.kind:
        return False
    if a.kind in _PRIMITIVES:
        return a.value == b.value
    if a.kind is ValueKind.DECIMAL:
        da, db = a.value or Decimal64(), b.value or Decimal64()
        return da.digits == db.digits and da.precision == db.precision
    if a.kind is ValueKind.LEAFLIST:
        ae: Sequence[TypedValue] = a.value or ()
        be: Sequence[TypedValue] = b.value or ()
        return len(ae) == len(be) and all(equal(x, y) for x, y in zip(ae, be))
    return False