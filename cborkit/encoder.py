"""Encoders for CBOR heads, integers, strings, simple values and floats."""

from __future__ import annotations

import datetime
import math
import struct
from enum import IntEnum

__all__ = [
    "MajorType",
    "encode_head",
    "encode_uint",
    "encode_int",
    "encode_bytes",
    "encode_string",
    "encode_string_from_bytes",
    "encode_bool",
    "encode_nil",
    "encode_undefined",
    "encode_simple_value",
    "float32_to_float16_bits",
    "float16_bits_to_float",
    "encode_float16",
    "encode_float32",
    "encode_float64",
    "encode_float",
    "encode_float_canonical",
    "encode_duration",
    "encode_array_header",
    "encode_map_header",
    "encode_array_header_indefinite",
    "encode_map_header_indefinite",
    "encode_text_header_indefinite",
    "encode_bytes_header_indefinite",
    "encode_text_chunk",
    "encode_bytes_chunk",
    "encode_break",
]


class MajorType(IntEnum):
    """The eight CBOR major types."""

    UINT = 0
    NEG_INT = 1
    BYTES = 2
    TEXT = 3
    ARRAY = 4
    MAP = 5
    TAG = 6
    SIMPLE = 7


ADD_INFO_DIRECT = 23
ADD_INFO_UINT8 = 24
ADD_INFO_UINT16 = 25
ADD_INFO_UINT32 = 26
ADD_INFO_UINT64 = 27
ADD_INFO_INDEFINITE = 31

SIMPLE_FALSE = 20
SIMPLE_TRUE = 21
SIMPLE_NULL = 22
SIMPLE_UNDEFINED = 23
SIMPLE_FLOAT16 = 25
SIMPLE_FLOAT32 = 26
SIMPLE_FLOAT64 = 27
SIMPLE_BREAK = 31

_UINT32_MAX = 0xFFFFFFFF
_UINT64_MAX = 0xFFFFFFFFFFFFFFFF
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _lead(major: int, info: int) -> int:
    return (int(major) << 5) | info


def encode_head(major: int, value: int) -> bytes:
    """Encode a major type with its argument in the shortest form."""
    major = MajorType(major)
    if not 0 <= value <= _UINT64_MAX:
        raise ValueError(f"argument {value} does not fit in an unsigned 64-bit integer")
    if value <= ADD_INFO_DIRECT:
        return bytes([_lead(major, value)])
    if value <= 0xFF:
        return bytes([_lead(major, ADD_INFO_UINT8), value])
    if value <= 0xFFFF:
        return struct.pack(">BH", _lead(major, ADD_INFO_UINT16), value)
    if value <= _UINT32_MAX:
        return struct.pack(">BI", _lead(major, ADD_INFO_UINT32), value)
    return struct.pack(">BQ", _lead(major, ADD_INFO_UINT64), value)


def encode_uint(u: int) -> bytes:
    """Encode an unsigned integer (major type 0)."""
    return encode_head(MajorType.UINT, u)


def encode_int(i: int) -> bytes:
    """Encode a signed integer as major type 0 or 1."""
    if i >= 0:
        return encode_head(MajorType.UINT, i)
    return encode_head(MajorType.NEG_INT, -1 - i)


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        raise TypeError("expected a bytes-like object, not str")
    return bytes(memoryview(data))


def encode_bytes(data) -> bytes:
    """Encode a definite-length byte string."""
    payload = _as_bytes(data)
    return encode_head(MajorType.BYTES, len(payload)) + payload


def encode_string(s: str) -> bytes:
    """Encode a definite-length UTF-8 text string."""
    if not isinstance(s, str):
        raise TypeError(f"expected str, not {type(s).__name__}")
    payload = s.encode("utf-8")
    return encode_head(MajorType.TEXT, len(payload)) + payload


def encode_string_from_bytes(data) -> bytes:
    """Encode raw bytes as a text string without checking their encoding."""
    payload = _as_bytes(data)
    return encode_head(MajorType.TEXT, len(payload)) + payload


def encode_bool(value: bool) -> bytes:
    """Encode true or false."""
    return bytes([_lead(MajorType.SIMPLE, SIMPLE_TRUE if value else SIMPLE_FALSE)])


def encode_nil() -> bytes:
    """Encode null."""
    return bytes([_lead(MajorType.SIMPLE, SIMPLE_NULL)])


def encode_undefined() -> bytes:
    """Encode the undefined simple value."""
    return bytes([_lead(MajorType.SIMPLE, SIMPLE_UNDEFINED)])


def encode_simple_value(value: int) -> bytes:
    """Encode a simple value: 0..23 inline, anything larger after 0xf8."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"simple value {value} is out of range 0..255")
    if value <= ADD_INFO_DIRECT:
        return bytes([_lead(MajorType.SIMPLE, value)])
    return bytes([_lead(MajorType.SIMPLE, ADD_INFO_UINT8), value])


def _float32_bits(f: float) -> int:
    try:
        return struct.unpack(">I", struct.pack(">f", f))[0]
    except OverflowError:
        return 0xFF800000 if f < 0 else 0x7F800000


def _to_float32(f: float) -> float:
    return struct.unpack(">f", struct.pack(">I", _float32_bits(f)))[0]


def float32_to_float16_bits(f: float) -> int:
    """Return the binary16 bit pattern for ``f`` after rounding it to float32.

    Normal values round to nearest even; values below the normal half range
    flush to a signed zero.
    """
    bits = _float32_bits(float(f))
    sign = (bits >> 31) & 0x1
    exp = (bits >> 23) & 0xFF
    mant = bits & 0x7FFFFF

    if exp == 0xFF:
        if mant == 0:
            h = 0x1F << 10
        else:
            h = (0x1F << 10) | (mant >> 13)
            if h & 0x03FF == 0:
                h |= 1
    elif exp == 0:
        h = 0
    else:
        e32 = exp - 127
        e16 = e32 + 15
        if e16 >= 0x1F:
            h = 0x1F << 10
        elif e16 <= 0:
            shift = 14 - e32
            if shift > 24:
                h = 0
            else:
                val = mant | (1 << 23)
                val += (1 << (shift - 1)) - 1 + ((val >> shift) & 1)
                h = ((val >> shift) & 0xFFFF) & 0x03FF
        else:
            val = mant + (1 << 12) - 1 + ((mant >> 13) & 1)
            frac = (val >> 13) & 0xFFFF
            h = (e16 << 10) | (frac & 0x03FF)
            if frac >> 10:
                e16 += 1
                h = 0x1F << 10 if e16 >= 0x1F else e16 << 10
    return (sign << 15) | h


def float16_bits_to_float(h: int) -> float:
    """Return the value of a binary16 bit pattern."""
    if not 0 <= h <= 0xFFFF:
        raise ValueError(f"half-precision bit pattern {h} is out of range")
    return struct.unpack(">e", h.to_bytes(2, "big"))[0]


def encode_float16(f: float) -> bytes:
    """Encode a half-precision float."""
    return struct.pack(
        ">BH", _lead(MajorType.SIMPLE, SIMPLE_FLOAT16), float32_to_float16_bits(f)
    )


def encode_float32(f: float) -> bytes:
    """Encode a single-precision float."""
    return struct.pack(">BI", _lead(MajorType.SIMPLE, SIMPLE_FLOAT32), _float32_bits(f))


def encode_float64(f: float) -> bytes:
    """Encode a double-precision float."""
    return struct.pack(">Bd", _lead(MajorType.SIMPLE, SIMPLE_FLOAT64), f)


def encode_float(f: float) -> bytes:
    """Encode as float32 when that keeps the value, else as float64."""
    f = float(f)
    f32 = _to_float32(f)
    if f32 == f:
        return encode_float32(f32)
    return encode_float64(f)


def encode_float_canonical(f: float) -> bytes:
    """Encode in the shortest of float16, float32 and float64 that keeps the value."""
    f = float(f)
    if f == 0:
        f = 0.0
    if math.isnan(f):
        return encode_float16(f)
    f32 = _to_float32(f)
    if float16_bits_to_float(float32_to_float16_bits(f32)) == f:
        return encode_float16(f32)
    if f32 == f:
        return encode_float32(f32)
    return encode_float64(f)


def encode_duration(d) -> bytes:
    """Encode a duration as a signed count of nanoseconds.

    ``d`` is a :class:`datetime.timedelta` or an integer of nanoseconds.
    """
    if isinstance(d, datetime.timedelta):
        ns = (d.days * 86400 + d.seconds) * 1_000_000_000 + d.microseconds * 1000
    elif isinstance(d, int):
        ns = d
    else:
        raise TypeError(f"expected timedelta or int, not {type(d).__name__}")
    if not _INT64_MIN <= ns <= _INT64_MAX:
        raise ValueError("duration does not fit in a signed 64-bit nanosecond count")
    return encode_int(ns)


def _check_count(n: int) -> int:
    if not 0 <= n <= _UINT32_MAX:
        raise ValueError(f"container size {n} is out of range 0..{_UINT32_MAX}")
    return n


def encode_array_header(n: int) -> bytes:
    """Encode the header of an array of ``n`` items."""
    return encode_head(MajorType.ARRAY, _check_count(n))


def encode_map_header(n: int) -> bytes:
    """Encode the header of a map of ``n`` pairs."""
    return encode_head(MajorType.MAP, _check_count(n))


def encode_array_header_indefinite() -> bytes:
    """Encode the start of an indefinite-length array (0x9f)."""
    return bytes([_lead(MajorType.ARRAY, ADD_INFO_INDEFINITE)])


def encode_map_header_indefinite() -> bytes:
    """Encode the start of an indefinite-length map (0xbf)."""
    return bytes([_lead(MajorType.MAP, ADD_INFO_INDEFINITE)])


def encode_text_header_indefinite() -> bytes:
    """Encode the start of an indefinite-length text string (0x7f)."""
    return bytes([_lead(MajorType.TEXT, ADD_INFO_INDEFINITE)])


def encode_bytes_header_indefinite() -> bytes:
    """Encode the start of an indefinite-length byte string (0x5f)."""
    return bytes([_lead(MajorType.BYTES, ADD_INFO_INDEFINITE)])


def encode_text_chunk(s: str) -> bytes:
    """Encode one definite text chunk of an indefinite text string."""
    return encode_string(s)


def encode_bytes_chunk(data) -> bytes:
    """Encode one definite chunk of an indefinite byte string."""
    return encode_bytes(data)


def encode_break() -> bytes:
    """Encode the break stop code (0xff)."""
    return bytes([_lead(MajorType.SIMPLE, SIMPLE_BREAK)])