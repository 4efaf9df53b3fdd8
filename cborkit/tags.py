"""Encoders for CBOR semantic tags: times, bignums, URIs, UUIDs and friends."""

from __future__ import annotations

import datetime
import re
import uuid as _uuid
from enum import IntEnum

from .encoder import (
    MajorType,
    encode_array_header,
    encode_bytes,
    encode_float64,
    encode_head,
    encode_int,
    encode_nil,
    encode_string,
    encode_uint,
)

__all__ = [
    "Tag",
    "encode_tag",
    "encode_tagged",
    "encode_time",
    "encode_rfc3339_time",
    "encode_base64url_string",
    "encode_base64_string",
    "encode_uri",
    "encode_embedded_cbor",
    "encode_uuid",
    "encode_regexp_string",
    "encode_regexp",
    "encode_mime_string",
    "encode_self_describe",
    "encode_big_int",
    "encode_integer",
    "encode_decimal_fraction",
    "encode_bigfloat",
    "encode_base64url",
    "encode_base64",
    "encode_base16",
]

_UINT64_MAX = 0xFFFFFFFFFFFFFFFF
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


class Tag(IntEnum):
    """Registered semantic tag numbers used by the encoders."""

    DATETIME_STRING = 0
    EPOCH_DATETIME = 1
    POS_BIGNUM = 2
    NEG_BIGNUM = 3
    DECIMAL_FRACTION = 4
    BIGFLOAT = 5
    BASE64URL = 21
    BASE64 = 22
    BASE16 = 23
    CBOR = 24
    URI = 32
    BASE64URL_STRING = 33
    BASE64_STRING = 34
    REGEXP = 35
    MIME = 36
    UUID = 37
    SELF_DESCRIBE_CBOR = 55799


def encode_tag(tag: int) -> bytes:
    """Encode a semantic tag head."""
    return encode_head(MajorType.TAG, int(tag))


def encode_tagged(tag: int, value) -> bytes:
    """Encode a tag followed by an already encoded data item."""
    return encode_tag(tag) + bytes(memoryview(value))


def _as_utc_aware(t: datetime.datetime) -> datetime.datetime:
    if not isinstance(t, datetime.datetime):
        raise TypeError(f"expected datetime, not {type(t).__name__}")
    if t.tzinfo is None or t.utcoffset() is None:
        return t.replace(tzinfo=datetime.timezone.utc)
    return t


def encode_time(t: datetime.datetime) -> bytes:
    """Encode a datetime as tag 1 with epoch seconds.

    Whole seconds are written as an integer, anything finer as a float64.
    Naive datetimes are taken to be UTC.
    """
    delta = _as_utc_aware(t) - _EPOCH
    seconds = delta.days * 86400 + delta.seconds
    head = encode_tag(Tag.EPOCH_DATETIME)
    if delta.microseconds == 0:
        return head + encode_int(seconds)
    nanos = delta.microseconds * 1000
    return head + encode_float64(float(seconds) + float(nanos) / 1e9)


def _format_rfc3339(t: datetime.datetime) -> str:
    aware = _as_utc_aware(t)
    text = (
        f"{aware.year:04d}-{aware.month:02d}-{aware.day:02d}"
        f"T{aware.hour:02d}:{aware.minute:02d}:{aware.second:02d}"
    )
    if aware.microsecond:
        text += "." + f"{aware.microsecond:06d}".rstrip("0")
    offset = aware.utcoffset()
    total = int(offset.total_seconds()) // 60
    if total == 0:
        return text + "Z"
    sign = "+" if total > 0 else "-"
    hours, minutes = divmod(abs(total), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def encode_rfc3339_time(t: datetime.datetime) -> bytes:
    """Encode a datetime as tag 0 with an RFC 3339 text string."""
    return encode_tag(Tag.DATETIME_STRING) + encode_string(_format_rfc3339(t))


def encode_base64url_string(s: str) -> bytes:
    """Encode tag 33 with base64url text."""
    return encode_tag(Tag.BASE64URL_STRING) + encode_string(s)


def encode_base64_string(s: str) -> bytes:
    """Encode tag 34 with base64 text."""
    return encode_tag(Tag.BASE64_STRING) + encode_string(s)


def encode_uri(uri: str) -> bytes:
    """Encode tag 32 with a URI."""
    return encode_tag(Tag.URI) + encode_string(uri)


def encode_embedded_cbor(payload) -> bytes:
    """Encode tag 24 with a byte string holding encoded CBOR."""
    return encode_tag(Tag.CBOR) + encode_bytes(payload)


def encode_uuid(uuid) -> bytes:
    """Encode tag 37 with the 16 bytes of a UUID."""
    if isinstance(uuid, _uuid.UUID):
        raw = uuid.bytes
    else:
        raw = bytes(memoryview(uuid))
    if len(raw) != 16:
        raise ValueError(f"a UUID is 16 bytes, got {len(raw)}")
    return encode_tag(Tag.UUID) + encode_bytes(raw)


def encode_regexp_string(pattern: str) -> bytes:
    """Encode tag 35 with a regular expression pattern."""
    return encode_tag(Tag.REGEXP) + encode_string(pattern)


def encode_regexp(pattern) -> bytes:
    """Encode a compiled pattern (or pattern text) as tag 35; None gives null."""
    if pattern is None:
        return encode_nil()
    if isinstance(pattern, re.Pattern):
        source = pattern.pattern
        if not isinstance(source, str):
            raise TypeError("byte patterns cannot be encoded as text")
        return encode_regexp_string(source)
    return encode_regexp_string(pattern)


def encode_mime_string(mime: str) -> bytes:
    """Encode tag 36 with a MIME message."""
    return encode_tag(Tag.MIME) + encode_string(mime)


def encode_self_describe() -> bytes:
    """Encode the self-describe CBOR tag (0xd9d9f7)."""
    return encode_tag(Tag.SELF_DESCRIBE_CBOR)


def _magnitude_bytes(n: int) -> bytes:
    return n.to_bytes((n.bit_length() + 7) // 8, "big")


def encode_big_int(z: int | None) -> bytes:
    """Encode an integer as a bignum (tag 2, or tag 3 holding -1-z)."""
    if z is None:
        return encode_nil()
    if z >= 0:
        return encode_tag(Tag.POS_BIGNUM) + encode_bytes(_magnitude_bytes(z))
    return encode_tag(Tag.NEG_BIGNUM) + encode_bytes(_magnitude_bytes(-1 - z))


def encode_integer(z: int | None) -> bytes:
    """Encode an integer as a plain CBOR integer when it fits, else as a bignum."""
    if z is None:
        return encode_nil()
    if 0 <= z <= _UINT64_MAX:
        return encode_uint(z)
    if z < 0 and (-z).bit_length() <= 63:
        return encode_int(z)
    return encode_big_int(z)


def _check_exponent(exponent: int) -> int:
    if not _INT64_MIN <= exponent <= _INT64_MAX:
        raise ValueError(f"exponent {exponent} does not fit in a signed 64-bit integer")
    return exponent


def encode_decimal_fraction(exponent: int, mantissa: int | None) -> bytes:
    """Encode tag 4 [exponent, mantissa] meaning mantissa * 10**exponent."""
    return (
        encode_tag(Tag.DECIMAL_FRACTION)
        + encode_array_header(2)
        + encode_int(_check_exponent(exponent))
        + encode_integer(mantissa)
    )


def encode_bigfloat(exponent: int, mantissa: int | None) -> bytes:
    """Encode tag 5 [exponent, mantissa] meaning mantissa * 2**exponent."""
    return (
        encode_tag(Tag.BIGFLOAT)
        + encode_array_header(2)
        + encode_int(_check_exponent(exponent))
        + encode_integer(mantissa)
    )


def encode_base64url(data) -> bytes:
    """Encode tag 21 with a byte string expected to be shown as base64url."""
    return encode_tag(Tag.BASE64URL) + encode_bytes(data)


def encode_base64(data) -> bytes:
    """Encode tag 22 with a byte string expected to be shown as base64."""
    return encode_tag(Tag.BASE64) + encode_bytes(data)


def encode_base16(data) -> bytes:
    """Encode tag 23 with a byte string expected to be shown as base16."""
    return encode_tag(Tag.BASE16) + encode_bytes(data)