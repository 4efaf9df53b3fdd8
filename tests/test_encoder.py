import datetime
import math
import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cborkit.encoder import (
    ADD_INFO_UINT8,
    ADD_INFO_UINT16,
    ADD_INFO_UINT32,
    ADD_INFO_UINT64,
    SIMPLE_FALSE,
    SIMPLE_FLOAT16,
    SIMPLE_FLOAT32,
    SIMPLE_FLOAT64,
    SIMPLE_TRUE,
    SIMPLE_UNDEFINED,
    MajorType,
    encode_array_header,
    encode_array_header_indefinite,
    encode_bool,
    encode_break,
    encode_bytes,
    encode_bytes_chunk,
    encode_bytes_header_indefinite,
    encode_duration,
    encode_float,
    encode_float16,
    encode_float32,
    encode_float64,
    encode_float_canonical,
    encode_head,
    encode_int,
    encode_map_header,
    encode_map_header_indefinite,
    encode_nil,
    encode_simple_value,
    encode_string,
    encode_string_from_bytes,
    encode_text_chunk,
    encode_text_header_indefinite,
    encode_uint,
    encode_undefined,
    float16_bits_to_float,
    float32_to_float16_bits,
)

_WIDTHS = {ADD_INFO_UINT8: 1, ADD_INFO_UINT16: 2, ADD_INFO_UINT32: 4, ADD_INFO_UINT64: 8}


def _parse_head(data):
    major = data[0] >> 5
    info = data[0] & 0x1F
    if info < ADD_INFO_UINT8:
        return major, info, data[1:]
    width = _WIDTHS[info]
    return major, int.from_bytes(data[1 : 1 + width], "big"), data[1 + width :]


@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_uint_round_trip(u):
    major, arg, rest = _parse_head(encode_uint(u))
    assert (major, arg, rest) == (MajorType.UINT, u, b"")


@given(st.integers(min_value=-(2**64), max_value=2**64 - 1))
def test_int_round_trip(i):
    major, arg, rest = _parse_head(encode_int(i))
    assert rest == b""
    if i >= 0:
        assert (major, arg) == (MajorType.UINT, i)
    else:
        assert (major, -1 - arg) == (MajorType.NEG_INT, i)


@pytest.mark.parametrize(
    "value, info",
    [
        (24, ADD_INFO_UINT8),
        (255, ADD_INFO_UINT8),
        (256, ADD_INFO_UINT16),
        (65535, ADD_INFO_UINT16),
        (65536, ADD_INFO_UINT32),
        (2**32 - 1, ADD_INFO_UINT32),
        (2**32, ADD_INFO_UINT64),
        (2**64 - 1, ADD_INFO_UINT64),
    ],
)
def test_head_uses_shortest_width(value, info):
    out = encode_head(MajorType.TAG, value)
    assert out[0] == (MajorType.TAG << 5) | info
    assert len(out) == 1 + _WIDTHS[info]


def test_small_values_are_inline():
    for value in (0, 23):
        assert encode_uint(value) == bytes([value])
    assert encode_int(-1) == bytes([MajorType.NEG_INT << 5])


@pytest.mark.parametrize("bad", [-1, 2**64])
def test_head_rejects_out_of_range(bad):
    with pytest.raises(ValueError):
        encode_uint(bad)


def test_head_rejects_bad_major_and_big_negative():
    with pytest.raises(ValueError):
        encode_head(8, 0)
    with pytest.raises(ValueError):
        encode_int(-(2**64) - 1)


@given(st.binary(max_size=300))
def test_bytes_round_trip(data):
    major, length, rest = _parse_head(encode_bytes(data))
    assert (major, length, rest) == (MajorType.BYTES, len(data), data)
    assert encode_bytes_chunk(data) == encode_bytes(data)
    assert encode_bytes(bytearray(data)) == encode_bytes(data)


@given(st.text(max_size=300))
def test_string_round_trip(s):
    payload = s.encode("utf-8")
    major, length, rest = _parse_head(encode_string(s))
    assert (major, length, rest) == (MajorType.TEXT, len(payload), payload)
    assert encode_text_chunk(s) == encode_string(s)


def test_string_from_bytes_keeps_raw_payload():
    raw = b"\xff\xfeabc"
    major, length, rest = _parse_head(encode_string_from_bytes(raw))
    assert (major, length, rest) == (MajorType.TEXT, len(raw), raw)


def test_type_errors_for_wrong_payloads():
    with pytest.raises(TypeError):
        encode_bytes("text")
    with pytest.raises(TypeError):
        encode_string(b"bytes")


def test_fixed_single_byte_items():
    assert encode_nil() == b"\xf6"
    assert encode_break() == b"\xff"
    assert encode_array_header_indefinite() == b"\x9f"
    assert encode_map_header_indefinite() == b"\xbf"
    assert encode_text_header_indefinite() == b"\x7f"
    assert encode_bytes_header_indefinite() == b"\x5f"


def test_bool_and_undefined():
    assert encode_bool(True) == bytes([(MajorType.SIMPLE << 5) | SIMPLE_TRUE])
    assert encode_bool(False) == bytes([(MajorType.SIMPLE << 5) | SIMPLE_FALSE])
    assert encode_undefined() == bytes([(MajorType.SIMPLE << 5) | SIMPLE_UNDEFINED])


def test_simple_values():
    assert encode_simple_value(16) == bytes([(MajorType.SIMPLE << 5) | 16])
    assert encode_simple_value(32) == bytes([0xF8, 32])
    with pytest.raises(ValueError):
        encode_simple_value(256)


@given(st.integers(min_value=0, max_value=2**32 - 1))
def test_container_headers(n):
    assert _parse_head(encode_array_header(n)) == (MajorType.ARRAY, n, b"")
    assert _parse_head(encode_map_header(n)) == (MajorType.MAP, n, b"")


def test_container_header_limit():
    with pytest.raises(ValueError):
        encode_array_header(2**32)
    with pytest.raises(ValueError):
        encode_map_header(-1)


@given(st.integers(min_value=0, max_value=0xFFFF))
def test_half_bits_round_trip_for_normals(h):
    exponent = (h >> 10) & 0x1F
    result = float32_to_float16_bits(float16_bits_to_float(h))
    if 0 < exponent < 0x1F:
        assert result == h
    elif exponent == 0:
        assert result == h & 0x8000


def test_half_special_values():
    inf_bits = float32_to_float16_bits(math.inf)
    assert (inf_bits >> 10) & 0x1F == 0x1F and inf_bits & 0x03FF == 0
    assert float16_bits_to_float(float32_to_float16_bits(-math.inf)) == -math.inf
    assert math.isnan(float16_bits_to_float(float32_to_float16_bits(math.nan)))
    assert float16_bits_to_float(float32_to_float16_bits(1e6)) == math.inf


def test_half_rounds_ties_to_even():
    assert float16_bits_to_float(float32_to_float16_bits(1 + 2**-11)) == 1.0


def test_half_bits_range_checked():
    with pytest.raises(ValueError):
        float16_bits_to_float(0x10000)


def test_fixed_width_floats():
    assert struct.unpack(">e", encode_float16(1.5)[1:])[0] == 1.5
    assert encode_float16(1.5)[0] & 0x1F == SIMPLE_FLOAT16
    assert struct.unpack(">f", encode_float32(1.5)[1:])[0] == 1.5
    assert encode_float32(1.5)[0] & 0x1F == SIMPLE_FLOAT32
    assert struct.unpack(">d", encode_float64(0.1)[1:])[0] == 0.1
    assert encode_float64(0.1)[0] & 0x1F == SIMPLE_FLOAT64


def test_float32_overflows_to_infinity():
    assert struct.unpack(">f", encode_float32(1e300)[1:])[0] == math.inf


def test_encode_float_picks_float32_or_float64():
    out = encode_float(1.5)
    assert out[0] & 0x1F == SIMPLE_FLOAT32
    assert struct.unpack(">f", out[1:])[0] == 1.5
    out = encode_float(0.1)
    assert out[0] & 0x1F == SIMPLE_FLOAT64
    assert struct.unpack(">d", out[1:])[0] == 0.1


def test_canonical_float_widths():
    half = encode_float_canonical(1.5)
    assert half[0] & 0x1F == SIMPLE_FLOAT16
    assert struct.unpack(">e", half[1:])[0] == 1.5
    single_value = struct.unpack(">f", struct.pack(">f", 0.1))[0]
    single = encode_float_canonical(single_value)
    assert single[0] & 0x1F == SIMPLE_FLOAT32
    assert struct.unpack(">f", single[1:])[0] == single_value
    double = encode_float_canonical(0.1)
    assert double[0] & 0x1F == SIMPLE_FLOAT64


def test_canonical_float_normalises_zero_and_nan():
    zero = encode_float_canonical(-0.0)
    assert math.copysign(1.0, struct.unpack(">e", zero[1:])[0]) == 1.0
    nan = encode_float_canonical(math.nan)
    assert nan[0] & 0x1F == SIMPLE_FLOAT16
    assert math.isnan(struct.unpack(">e", nan[1:])[0])


@given(st.floats(allow_nan=False))
def test_canonical_float_preserves_value(f):
    out = encode_float_canonical(f)
    fmt = {SIMPLE_FLOAT16: ">e", SIMPLE_FLOAT32: ">f", SIMPLE_FLOAT64: ">d"}[out[0] & 0x1F]
    assert struct.unpack(fmt, out[1:])[0] == f


@given(st.integers(min_value=-(10**6), max_value=10**6))
def test_duration_forms_agree(seconds):
    td = datetime.timedelta(seconds=seconds)
    assert encode_duration(td) == encode_duration(seconds * 1_000_000_000)


def test_duration_is_signed_nanoseconds():
    assert encode_duration(-5) == encode_int(-5)
    with pytest.raises(ValueError):
        encode_duration(2**63)
    with pytest.raises(TypeError):
        encode_duration(1.5)