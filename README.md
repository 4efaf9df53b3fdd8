# cborkit

Small, dependency-free functions that produce CBOR (RFC 8949) data.
Every encoder returns `bytes`, so a document is built by joining the
pieces together.

- `cborkit.encoder`: heads, unsigned and signed integers, byte and text
  strings, booleans, null and undefined, simple values, half, single and
  double precision floats, durations, and the headers of definite and
  indefinite arrays, maps and strings.
- `cborkit.tags`: semantic tags: RFC 3339 and epoch times, bignums,
  decimal fractions, bigfloats, URIs, UUIDs, regular expressions, MIME
  messages, embedded CBOR, base-encoding hints and the self-describe tag.

## Installation

```
pip install cborkit
```

## Integers, strings and containers

```python
from cborkit.encoder import encode_array_header, encode_int, encode_string

data = encode_array_header(2) + encode_int(-1) + encode_string("hi")
assert data == bytes.fromhex("82206268 69".replace(" ", ""))
```

Heads always take the shortest form. `encode_head(major, value)` writes
any major type (see the `MajorType` enum) with an argument up to
2**64 - 1; `encode_uint`, `encode_int`, `encode_bytes`, `encode_string`
and `encode_string_from_bytes` build on it. Arguments out of range raise
`ValueError`, values of the wrong type raise `TypeError`.

Maps are written as a header followed by the keys and values in turn:

```python
from cborkit.encoder import encode_map_header, encode_string, encode_uint

data = encode_map_header(1) + encode_string("a") + encode_uint(1)
```

Indefinite-length items are opened with a header and closed with
`encode_break()`:

```python
from cborkit.encoder import encode_break, encode_text_chunk, encode_text_header_indefinite

data = (
    encode_text_header_indefinite()
    + encode_text_chunk("str")
    + encode_text_chunk("eam")
    + encode_break()
)
```

`encode_array_header_indefinite`, `encode_map_header_indefinite` and
`encode_bytes_header_indefinite` (with `encode_bytes_chunk`) work the
same way.

## Simple values and floats

`encode_bool`, `encode_nil`, `encode_undefined` and
`encode_simple_value` cover the simple values. Floats can be written at a
fixed width with `encode_float16`, `encode_float32` and
`encode_float64`; `encode_float` picks float32 when that keeps the value
and float64 otherwise, and `encode_float_canonical` picks the shortest of
the three that keeps the value, writing -0.0 as 0.0 and NaN as a
half-precision NaN:

```python
from cborkit.encoder import encode_float_canonical

assert encode_float_canonical(1.0) == bytes.fromhex("f93c00")
```

`float32_to_float16_bits` and `float16_bits_to_float` convert between
floats and binary16 bit patterns. `encode_duration` writes a
`datetime.timedelta` (or an integer) as a signed count of nanoseconds.

## Tags

```python
from datetime import datetime, timezone
from cborkit.tags import encode_big_int, encode_time

assert encode_time(datetime(2024, 1, 1, tzinfo=timezone.utc)) == bytes.fromhex("c11a65920080")
encode_big_int(2**64)
```

- `encode_tag(tag)` writes a tag head; `encode_tagged(tag, value)` puts
  it in front of an already encoded item. The `Tag` enum names the
  registered numbers used here.
- `encode_time` writes tag 1 with an integer for whole seconds and a
  float64 otherwise; `encode_rfc3339_time` writes tag 0 with text. Naive
  datetimes are taken to be UTC.
- `encode_big_int` always writes tag 2 or 3; `encode_integer` writes a
  plain integer when it fits and a bignum otherwise.
- `encode_decimal_fraction` (tag 4) and `encode_bigfloat` (tag 5) write
  `[exponent, mantissa]`.
- `encode_uri`, `encode_uuid`, `encode_regexp`, `encode_regexp_string`,
  `encode_mime_string`, `encode_embedded_cbor`, `encode_base64url`,
  `encode_base64`, `encode_base16`, `encode_base64url_string`,
  `encode_base64_string` and `encode_self_describe` cover the rest.

## What this package does not do

It only writes CBOR. It does not decode CBOR, check that received data
is well-formed, or turn arbitrary Python objects such as dicts and lists
into CBOR in one call; containers are built from their headers and
items as shown above, and map keys are written in the order given.

## Running the tests

```
pip install -e ".[test]"
pytest
```