"""Encode CBOR (RFC 8949) data items and semantic tags."""

__version__ = "0.1.0"
__all__ = ["encoder", "tags"]