"""QDataStream codec for wsjtxcomm.

This module provides encoding and decoding of WSJT-X datagrams, plus the
byte-level primitives and schema introspection they are built on.
"""

from __future__ import annotations

from .decoder import DecodeResult, decode
from .encoder import encode, encode_body
from .schema import FieldSchema, MessageSchema, WireType
from .stream import ByteReader, ByteWriter

__all__ = [
    "encode",
    "encode_body",
    "decode",
    "DecodeResult",
    "MessageSchema",
    "FieldSchema",
    "WireType",
    "ByteReader",
    "ByteWriter",
]
