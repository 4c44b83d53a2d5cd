"""WSJT-X datagram envelope.

Every datagram starts with a fixed 12-byte header:

- [Magic (4 bytes)] [Schema (4 bytes)] [Message type (4 bytes)] [Body]

The magic identifies the protocol, the schema is the QDataStream version the
sender used, and the message type selects the body layout.
"""

from __future__ import annotations

import struct
from typing import NamedTuple, Optional

from ..exceptions import FramingError

MAGIC = 0xADBCCBDA

# Schema this library writes (QDataStream::Qt_5_0)
CURRENT_SCHEMA = 2

# Schemas whose layout of the field types used here is identical
SUPPORTED_SCHEMAS = (2, 3)

HEADER_SIZE = 12

_MAGIC = struct.Struct(">I")
_HEADER = struct.Struct(">III")


class Frame(NamedTuple):
    """A datagram split into its envelope fields and body."""

    schema: int
    message_type: int
    payload: bytes
    missing: int = 0


def is_wsjtx_datagram(data: bytes) -> bool:
    """Return True if ``data`` starts with the WSJT-X magic number."""
    return len(data) >= _MAGIC.size and _MAGIC.unpack_from(data)[0] == MAGIC


def frame_message(message_type: int, payload: bytes, *, schema: int = CURRENT_SCHEMA) -> bytes:
    """Prepend the envelope header to an encoded message body.

    Args:
        message_type: Message type tag (u32)
        payload: Encoded message body
        schema: Schema number to advertise

    Returns:
        Complete datagram

    Example:
        >>> frame_message(6, bytes.fromhex("0000000657534a542d58")).hex()
        'adbccbda00000002000000060000000657534a542d58'
    """
    if not 0 <= message_type <= 0xFFFFFFFF:
        raise ValueError(f"Message type must be a u32, got {message_type}")
    if not 0 <= schema <= 0xFFFFFFFF:
        raise ValueError(f"Schema must be a u32, got {schema}")
    return _HEADER.pack(MAGIC, schema, message_type) + payload


def unframe_message(datagram: bytes, length: Optional[int] = None) -> Optional[Frame]:
    """Split a datagram into schema, message type and body.

    Args:
        datagram: Received bytes
        length: Declared datagram length (defaults to ``len(datagram)``); when it
            exceeds the buffer, the shortfall is reported in ``Frame.missing``

    Returns:
        Frame, or None if the datagram does not carry the WSJT-X magic

    Raises:
        FramingError: If the magic is present but the rest of the header is truncated

    Example:
        >>> frame = unframe_message(bytes.fromhex("adbccbda00000002000000060000000657534a542d58"))
        >>> frame.schema, frame.message_type
        (2, 6)
    """
    if length is None:
        length = len(datagram)
    missing = max(0, length - len(datagram))
    data = datagram[: max(0, length)]

    if not is_wsjtx_datagram(data):
        return None

    if len(data) < HEADER_SIZE:
        raise FramingError(
            f"header too short: need {HEADER_SIZE} bytes, got {len(data)} bytes"
        )

    _magic, schema, message_type = _HEADER.unpack_from(data)
    return Frame(schema, message_type, bytes(data[HEADER_SIZE:]), missing)
