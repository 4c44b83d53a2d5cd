"""QDataStream decoder and dispatcher for WSJT-X datagrams.

This module provides the decode() function that validates the envelope,
looks up the message class for the type tag and reads its fields.

decode() never raises for malformed input. It returns a ``(message, error)``
pair so a receive loop can report a bad datagram and keep going:

- ``(None, None)``: not a WSJT-X datagram (wrong magic), ignore it
- ``(message, None)``: clean decode
- ``(message, error)``: best-effort message, do not trust its missing/extra fields
- ``(None, error)``: nothing usable could be decoded
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple, Optional

from ..exceptions import DecodeError, LengthMismatchError, SchemaMismatchError, UnknownMessageTypeError
from ..framing.envelope import SUPPORTED_SCHEMAS, unframe_message
from ..models.base import BaseMessage
from ..registry import message_class_for
from .qtypes import SPEC_INVALID, format_color
from .schema import FieldSchema, MessageSchema, WireType
from .stream import ByteReader

logger = logging.getLogger(__name__)

_READERS: dict[WireType, Callable[[ByteReader], Any]] = {
    WireType.UINT8: ByteReader.read_uint8,
    WireType.UINT16: ByteReader.read_uint16,
    WireType.UINT32: ByteReader.read_uint32,
    WireType.UINT64: ByteReader.read_uint64,
    WireType.INT32: ByteReader.read_int32,
    WireType.BOOL: ByteReader.read_bool,
    WireType.FLOAT64: ByteReader.read_float64,
    WireType.UTF8: ByteReader.read_utf8,
    WireType.QDATETIME: ByteReader.read_qdatetime,
}


class DecodeResult(NamedTuple):
    """Outcome of decoding one datagram."""

    message: Optional[BaseMessage]
    error: Optional[DecodeError]


def decode(data: bytes, length: Optional[int] = None, *, strict_schema: bool = False) -> DecodeResult:
    """Decode a WSJT-X datagram.

    Args:
        data: Received bytes
        length: Declared datagram length, defaults to ``len(data)``. Bytes past
            ``length`` are ignored; a length beyond the buffer is reported as short.
        strict_schema: Reject datagrams whose schema is not in SUPPORTED_SCHEMAS
            instead of decoding them and reporting the mismatch alongside

    Returns:
        DecodeResult(message, error)

    Examples:
        ```python
        from wsjtxcomm import decode

        result = decode(bytes.fromhex("adbccbda00000002000000060000000657534a542d58"))
        assert result.error is None
        assert result.message.id == "WSJT-X"
        ```
    """
    try:
        frame = unframe_message(data, length)
    except DecodeError as e:
        logger.debug("Dropping datagram with truncated header: %s", e)
        return DecodeResult(None, e)

    if frame is None:
        return DecodeResult(None, None)

    message_class = message_class_for(frame.message_type)

    schema_error: Optional[SchemaMismatchError] = None
    if frame.schema not in SUPPORTED_SCHEMAS:
        schema_error = SchemaMismatchError(frame.schema)
        if message_class is not None:
            schema_error.with_message_type(message_class.__name__)
        if strict_schema:
            logger.warning("Rejecting datagram: %s", schema_error)
            return DecodeResult(None, schema_error)
        logger.warning("%s, decoding anyway", schema_error)

    if message_class is None:
        error = UnknownMessageTypeError(frame.message_type)
        logger.debug("%s", error)
        return DecodeResult(None, error)

    reader = ByteReader(frame.payload)
    message, error = _decode_fields(message_class, reader)
    if error is not None:
        return DecodeResult(message, error.with_message_type(message_class.__name__))

    delta = reader.remaining() - frame.missing
    if delta != 0:
        length_error = LengthMismatchError(delta, message_type=message_class.__name__)
        logger.debug("%s", length_error)
        return DecodeResult(message, length_error)

    logger.debug("Decoded %s (schema %d)", message_class.__name__, frame.schema)
    return DecodeResult(message, schema_error)


def _decode_fields(
    message_class: type[BaseMessage], reader: ByteReader
) -> tuple[BaseMessage, Optional[DecodeError]]:
    """Read every wire field of a message, stopping at the first failure.

    Returns:
        The (possibly partial) message and the error that stopped decoding
    """
    schema = MessageSchema.from_model(message_class)
    values: dict[str, Any] = {}
    invalid_colors: dict[str, list[bool]] = {}
    error: Optional[DecodeError] = None

    for field_schema in schema.wire_fields:
        # Trailing fields were added by later WSJT-X releases; older senders omit them
        if field_schema.trailing and reader.remaining() == 0:
            break
        try:
            _decode_field(reader, field_schema, values, invalid_colors)
        except DecodeError as e:
            error = e
            break

    # One reset flag covers several colors; set it only when all of them were invalid
    for reset_field, flags in invalid_colors.items():
        expected = sum(1 for field in schema.wire_fields if field.reset_field == reset_field)
        if len(flags) == expected and all(flags):
            values[reset_field] = True

    return message_class(**values), error


def _decode_field(
    reader: ByteReader,
    field_schema: FieldSchema,
    values: dict[str, Any],
    invalid_colors: dict[str, list[bool]],
) -> None:
    if field_schema.wire_type is WireType.QCOLOR:
        color = reader.read_color()
        values[field_schema.name] = format_color(color)
        if field_schema.reset_field is not None:
            invalid_colors.setdefault(field_schema.reset_field, []).append(color.spec == SPEC_INVALID)
        return

    reader_fn = _READERS[field_schema.wire_type]
    values[field_schema.name] = reader_fn(reader)
