"""QDataStream encoder for WSJT-X messages.

This module provides the encode() function that converts a message instance
into a complete datagram: envelope header followed by the fields in
declaration order.
"""

from __future__ import annotations

from typing import Any, Callable

from ..exceptions import EncodeError
from ..framing.envelope import CURRENT_SCHEMA, frame_message
from ..models.base import BaseMessage
from .schema import FieldSchema, MessageSchema, WireType
from .stream import ByteWriter

_WRITERS: dict[WireType, Callable[[ByteWriter, Any], None]] = {
    WireType.UINT8: ByteWriter.write_uint8,
    WireType.UINT16: ByteWriter.write_uint16,
    WireType.UINT32: ByteWriter.write_uint32,
    WireType.UINT64: ByteWriter.write_uint64,
    WireType.INT32: ByteWriter.write_int32,
    WireType.BOOL: ByteWriter.write_bool,
    WireType.FLOAT64: ByteWriter.write_float64,
    WireType.UTF8: ByteWriter.write_utf8,
    WireType.QDATETIME: ByteWriter.write_qdatetime,
}


def encode_body(message: BaseMessage) -> bytes:
    """Encode only the fields of a message, without the envelope header.

    Trailing fields are always written.

    Raises:
        EncodeError: If a field value cannot be represented on the wire
    """
    schema = MessageSchema.from_model(type(message))
    writer = ByteWriter()

    for field_schema in schema.wire_fields:
        _encode_field(writer, message, field_schema)

    return writer.to_bytes()


def encode(message: BaseMessage, *, schema: int = CURRENT_SCHEMA) -> bytes:
    """Encode a message to a WSJT-X datagram.

    Args:
        message: Message instance to encode
        schema: Schema number written into the envelope

    Returns:
        Datagram bytes, ready to send

    Raises:
        SchemaError: If the message class declares an unsupported field
        EncodeError: If the class has no type tag or a field value is invalid

    Examples:
        ```python
        from wsjtxcomm import ReplayMessage, encode

        data = encode(ReplayMessage(id="WSJT-X"))
        assert data.hex() == "adbccbda00000002000000070000000657534a542d58"
        ```
    """
    msg_type = type(message).wsjtx_type
    if msg_type is None:
        raise EncodeError(
            f"{type(message).__name__} has no wsjtx_type attribute. "
            f"Only registered messages can be encoded."
        )

    return frame_message(msg_type, encode_body(message), schema=schema)


def _encode_field(writer: ByteWriter, message: BaseMessage, field_schema: FieldSchema) -> None:
    value = getattr(message, field_schema.name)

    try:
        if field_schema.wire_type is WireType.QCOLOR:
            reset_field = field_schema.reset_field
            invalid = reset_field is not None and bool(getattr(message, reset_field))
            writer.write_color(value, invalid=invalid)
            return

        writer_fn = _WRITERS.get(field_schema.wire_type)
        if writer_fn is None:
            raise EncodeError(
                f"Field {field_schema.name}: unsupported wire type {field_schema.wire_type.value}"
            )
        writer_fn(writer, value)
    except EncodeError as e:
        raise EncodeError(f"{type(message).__name__}.{field_schema.name}: {e}") from e
    except (ValueError, TypeError, OverflowError) as e:
        raise EncodeError(
            f"{type(message).__name__}.{field_schema.name}: cannot encode {value!r}: {e}"
        ) from e
