"""Field type helpers and utilities.

This module provides convenience functions for declaring message fields with
their QDataStream wire type. Each helper is a thin wrapper around Pydantic's
Field() that records the wire type in ``json_schema_extra`` and, for integers,
range constraints matching the wire width.

``bool``, ``float``, ``str`` and ``datetime`` fields can also be declared with
plain defaults; their wire type is inferred from the annotation.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

# Sentinel used by the Configure message (and reported by Status) for "no change"
NO_CHANGE_U32 = 0xFFFFFFFF


def _wire_field(wire: str, *, default: Any, trailing: bool = False, **kwargs: Any) -> FieldInfo:
    extra: dict[str, Any] = {"wire": wire}
    if trailing:
        extra["trailing"] = True
    return cast(FieldInfo, Field(default=default, json_schema_extra=extra, **kwargs))


def UInt(*, bits: int, default: int = 0, **kwargs: Any) -> FieldInfo:
    """Create an unsigned integer field of the given width.

    Args:
        bits: Wire width in bits (8, 16, 32 or 64)
        default: Zero value used when the field is absent
        **kwargs: Additional Field() arguments (serialization_alias, trailing, ...)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Message(BaseMessage):
        ...     rx_df: int = UInt(bits=32)
    """
    if bits not in (8, 16, 32, 64):
        raise ValueError(f"bits must be 8, 16, 32 or 64, got {bits}")
    return _wire_field(f"u{bits}", default=default, ge=0, le=(1 << bits) - 1, **kwargs)


def UInt8(**kwargs: Any) -> FieldInfo:
    return UInt(bits=8, **kwargs)


def UInt16(**kwargs: Any) -> FieldInfo:
    return UInt(bits=16, **kwargs)


def UInt32(**kwargs: Any) -> FieldInfo:
    return UInt(bits=32, **kwargs)


def UInt64(**kwargs: Any) -> FieldInfo:
    return UInt(bits=64, **kwargs)


def Int32(*, default: int = 0, **kwargs: Any) -> FieldInfo:
    """Create a signed 32-bit field (sent as the u32 bit pattern)."""
    return _wire_field("i32", default=default, ge=-(1 << 31), le=(1 << 31) - 1, **kwargs)


def Utf8(*, default: str = "", **kwargs: Any) -> FieldInfo:
    """Create a length-prefixed UTF-8 string field.

    An empty string is sent as the QDataStream null string (length ``0xFFFFFFFF``),
    so empty and null are indistinguishable after a round trip.

    Example:
        >>> class Message(BaseMessage):
        ...     tx_message: str = Utf8(trailing=True)
    """
    return _wire_field("utf8", default=default, **kwargs)


def QColor(*, reset_field: str = "reset", default: str = "", **kwargs: Any) -> FieldInfo:
    """Create a QColor field holding a CSS color string.

    The string is parsed only when encoding, so an unrecognized color is reported
    by ``encode()`` rather than at construction time.

    Args:
        reset_field: Name of the bool field that forces the invalid-color encoding
        default: Color string used when the field is absent
        **kwargs: Additional Field() arguments

    Example:
        >>> class Message(BaseMessage):
        ...     background_color: str = QColor()
        ...     reset: bool = NotOnWire(default=False)
    """
    field = _wire_field("color", default=default, **kwargs)
    cast(dict, field.json_schema_extra)["reset_field"] = reset_field
    return field


def NotOnWire(*, default: Any, **kwargs: Any) -> FieldInfo:
    """Create a field that is part of the model but never serialized."""
    return _wire_field("none", default=default, **kwargs)
