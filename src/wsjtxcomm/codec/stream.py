"""Byte-level packing and unpacking utilities.

This module provides the QDataStream primitives used by every WSJT-X message.
All values are big-endian and byte-aligned.
"""

from __future__ import annotations

import struct
from datetime import datetime
from typing import Optional

from ..exceptions import InsufficientBytesError
from .qtypes import INVALID_COLOR, QColorValue, join_datetime, parse_color, split_datetime

# QDataStream length that marks a null string
NULL_STRING = 0xFFFF_FFFF

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_I32 = struct.Struct(">i")
_F64 = struct.Struct(">d")
_COLOR = struct.Struct(">BHHHHH")


class ByteWriter:
    """Packs values into a growable byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_uint32(3)
        >>> writer.write_utf8("WSJT-X")
        >>> writer.write_uint8(2)
        >>> data = writer.to_bytes()
    """

    def __init__(self) -> None:
        """Initialize an empty writer."""
        self._buffer = bytearray()

    def _pack(self, packer: struct.Struct, *values: object) -> None:
        try:
            self._buffer += packer.pack(*values)
        except struct.error as e:
            raise ValueError(f"{values!r} does not fit format {packer.format!r}: {e}") from e

    def write_uint8(self, value: int) -> None:
        self._pack(_U8, value)

    def write_uint16(self, value: int) -> None:
        self._pack(_U16, value)

    def write_uint32(self, value: int) -> None:
        self._pack(_U32, value)

    def write_uint64(self, value: int) -> None:
        self._pack(_U64, value)

    def write_bool(self, value: bool) -> None:
        """Write a boolean as a single 0/1 byte."""
        self._buffer.append(1 if value else 0)

    def write_int32(self, value: int) -> None:
        """Write a signed 32-bit integer (two's complement, same bits as a u32 cast)."""
        self._pack(_I32, value)

    def write_float64(self, value: float) -> None:
        """Write an IEEE-754 double."""
        self._pack(_F64, value)

    def write_utf8(self, value: str) -> None:
        """Write a length-prefixed UTF-8 string.

        The empty string is written as the null string sentinel rather than a
        zero length, which is what WSJT-X itself sends.
        """
        if not value:
            self.write_uint32(NULL_STRING)
            return
        encoded = value.encode("utf-8")
        self.write_uint32(len(encoded))
        self._buffer += encoded

    def write_color(self, value: str, invalid: bool = False) -> None:
        """Write a QColor.

        Args:
            value: CSS color string; ``""`` writes the invalid color
            invalid: Write the invalid color instead, without parsing ``value``

        Raises:
            EncodeError: If ``value`` is not a recognized color
        """
        color = INVALID_COLOR if invalid or not value else parse_color(value)
        self._pack(_COLOR, color.spec, color.alpha, color.red, color.green, color.blue, 0)

    def write_qdatetime(self, value: Optional[datetime]) -> None:
        """Write a QDateTime (Julian day, ms since midnight, timespec)."""
        julian_day, msecs, timespec = split_datetime(value)
        self.write_uint64(julian_day)
        self.write_uint32(msecs)
        self.write_uint8(timespec)

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the packed bytes."""
        return bytes(self._buffer)


class ByteReader:
    """Unpacks values from a fixed byte buffer, advancing a cursor.

    Every read checks the remaining length first and raises
    :class:`InsufficientBytesError` instead of reading out of bounds. A failed
    read does not move the cursor.

    Example:
        >>> reader = ByteReader(data)
        >>> message_type = reader.read_uint32()
        >>> ident = reader.read_utf8()
    """

    def __init__(self, data: bytes, length: Optional[int] = None) -> None:
        """Initialize a reader.

        Args:
            data: Byte buffer to unpack
            length: Number of meaningful bytes at the start of ``data``
                (defaults to all of it)
        """
        if length is None:
            length = len(data)
        self._data = memoryview(data)[: max(0, length)]
        self._position = 0

    def _take(self, num_bytes: int) -> memoryview:
        available = len(self._data) - self._position
        if num_bytes > available:
            raise InsufficientBytesError(num_bytes, available)
        chunk = self._data[self._position : self._position + num_bytes]
        self._position += num_bytes
        return chunk

    def _unpack(self, packer: struct.Struct) -> tuple:
        return packer.unpack(self._take(packer.size))

    def read_uint8(self) -> int:
        return self._unpack(_U8)[0]

    def read_uint16(self) -> int:
        return self._unpack(_U16)[0]

    def read_uint32(self) -> int:
        return self._unpack(_U32)[0]

    def read_uint64(self) -> int:
        return self._unpack(_U64)[0]

    def read_bool(self) -> bool:
        """Read a single byte; any non-zero value is True."""
        return self.read_uint8() != 0

    def read_int32(self) -> int:
        return self._unpack(_I32)[0]

    def read_float64(self) -> float:
        return self._unpack(_F64)[0]

    def read_utf8(self) -> str:
        """Read a length-prefixed UTF-8 string.

        Both the null sentinel and a zero length decode to ``""``. Invalid UTF-8
        is replaced with U+FFFD, as Qt does.
        """
        start = self._position
        length = self.read_uint32()
        if length == NULL_STRING:
            return ""
        try:
            raw = self._take(length)
        except InsufficientBytesError:
            self._position = start
            raise
        return bytes(raw).decode("utf-8", errors="replace")

    def read_color(self) -> QColorValue:
        """Read a QColor; the trailing pad word is discarded."""
        spec, alpha, red, green, blue, _pad = self._unpack(_COLOR)
        return QColorValue(spec, alpha, red, green, blue)

    def read_qdatetime(self) -> Optional[datetime]:
        """Read a QDateTime; the null QDateTime reads as None.

        Raises:
            InsufficientBytesError: If fewer than 13 bytes remain
            InvalidFieldError: If the timespec or date is invalid
        """
        start = self._position
        try:
            julian_day = self.read_uint64()
            msecs = self.read_uint32()
            timespec = self.read_uint8()
        except InsufficientBytesError:
            self._position = start
            raise
        return join_datetime(julian_day, msecs, timespec)

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes."""
        return bytes(self._take(num_bytes))

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def position(self) -> int:
        """Return the current read position in bytes."""
        return self._position
