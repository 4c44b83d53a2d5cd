"""Tests for the datagram envelope."""

from __future__ import annotations

import pytest

from wsjtxcomm.exceptions import FramingError
from wsjtxcomm.framing import (
    CURRENT_SCHEMA,
    HEADER_SIZE,
    MAGIC,
    Frame,
    frame_message,
    is_wsjtx_datagram,
    unframe_message,
)


class TestFrameMessage:
    """Tests for frame_message()."""

    def test_header_layout(self) -> None:
        """Test magic, schema and type are big-endian u32s."""
        framed = frame_message(6, b"body")
        assert framed[:4] == bytes.fromhex("adbccbda")
        assert framed[4:8] == bytes.fromhex("00000002")
        assert framed[8:12] == bytes.fromhex("00000006")
        assert framed[12:] == b"body"

    def test_defaults(self) -> None:
        """Test the constants."""
        assert MAGIC == 0xADBCCBDA
        assert CURRENT_SCHEMA == 2
        assert HEADER_SIZE == 12

    def test_out_of_range_type(self) -> None:
        """Test the type tag must be a u32."""
        with pytest.raises(ValueError, match="u32"):
            frame_message(2**32, b"")
        with pytest.raises(ValueError, match="u32"):
            frame_message(1, b"", schema=-1)


class TestUnframeMessage:
    """Tests for unframe_message()."""

    def test_split(self) -> None:
        """Test a framed body splits back apart."""
        frame = unframe_message(frame_message(11, b"\x01\x02", schema=3))
        assert frame == Frame(schema=3, message_type=11, payload=b"\x01\x02", missing=0)

    def test_not_wsjtx(self) -> None:
        """Test foreign datagrams return None."""
        assert unframe_message(b"GET / HTTP/1.1\r\n") is None
        assert unframe_message(b"\xad\xbc\xcb") is None

    def test_truncated_header(self) -> None:
        """Test a header cut off after the magic."""
        with pytest.raises(FramingError, match="header too short"):
            unframe_message(bytes.fromhex("adbccbda0000000200"))

    def test_declared_length(self) -> None:
        """Test the declared length trims or reports missing bytes."""
        framed = frame_message(6, b"abc")
        assert unframe_message(framed + b"junk", len(framed)).payload == b"abc"

        frame = unframe_message(framed, len(framed) + 5)
        assert frame is not None
        assert frame.payload == b"abc"
        assert frame.missing == 5

    def test_is_wsjtx_datagram(self) -> None:
        """Test the magic check."""
        assert is_wsjtx_datagram(bytes.fromhex("adbccbda"))
        assert not is_wsjtx_datagram(bytes.fromhex("adbccbdb"))
        assert not is_wsjtx_datagram(b"")
