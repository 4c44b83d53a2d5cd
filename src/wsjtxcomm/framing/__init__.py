"""Datagram framing for wsjtxcomm.

This module provides the envelope (magic, schema, message type) that wraps
every WSJT-X message body.
"""

from __future__ import annotations

from .envelope import (
    CURRENT_SCHEMA,
    HEADER_SIZE,
    MAGIC,
    SUPPORTED_SCHEMAS,
    Frame,
    frame_message,
    is_wsjtx_datagram,
    unframe_message,
)

__all__ = [
    "MAGIC",
    "CURRENT_SCHEMA",
    "SUPPORTED_SCHEMAS",
    "HEADER_SIZE",
    "Frame",
    "frame_message",
    "unframe_message",
    "is_wsjtx_datagram",
]
