"""Pydantic message modeling for wsjtxcomm.

This module provides the BaseMessage class, field helpers, and the 16 WSJT-X
message types.
"""

from __future__ import annotations

from .base import BaseMessage, Direction
from .fields import NO_CHANGE_U32, Int32, NotOnWire, QColor, UInt, UInt8, UInt16, UInt32, UInt64, Utf8
from .messages import (
    CLEAR_BAND_ACTIVITY,
    CLEAR_BOTH,
    CLEAR_RX_FREQUENCY,
    ClearMessage,
    CloseMessage,
    ConfigureMessage,
    DecodeMessage,
    FreeTextMessage,
    HaltTxMessage,
    HeartbeatMessage,
    HighlightCallsignMessage,
    LocationMessage,
    LoggedAdifMessage,
    Message,
    QsoLoggedMessage,
    ReplayMessage,
    ReplyMessage,
    StatusMessage,
    SwitchConfigurationMessage,
    WSPRDecodeMessage,
)

__all__ = [
    "BaseMessage",
    "Direction",
    # Field helpers
    "NO_CHANGE_U32",
    "Int32",
    "NotOnWire",
    "QColor",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Utf8",
    # Messages
    "Message",
    "HeartbeatMessage",
    "StatusMessage",
    "DecodeMessage",
    "ClearMessage",
    "ReplyMessage",
    "QsoLoggedMessage",
    "CloseMessage",
    "ReplayMessage",
    "HaltTxMessage",
    "FreeTextMessage",
    "WSPRDecodeMessage",
    "LocationMessage",
    "LoggedAdifMessage",
    "HighlightCallsignMessage",
    "SwitchConfigurationMessage",
    "ConfigureMessage",
    "CLEAR_BAND_ACTIVITY",
    "CLEAR_RX_FREQUENCY",
    "CLEAR_BOTH",
]
