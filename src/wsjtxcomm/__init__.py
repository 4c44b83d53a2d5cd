"""wsjtxcomm: WSJT-X UDP Protocol Codec

A Python library for the network protocol WSJT-X uses to talk to companion
programs (loggers, band maps, automation). WSJT-X serializes its messages with
Qt's QDataStream, so the wire format carries Qt's own string, date/time and
color encodings.

Key Features:
- Pydantic models for all 16 WSJT-X message types
- Byte-exact QDataStream encoding and decoding
- Tolerant decoding across WSJT-X releases (optional trailing fields)
- UDP server that learns the WSJT-X peer and sends commands back

Quick Start:
    >>> from wsjtxcomm import ReplayMessage, decode, encode
    >>>
    >>> data = encode(ReplayMessage(id="WSJT-X"))
    >>> message, error = decode(data)
    >>> message
    ReplayMessage(id='WSJT-X')

Talking to WSJT-X:
    >>> from wsjtxcomm import Server, ServerConfig
    >>>
    >>> with Server(ServerConfig(address="127.0.0.1")) as server:
    ...     server.start()
    ...     for message in server.messages:
    ...         print(message)
"""

from __future__ import annotations

from .codec import DecodeResult, decode, encode
from .exceptions import (
    DecodeError,
    EncodeError,
    FramingError,
    InsufficientBytesError,
    InvalidFieldError,
    LengthMismatchError,
    NotConnectedError,
    SchemaError,
    SchemaMismatchError,
    TransportError,
    UnknownMessageTypeError,
    WsjtxcommError,
)
from .framing import CURRENT_SCHEMA, MAGIC, SUPPORTED_SCHEMAS, frame_message, unframe_message
from .models import (
    CLEAR_BAND_ACTIVITY,
    CLEAR_BOTH,
    CLEAR_RX_FREQUENCY,
    NO_CHANGE_U32,
    BaseMessage,
    ClearMessage,
    CloseMessage,
    ConfigureMessage,
    DecodeMessage,
    Direction,
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
from .registry import MESSAGE_REGISTRY, register_message
from .transport import Channel, ChannelClosed, Server, ServerConfig

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BaseMessage",
    "Direction",
    "encode",
    "decode",
    "DecodeResult",
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
    "NO_CHANGE_U32",
    "CLEAR_BAND_ACTIVITY",
    "CLEAR_RX_FREQUENCY",
    "CLEAR_BOTH",
    # Registry
    "MESSAGE_REGISTRY",
    "register_message",
    # Framing
    "MAGIC",
    "CURRENT_SCHEMA",
    "SUPPORTED_SCHEMAS",
    "frame_message",
    "unframe_message",
    # Transport
    "Server",
    "ServerConfig",
    "Channel",
    "ChannelClosed",
    # Exceptions
    "WsjtxcommError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "FramingError",
    "InsufficientBytesError",
    "InvalidFieldError",
    "LengthMismatchError",
    "SchemaMismatchError",
    "UnknownMessageTypeError",
    "TransportError",
    "NotConnectedError",
    # Version
    "__version__",
]
