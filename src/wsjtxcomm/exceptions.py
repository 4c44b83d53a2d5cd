"""Exception hierarchy for wsjtxcomm.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from WsjtxcommError for easy catching of any wsjtxcomm-specific error.

Decode errors are normally *returned* by :func:`wsjtxcomm.decode` rather than raised,
so that a malformed datagram can be reported without interrupting a receive loop.
"""

from __future__ import annotations


class WsjtxcommError(Exception):
    """Base exception for all wsjtxcomm errors."""

    pass


class SchemaError(WsjtxcommError):
    """Raised when a message model declares a field the codec cannot encode.

    Examples:
        - Integer field without a wire width
        - Unsupported annotation type
        - Color field pointing at a missing reset flag
    """

    pass


class EncodeError(WsjtxcommError):
    """Raised when encoding a message fails.

    Examples:
        - Unrecognized color name or hex string
        - Value out of range for its wire width
    """

    pass


class DecodeError(WsjtxcommError):
    """Base class for problems found while decoding a datagram.

    Attributes:
        message_type: Name of the message class being decoded, or ``"unknown"``
            when the failure happened before the type tag was known.
    """

    def __init__(self, detail: str, *, message_type: str = "unknown") -> None:
        self.detail = detail
        self.message_type = message_type
        super().__init__(f"parsing {message_type}: {detail}")

    def with_message_type(self, message_type: str) -> DecodeError:
        """Attach the message type name once the dispatcher knows it."""
        self.message_type = message_type
        self.args = (f"parsing {message_type}: {self.detail}",)
        return self


class FramingError(DecodeError):
    """Raised when the envelope header (schema, message type) is truncated."""

    pass


class InsufficientBytesError(DecodeError):
    """Raised when a field needs more bytes than the datagram has left.

    This usually means the sender speaks an older revision of the protocol.
    """

    def __init__(self, wanted: int, available: int, *, message_type: str = "unknown") -> None:
        self.wanted = wanted
        self.available = available
        super().__init__(
            f"fewer bytes than expected (need {wanted}, have {available}), "
            f"maybe an older version of WSJT-X",
            message_type=message_type,
        )


class InvalidFieldError(DecodeError):
    """Raised when a field holds a value outside its domain.

    Examples:
        - QDateTime timespec other than local (0) or UTC (1)
        - QColor spec other than invalid (0) or RGB (1)
        - Julian day outside the representable calendar
    """

    pass


class LengthMismatchError(DecodeError):
    """Reported when the fields do not consume the datagram exactly.

    Attributes:
        delta: Positive for bytes left over, negative for bytes missing.
    """

    def __init__(self, delta: int, *, message_type: str = "unknown") -> None:
        self.delta = delta
        if delta > 0:
            detail = f"there were {delta} bytes left over"
        else:
            detail = f"there were {-delta} bytes short"
        super().__init__(detail, message_type=message_type)


class SchemaMismatchError(DecodeError):
    """Reported when a datagram carries a schema version this library does not know."""

    def __init__(self, schema: int, *, message_type: str = "unknown") -> None:
        self.schema = schema
        super().__init__(f"got a schema version I wasn't expecting: {schema}", message_type=message_type)


class UnknownMessageTypeError(DecodeError):
    """Reported when the message type tag is not in the registry."""

    def __init__(self, type_number: int) -> None:
        self.type_number = type_number
        super().__init__(f"unknown message type {type_number}")


class TransportError(WsjtxcommError):
    """Raised when the UDP socket cannot be opened, read or written."""

    pass


class NotConnectedError(TransportError):
    """Raised when sending before any peer has been heard from.

    UDP has no connection; the peer address is learned from the first
    inbound datagram.
    """

    pass
