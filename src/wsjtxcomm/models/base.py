"""Base message class and wsjtxcomm-specific Pydantic configuration.

This module provides the BaseMessage class that all WSJT-X messages inherit from.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


class Direction(enum.Enum):
    """Which side of the link produces a message type.

    ``IN`` messages are consumed by WSJT-X (sent by a controller such as this
    library), ``OUT`` messages are produced by WSJT-X.
    """

    IN = "in"
    OUT = "out"
    BOTH = "in/out"

    @property
    def sendable(self) -> bool:
        """True when a controller may send this message to WSJT-X."""
        return self is not Direction.OUT


class BaseMessage(BaseModel):
    """Base class for all WSJT-X messages.

    Messages are immutable records. Fields are declared in wire order using the
    helpers from :mod:`wsjtxcomm.models.fields`, and every field has a zero
    default so that a partially decoded datagram can still be materialised.

    Protocol options are configured as ClassVar attributes:

    Example:
        >>> class Ping(BaseMessage):
        ...     id: str = Utf8()
        ...     count: int = UInt32()
        ...
        ...     wsjtx_type: ClassVar[int] = 99
        ...     wsjtx_direction: ClassVar[Direction] = Direction.IN

    Attributes:
        wsjtx_type: Message type tag written after the schema number
        wsjtx_direction: Whether WSJT-X sends, receives, or both
    """

    model_config = ConfigDict(
        # Messages never change after construction
        frozen=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
        # Accept both python names and JSON aliases
        populate_by_name=True,
    )

    wsjtx_type: ClassVar[int | None] = None
    wsjtx_direction: ClassVar[Direction] = Direction.BOTH

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        msg_type = cls.__dict__.get("wsjtx_type")
        if msg_type is not None and (not isinstance(msg_type, int) or not 0 <= msg_type <= 0xFFFFFFFF):
            raise ValueError(f"{cls.__name__}.wsjtx_type must be a u32, got {msg_type!r}")
