"""Message type registry for wsjtxcomm.

The registry is the single table mapping a wire message type tag to the
message class that decodes it. The built-in WSJT-X messages register
themselves when :mod:`wsjtxcomm.models.messages` is imported.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.base import BaseMessage

# Global registry: message type tag -> message class
MESSAGE_REGISTRY: dict[int, type[BaseMessage]] = {}


def register_message(message_class: type[BaseMessage]) -> type[BaseMessage]:
    """Register a message class for dispatch by type tag.

    Can be used as a class decorator.

    Args:
        message_class: Message class with a wsjtx_type attribute

    Returns:
        The class, unchanged

    Raises:
        ValueError: If message_class has no wsjtx_type or the tag is already taken
    """
    msg_type = getattr(message_class, "wsjtx_type", None)
    if msg_type is None:
        raise ValueError(
            f"{message_class.__name__} has no wsjtx_type attribute. "
            f"Cannot register for dispatch."
        )

    existing = MESSAGE_REGISTRY.get(msg_type)
    if existing is not None and existing is not message_class:
        raise ValueError(
            f"Message type {msg_type} already registered to {existing.__name__}, "
            f"cannot register {message_class.__name__}"
        )

    MESSAGE_REGISTRY[msg_type] = message_class
    return message_class


def message_class_for(msg_type: int) -> type[BaseMessage] | None:
    """Look up the message class for a type tag, or None if unknown."""
    return MESSAGE_REGISTRY.get(msg_type)


def registered_types() -> list[int]:
    """Return the registered type tags in ascending order."""
    return sorted(MESSAGE_REGISTRY)
