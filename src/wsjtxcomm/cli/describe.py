"""Message layout CLI command."""

from __future__ import annotations

from ..codec.schema import MessageSchema
from ..models.base import BaseMessage
from ..registry import MESSAGE_REGISTRY, registered_types


def describe_messages(selector: str | None = None) -> int:
    """Print the wire layout of registered messages.

    Args:
        selector: Type tag or class name to describe; None describes all

    Returns:
        Number of messages described
    """
    classes = [MESSAGE_REGISTRY[msg_type] for msg_type in registered_types()]
    if selector is not None:
        classes = [cls for cls in classes if _matches(cls, selector)]

    if not classes:
        print(f"No message matches {selector!r}")
        return 0

    print(f"{len(classes)} message{'s' if len(classes) != 1 else ''} registered.")
    print("Sizes are in bytes; strings are a 4 byte length plus UTF-8 data.")
    print()

    for message_class in classes:
        describe_message_class(message_class)
    return len(classes)


def _matches(message_class: type[BaseMessage], selector: str) -> bool:
    if selector.isdigit():
        return message_class.wsjtx_type == int(selector)
    name = selector.lower()
    return message_class.__name__.lower() in (name, f"{name}message")


def describe_message_class(message_class: type[BaseMessage]) -> None:
    """Print the field-by-field layout of a single message class."""
    schema = MessageSchema.from_model(message_class)

    print(f"{'=' * 19} {message_class.wsjtx_type}: {message_class.__name__} {'=' * 19}")
    print(f"Direction: {message_class.wsjtx_direction.value}")
    print(f"Minimum size: {12 + schema.min_bytes()} bytes (12 byte header)")
    print()

    print(f"{'-' * 27} Body {'-' * 27}")
    for index, field in enumerate(schema.fields, start=1):
        if not field.on_wire:
            print(f"{index}. {field.name} (not sent)")
            continue
        size = field.wire_type.fixed_size
        size_text = f"{size}" if size is not None else "4+"
        note = " (trailing, optional)" if field.trailing else ""
        label = f"{index}. {field.name}"
        print(f"{label}{'.' * max(2, 40 - len(label))}{field.wire_type.value:<10}{size_text:>4}{note}")
    print()
