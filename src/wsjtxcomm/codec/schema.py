"""Schema introspection for Pydantic message models.

This module analyzes message classes and extracts the wire layout: the
QDataStream type of each field, in declaration order, and which fields are
optional trailing additions from later protocol revisions.
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError


class WireType(enum.Enum):
    """QDataStream field encodings used by WSJT-X."""

    UINT8 = "u8"
    UINT16 = "u16"
    UINT32 = "u32"
    UINT64 = "u64"
    INT32 = "i32"
    BOOL = "bool"
    FLOAT64 = "f64"
    UTF8 = "utf8"
    QDATETIME = "qdatetime"
    QCOLOR = "color"
    NONE = "none"

    @property
    def fixed_size(self) -> Optional[int]:
        """Encoded size in bytes, or None for variable-length types."""
        return _FIXED_SIZES.get(self)


_FIXED_SIZES = {
    WireType.UINT8: 1,
    WireType.UINT16: 2,
    WireType.UINT32: 4,
    WireType.UINT64: 8,
    WireType.INT32: 4,
    WireType.BOOL: 1,
    WireType.FLOAT64: 8,
    WireType.QDATETIME: 13,
    WireType.QCOLOR: 11,
    WireType.NONE: 0,
}

# Wire types inferred from a bare annotation
_INFERRED = {
    bool: WireType.BOOL,
    float: WireType.FLOAT64,
    str: WireType.UTF8,
    datetime: WireType.QDATETIME,
}


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Field name
        python_type: Python type annotation (Optional unwrapped)
        wire_type: How the field is serialized
        trailing: Whether the field may be missing from the end of a datagram
        reset_field: For color fields, the bool field forcing an invalid color
        default: Value used when the field is absent
    """

    name: str
    python_type: Type[Any]
    wire_type: WireType
    trailing: bool
    reset_field: Optional[str]
    default: Any

    @property
    def on_wire(self) -> bool:
        return self.wire_type is not WireType.NONE


class MessageSchema:
    """Wire layout of an entire message.

    Example:
        >>> schema = MessageSchema.from_model(HeartbeatMessage)
        >>> [(field.name, field.wire_type.value) for field in schema.fields]
        [('id', 'utf8'), ('max_schema', 'u32'), ('version', 'utf8'), ('revision', 'utf8')]
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to introspect
        """
        self.model_class = model_class
        self.fields: List[FieldSchema] = []
        self._introspect()

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> MessageSchema:
        """Return the (cached) schema for a Pydantic model."""
        return _schema_for(model_class)

    @property
    def wire_fields(self) -> List[FieldSchema]:
        """Fields that are actually serialized, in wire order."""
        return [field for field in self.fields if field.on_wire]

    def _introspect(self) -> None:
        """Introspect the model and populate field schemas."""
        for field_name, field_info in self.model_class.model_fields.items():
            self.fields.append(self._extract_field_schema(field_name, field_info))
        self._validate_layout()

    def _extract_field_schema(self, name: str, field_info: FieldInfo) -> FieldSchema:
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        # Unwrap Optional[T]
        if get_origin(annotation) in (Union, types.UnionType):
            non_none_args = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(non_none_args) != 1:
                raise SchemaError(f"Field {name}: complex Union types not supported")
            annotation = non_none_args[0]

        extra = field_info.json_schema_extra if isinstance(field_info.json_schema_extra, dict) else {}
        declared = extra.get("wire")

        if declared is not None:
            try:
                wire_type = WireType(declared)
            except ValueError as err:
                raise SchemaError(f"Field {name}: unknown wire type {declared!r}") from err
        elif annotation in _INFERRED:
            wire_type = _INFERRED[annotation]
        elif annotation is int:
            raise SchemaError(
                f"Field {name}: integer fields need a wire width, "
                f"declare them with UInt8/UInt16/UInt32/UInt64/Int32"
            )
        else:
            raise SchemaError(
                f"Field {name}: unsupported type {annotation}. "
                f"Supported: bool, float, str, datetime, sized int, color."
            )

        reset_field = extra.get("reset_field") if wire_type is WireType.QCOLOR else None

        return FieldSchema(
            name=name,
            python_type=annotation,
            wire_type=wire_type,
            trailing=bool(extra.get("trailing", False)),
            reset_field=reset_field,
            default=field_info.default,
        )

    def _validate_layout(self) -> None:
        names = {field.name for field in self.fields}
        seen_trailing = False
        for field in self.wire_fields:
            if field.trailing:
                seen_trailing = True
            elif seen_trailing:
                raise SchemaError(
                    f"{self.model_class.__name__}.{field.name}: required field "
                    f"after a trailing field"
                )
            if field.reset_field is not None and field.reset_field not in names:
                raise SchemaError(
                    f"{self.model_class.__name__}.{field.name}: reset field "
                    f"{field.reset_field!r} does not exist"
                )

    def min_bytes(self) -> int:
        """Smallest possible body size (null strings, no trailing fields)."""
        total = 0
        for field in self.wire_fields:
            if field.trailing:
                break
            size = field.wire_type.fixed_size
            total += 4 if size is None else size
        return total


@lru_cache(maxsize=None)
def _schema_for(model_class: Type[BaseModel]) -> MessageSchema:
    return MessageSchema(model_class)
