"""Field metadata for structured OSC values."""

import dataclasses
from dataclasses import Field, dataclass, field
from typing import Any

from oscdata.codec.types import ARGUMENT_NAMES, Blob, Bundle, Float32, Int32, Message, Str, TimeTag

#: Declared field types that are not single arguments
STRUCTURE_TYPES = frozenset(["address", "timetag", "args", "elements"])

#: Declared types whose field consumes every remaining item
VARIADIC_TYPES = frozenset(["args", "elements"])

FIELD_TYPES = frozenset(ARGUMENT_NAMES) | STRUCTURE_TYPES

# Dataclasses of the codec itself, which are values rather than structs
_VALUE_TYPES = (TimeTag, Message, Bundle, Float32, Int32, Str, Blob)


@dataclass(frozen=True)
class OscFieldInfo:
    """Metadata for an OSC struct field."""

    type: str | None = None


# Sentinel for missing default
_MISSING: Any = object()


def osc_field(
    type: str | None = None,
    *,
    default: Any = _MISSING,
    default_factory: Any = _MISSING,
) -> Any:
    """Define a dataclass field with OSC metadata.

    Args:
        type: The OSC field type: "int32", "float32", "string", "blob",
            "address", "timetag", "args" (remaining message arguments) or
            "elements" (remaining bundle elements). None infers it from the
            value and annotation.
        default: Default value for the field.
        default_factory: Factory function for default value.

    Returns:
        A dataclass field with OSC metadata attached.
    """
    if type is not None and type not in FIELD_TYPES:
        raise ValueError(f"Unknown OSC field type {type!r}")

    metadata = {"osc": OscFieldInfo(type)}

    if default is not _MISSING:
        return field(default=default, metadata=metadata)
    if default_factory is not _MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(metadata=metadata)


def field_info(f: Field) -> OscFieldInfo:
    """Return the OSC metadata of a dataclass field (empty if undeclared)."""
    return f.metadata.get("osc", OscFieldInfo())


def is_struct_type(annotation: Any) -> bool:
    """True for user dataclass types, which map to nested sequences."""
    return (
        isinstance(annotation, type)
        and dataclasses.is_dataclass(annotation)
        and annotation not in _VALUE_TYPES
    )
