"""Walks structured values as nested sequences of typed fields.

Tuples and dataclass instances become sequences, lists are spliced into the
enclosing sequence (a run of arguments or of bundle elements), and every
other value is a single field. ``Message`` and ``Bundle`` objects are walked
as the sequences they would have been built from.
"""

import dataclasses
from typing import Any, Protocol

from oscdata.codec.errors import ShapeError
from oscdata.codec.types import Blob, Bundle, Float32, Int32, Message, Str, TimeTag

from .fields import VARIADIC_TYPES, field_info


class SequenceVisitor(Protocol):
    """Receives a structured value as sequence events."""

    def begin_sequence(self) -> None: ...

    def field(self, value: Any, osc_type: str | None = None) -> None: ...

    def end_sequence(self) -> None: ...


def walk(value: Any, visitor: SequenceVisitor) -> None:
    """Drive ``visitor`` with ``value``, which must itself be a sequence."""
    if isinstance(value, list) or not _is_sequence(value):
        raise ShapeError(
            f"top-level value must be a tuple or dataclass, got {type(value).__name__}"
        )
    _walk(value, visitor, None)


def _is_sequence(value: Any) -> bool:
    if isinstance(value, (Message, Bundle, tuple)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _walk(value: Any, visitor: SequenceVisitor, osc_type: str | None) -> None:
    match value:
        case Message(address, arguments):
            visitor.begin_sequence()
            visitor.field(address, "address")
            for arg in arguments:
                visitor.field(arg)
            visitor.end_sequence()
        case Bundle(timetag, elements):
            visitor.begin_sequence()
            visitor.field(timetag, "timetag")
            for element in elements:
                _walk(element, visitor, None)
            visitor.end_sequence()
        case TimeTag() | Float32() | Int32() | Str() | Blob():
            visitor.field(value, osc_type)
        case tuple() if osc_type == "timetag":
            try:
                timetag = TimeTag(*value)
            except (TypeError, ValueError) as ex:
                raise ShapeError(f"invalid time tag {value!r}: {ex}") from ex
            visitor.field(timetag, osc_type)
        case list() | tuple() if osc_type in VARIADIC_TYPES:
            for item in value:
                _walk(item, visitor, None)
        case list():
            for item in value:
                _walk(item, visitor, osc_type)
        case tuple():
            visitor.begin_sequence()
            for item in value:
                _walk(item, visitor, None)
            visitor.end_sequence()
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            visitor.begin_sequence()
            for f in dataclasses.fields(value):
                _walk(getattr(value, f.name), visitor, field_info(f).type)
            visitor.end_sequence()
        case _:
            visitor.field(value, osc_type)
