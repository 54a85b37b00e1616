"""Encoded size calculation for OSC packets."""

from dataclasses import dataclass
from enum import StrEnum, auto

from .primitives import blob_length, string_length
from .types import Blob, Bundle, Float32, Int32, Message, Packet, Str

# "#bundle\0" followed by the 8-byte time tag
BUNDLE_HEADER_SIZE = 16
ELEMENT_PREFIX_SIZE = 4
NUMERIC_SIZE = 4


class SizeKind(StrEnum):
    """Classification of size characteristics."""

    FIXED = auto()  # Min == Max, no variable components
    VARIABLE = auto()  # Strings, blobs or bundle elements of any length


@dataclass(frozen=True)
class SizeInfo:
    """Size information for a packet shape."""

    min_size: int
    max_size: int | None  # None means unbounded
    kind: SizeKind

    @property
    def is_fixed(self) -> bool:
        return self.kind == SizeKind.FIXED

    def __add__(self, other: "SizeInfo") -> "SizeInfo":
        max_size = None
        if self.max_size is not None and other.max_size is not None:
            max_size = self.max_size + other.max_size
        kind = SizeKind.FIXED if self.is_fixed and other.is_fixed else SizeKind.VARIABLE
        return SizeInfo(self.min_size + other.min_size, max_size, kind)


def fixed(size: int) -> SizeInfo:
    return SizeInfo(size, size, SizeKind.FIXED)


def variable(min_size: int) -> SizeInfo:
    return SizeInfo(min_size, None, SizeKind.VARIABLE)


def argument_size(arg: Float32 | Int32 | Str | Blob) -> int:
    """Number of bytes an argument's payload occupies."""
    match arg:
        case Float32() | Int32():
            return NUMERIC_SIZE
        case Str(value):
            return string_length(value.encode("utf-8"))
        case Blob(value):
            return blob_length(value)
    raise TypeError(f"{type(arg).__name__} is not an OSC argument")


def encoded_size(packet: Packet) -> int:
    """Number of bytes ``encode(packet)`` produces, computed without encoding."""
    match packet:
        case Message(address, arguments):
            return (
                string_length(address.encode("utf-8"))
                + string_length(packet.type_tags.encode("ascii"))
                + sum(argument_size(arg) for arg in arguments)
            )
        case Bundle(_, elements):
            return BUNDLE_HEADER_SIZE + sum(
                ELEMENT_PREFIX_SIZE + encoded_size(element) for element in elements
            )
    raise TypeError(f"{type(packet).__name__} is not an OSC packet")
