"""Value types of the OSC 1.0 data model.

Arguments are a closed set of four variants. Messages and bundles are plain
frozen dataclasses; neither stores anything that can be derived from its
contents (a message's type-tag string is computed from its arguments).
"""

import math
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar, Self

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
UINT32_MAX = 2**32 - 1


@dataclass(frozen=True, slots=True)
class Float32:
    """32-bit IEEE-754 float argument, tag 'f'."""

    tag: ClassVar[str] = "f"

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError(f"Float32 requires a number, got {type(self.value).__name__}")
        value = float(self.value)
        try:
            (single,) = struct.unpack(">f", struct.pack(">f", value))
        except OverflowError as ex:
            raise ValueError(f"{value!r} does not fit in a float32") from ex
        if math.isinf(single) and not math.isinf(value):
            raise ValueError(f"{value!r} does not fit in a float32")
        object.__setattr__(self, "value", single)


@dataclass(frozen=True, slots=True)
class Int32:
    """32-bit two's complement integer argument, tag 'i'."""

    tag: ClassVar[str] = "i"

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Int32 requires an int, got {type(self.value).__name__}")
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"{self.value} does not fit in an int32")


@dataclass(frozen=True, slots=True)
class Str:
    """Text argument, tag 's'."""

    tag: ClassVar[str] = "s"

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValueError(f"Str requires a str, got {type(self.value).__name__}")
        if "\x00" in self.value:
            raise ValueError("OSC strings cannot contain null characters")
        try:
            self.value.encode("utf-8")
        except UnicodeEncodeError as ex:
            raise ValueError(f"{self.value!r} is not encodable as UTF-8") from ex


@dataclass(frozen=True, slots=True)
class Blob:
    """Opaque binary argument, tag 'b'."""

    tag: ClassVar[str] = "b"

    value: bytes

    def __post_init__(self) -> None:
        if isinstance(self.value, bytes):
            return
        if not isinstance(self.value, (bytearray, memoryview)):
            raise ValueError(f"Blob requires bytes, got {type(self.value).__name__}")
        object.__setattr__(self, "value", bytes(self.value))


Argument = Float32 | Int32 | Str | Blob

#: Maps declared field type names to argument variants
ARGUMENT_NAMES: dict[str, type[Argument]] = {
    "float32": Float32,
    "int32": Int32,
    "string": Str,
    "blob": Blob,
}

#: Maps each type tag character to its argument variant
ARGUMENT_TYPES: dict[str, type[Argument]] = {
    Float32.tag: Float32,
    Int32.tag: Int32,
    Str.tag: Str,
    Blob.tag: Blob,
}


@dataclass(frozen=True, slots=True)
class TimeTag:
    """64-bit OSC time tag.

    ``seconds`` counts from 1900-01-01 and ``fraction`` is in units of
    1/2**32 seconds. Unpacks like a ``(seconds, fraction)`` pair.
    """

    IMMEDIATELY: ClassVar["TimeTag"]

    seconds: int
    fraction: int = 0

    def __post_init__(self) -> None:
        for name in ("seconds", "fraction"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"time tag {name} must be an int")
            if not 0 <= value <= UINT32_MAX:
                raise ValueError(f"time tag {name} {value} does not fit in a uint32")

    def __iter__(self) -> Iterator[int]:
        yield self.seconds
        yield self.fraction

    def __int__(self) -> int:
        return (self.seconds << 32) | self.fraction

    @classmethod
    def from_int(cls, value: int) -> Self:
        """Split a 64-bit time tag into seconds and fraction."""
        return cls(value >> 32, value & UINT32_MAX)


TimeTag.IMMEDIATELY = TimeTag(0, 1)


@dataclass(frozen=True, slots=True)
class Message:
    """An address pattern with an ordered sequence of arguments."""

    address: str
    arguments: tuple[Argument, ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.arguments, tuple):
            object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def type_tags(self) -> str:
        """The OSC type-tag string, derived from the argument variants."""
        return "," + "".join(arg.tag for arg in self.arguments)


@dataclass(frozen=True, slots=True)
class Bundle:
    """A time tag with an ordered sequence of nested packets."""

    timetag: TimeTag
    elements: tuple["Packet", ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.timetag, TimeTag):
            object.__setattr__(self, "timetag", TimeTag(*self.timetag))
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))

    @property
    def depth(self) -> int:
        """Nesting depth of this bundle; a bundle of messages has depth 1."""
        return 1 + max(
            (element.depth for element in self.elements if isinstance(element, Bundle)),
            default=0,
        )


Packet = Message | Bundle
