"""OSC packet decoder."""

import logging
from collections.abc import Iterator
from typing import Any

from .encoder import BUNDLE_MARKER
from .errors import (
    DepthExceeded,
    InvalidAddress,
    MalformedString,
    MissingTypeTag,
    ShapeError,
    TrailingData,
    Truncated,
    UnsupportedType,
)
from .primitives import Reader
from .types import Argument, Blob, Bundle, Float32, Int32, Message, Packet, Str, TimeTag

logger = logging.getLogger(__name__)

#: Default limit on bundle nesting
DEFAULT_MAX_DEPTH = 32


class Decoder:
    """Decodes OSC packets from bytes.

    Every length read from the input is treated as untrusted; decoding never
    reads outside of the supplied buffer and fails with a ``DecodeError``
    subclass carrying the offending byte offset.

    Args:
        max_depth: Maximum bundle nesting. A top-level bundle has depth 1;
            0 rejects every bundle.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must not be negative")
        self.max_depth = max_depth

    def decode(self, data: bytes | bytearray | memoryview) -> Packet:
        """Decode exactly one packet occupying all of ``data``."""
        packet = self._decode_packet(Reader(data), depth=0)
        logger.debug("Decoded %s from %d bytes", type(packet).__name__, len(data))
        return packet

    def _decode_packet(self, reader: Reader, depth: int) -> Packet:
        start = reader.offset
        try:
            head = reader.read_string()
        except MalformedString as ex:
            raise InvalidAddress(f"address is not a valid OSC-string: {ex.rule}", start) from ex

        if head == BUNDLE_MARKER:
            if depth + 1 > self.max_depth:
                raise DepthExceeded(
                    f"bundle nesting exceeds the limit of {self.max_depth}", start
                )
            return self._decode_bundle(reader, depth + 1)

        if not head.startswith("/"):
            raise InvalidAddress(f"address {head!r} must start with '/'", start)
        return self._decode_message(reader, head)

    def _decode_message(self, reader: Reader, address: str) -> Message:
        if reader.remaining == 0:
            raise Truncated("message has no type tag string", reader.offset)

        tag_offset = reader.offset
        type_tags = reader.read_string()
        if not type_tags.startswith(","):
            raise MissingTypeTag(f"type tag string {type_tags!r} must start with ','", tag_offset)

        arguments: list[Argument] = []
        for tag in type_tags[1:]:
            arguments.append(self._decode_argument(reader, tag))

        if reader.remaining:
            raise TrailingData(
                f"{reader.remaining} bytes left after the arguments of {address}", reader.offset
            )
        return Message(address, tuple(arguments))

    def _decode_argument(self, reader: Reader, tag: str) -> Argument:
        match tag:
            case "f":
                return Float32(reader.read_float32())
            case "i":
                return Int32(reader.read_int32())
            case "s":
                return Str(reader.read_string())
            case "b":
                return Blob(reader.read_blob())
            case _:
                raise UnsupportedType(f"unsupported type tag {tag!r}", reader.offset)

    def _decode_bundle(self, reader: Reader, depth: int) -> Bundle:
        timetag = reader.read_timetag()

        elements: list[Packet] = []
        while reader.remaining:
            size_offset = reader.offset
            size = reader.read_int32()
            if size < 0 or size > reader.remaining:
                raise Truncated(
                    f"bundle element of {size} bytes but only {reader.remaining} remain",
                    size_offset,
                )
            elements.append(self._decode_packet(reader.sub_reader(size), depth))

        return Bundle(timetag, tuple(elements))


def decode(data: bytes | bytearray | memoryview, max_depth: int = DEFAULT_MAX_DEPTH) -> Packet:
    """Decode OSC bytes into a Message or Bundle."""
    return Decoder(max_depth=max_depth).decode(data)


class PacketAccess:
    """Pull-based view of a decoded packet, in wire order.

    For a message this yields the address followed by each argument's value;
    for a bundle, the time tag followed by one nested ``PacketAccess`` per
    element. Used by ``oscdata.model.builder`` to construct structured values.
    """

    def __init__(self, packet: Packet) -> None:
        self.packet = packet
        self._items = list(self._iter_items(packet))
        self._index = 0

    @staticmethod
    def _iter_items(packet: Packet) -> Iterator[Any]:
        match packet:
            case Message(address, arguments):
                yield address
                for arg in arguments:
                    yield arg.value
            case Bundle(timetag, elements):
                yield timetag
                for element in elements:
                    yield PacketAccess(element)

    @property
    def is_bundle(self) -> bool:
        return isinstance(self.packet, Bundle)

    @property
    def remaining(self) -> int:
        return len(self._items) - self._index

    def peek(self) -> Any:
        """Return the next item without consuming it."""
        if not self.remaining:
            raise ShapeError(f"no more fields in {self.describe()}")
        return self._items[self._index]

    def next_field(self) -> Any:
        """Consume the next address, argument value or time tag."""
        item = self.peek()
        if isinstance(item, PacketAccess):
            raise ShapeError(f"expected a field in {self.describe()}, found a nested packet")
        self._index += 1
        return item

    def next_argument(self) -> Argument:
        """Consume the next message argument as its Argument variant."""
        if not isinstance(self.packet, Message) or self._index == 0:
            raise ShapeError(f"no argument available in {self.describe()}")
        self.peek()
        arg = self.packet.arguments[self._index - 1]
        self._index += 1
        return arg

    def next_sequence(self) -> "PacketAccess":
        """Consume the next nested bundle element."""
        item = self.peek()
        if not isinstance(item, PacketAccess):
            raise ShapeError(f"expected a nested packet in {self.describe()}")
        self._index += 1
        return item

    def describe(self) -> str:
        match self.packet:
            case Message(address):
                return f"message {address}"
            case Bundle(timetag):
                return f"bundle at {tuple(timetag)}"
        return repr(self.packet)
