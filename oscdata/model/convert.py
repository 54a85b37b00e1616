"""Conversion between structured values and OSC bytes."""

from typing import Any, Self, TypeVar

from oscdata.codec.decoder import DEFAULT_MAX_DEPTH, Decoder, PacketAccess
from oscdata.codec.encoder import Encoder
from oscdata.codec.types import Packet

from .builder import construct
from .walker import walk

T = TypeVar("T")


def to_packet(value: Any) -> Packet:
    """Build the Message or Bundle that a structured value represents."""
    encoder = Encoder()
    walk(value, encoder)
    return encoder.packet()


def to_bytes(value: Any) -> bytes:
    """Encode a tuple, dataclass, Message or Bundle as an OSC packet."""
    encoder = Encoder()
    walk(value, encoder)
    return encoder.result()


def from_bytes(
    data: bytes | bytearray | memoryview,
    target: type[T] | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> T:
    """Decode an OSC packet into ``target``.

    Args:
        data: One complete OSC packet.
        target: Dataclass type to build, ``Message``/``Bundle`` for the
            packet itself, or None for the natural tuple form.
        max_depth: Maximum bundle nesting accepted.
    """
    packet = Decoder(max_depth=max_depth).decode(data)
    return construct(target, PacketAccess(packet))


class OscStruct:
    """Optional base class for dataclasses that map to OSC packets.

    The first field selects the packet kind: a ``str`` address makes a
    message, a ``TimeTag`` makes a bundle.

    Example:
        @dataclass
        class SetFrequency(OscStruct):
            address: str
            frequency: float = osc_field(type="float32")

        data = SetFrequency("/synth/freq", 440).to_bytes()
        message = SetFrequency.from_bytes(data)
    """

    def to_bytes(self) -> bytes:
        """Encode this struct to OSC bytes."""
        return to_bytes(self)

    def to_packet(self) -> Packet:
        return to_packet(self)

    @classmethod
    def from_bytes(
        cls, data: bytes | bytearray | memoryview, *, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> Self:
        """Decode an instance of this struct from OSC bytes."""
        return from_bytes(data, cls, max_depth=max_depth)
