"""OSC packet encoder."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from . import primitives
from .errors import InvalidAddress, ShapeError
from .types import (
    ARGUMENT_NAMES,
    Argument,
    Blob,
    Bundle,
    Float32,
    Int32,
    Message,
    Packet,
    Str,
    TimeTag,
)

BUNDLE_MARKER = "#bundle"


def check_address(address: str) -> None:
    """Raise InvalidAddress unless ``address`` is a valid OSC address pattern."""
    if not isinstance(address, str) or not address.startswith("/"):
        raise InvalidAddress(f"address {address!r} must start with '/'")
    if "\x00" in address:
        raise InvalidAddress(f"address {address!r} contains a null character")
    try:
        address.encode("utf-8")
    except UnicodeEncodeError as ex:
        raise InvalidAddress(f"address {address!r} is not encodable as UTF-8") from ex


def to_argument(value: Any, osc_type: str | None = None) -> Argument:
    """Map a Python value to an OSC argument.

    Args:
        value: An Argument, or an int, float, str or bytes-like value.
        osc_type: Declared argument type name ("int32", "float32", "string"
            or "blob"); overrides the type inferred from ``value``.

    Raises:
        ShapeError: The value cannot be represented as the requested argument.
    """
    if osc_type is not None and osc_type not in ARGUMENT_NAMES:
        raise ShapeError(f"{osc_type!r} is not an argument type")

    if isinstance(value, (Float32, Int32, Str, Blob)):
        if osc_type is not None and not isinstance(value, ARGUMENT_NAMES[osc_type]):
            raise ShapeError(f"{type(value).__name__} argument declared as {osc_type}")
        return value

    if isinstance(value, bool):
        raise ShapeError("bool has no OSC 1.0 argument type")

    if osc_type is not None:
        arg_type = ARGUMENT_NAMES[osc_type]
    elif isinstance(value, int):
        arg_type = Int32
    elif isinstance(value, float):
        arg_type = Float32
    elif isinstance(value, str):
        arg_type = Str
    elif isinstance(value, (bytes, bytearray, memoryview)):
        arg_type = Blob
    else:
        raise ShapeError(f"{type(value).__name__} has no OSC argument type")

    try:
        return arg_type(value)
    except (TypeError, ValueError) as ex:
        raise ShapeError(f"cannot encode {value!r} as {arg_type.__name__}: {ex}") from ex


class _Kind(Enum):
    PACKET = auto()  # first field not seen yet
    MESSAGE = auto()
    BUNDLE = auto()
    ARGS = auto()  # nested sequence flattened into a message
    TIMETAG = auto()


@dataclass
class _Frame:
    kind: _Kind
    address: str = ""
    timetag: TimeTag | None = None
    items: list[Any] = field(default_factory=list)


class Encoder:
    """Encodes OSC packets.

    ``encode()`` turns a Message or Bundle into bytes. The encoder is also a
    sequence visitor (see ``oscdata.model.walker``): feed it
    ``begin_sequence``/``field``/``end_sequence`` calls and collect the packet
    with ``packet()`` or the bytes with ``result()``.

    The first field of every packet-level sequence selects its kind: a string
    starts a message (it is the address), a time tag (or a nested pair of
    ints) starts a bundle.

    Example:
        encoder = Encoder()
        walk(("/synth/freq", 440.0), encoder)
        data = encoder.result()
    """

    def __init__(self) -> None:
        self._stack: list[_Frame] = []
        self._packet: Packet | None = None

    def encode(self, packet: Packet) -> bytes:
        """Encode a single packet to bytes."""
        buf = bytearray()
        self._encode_packet(packet, buf)
        return bytes(buf)

    def _encode_packet(self, packet: Packet, buf: bytearray) -> None:
        match packet:
            case Message():
                self._encode_message(packet, buf)
            case Bundle():
                self._encode_bundle(packet, buf)
            case _:
                raise ShapeError(f"{type(packet).__name__} is not an OSC packet")

    def _encode_message(self, message: Message, buf: bytearray) -> None:
        check_address(message.address)
        primitives.write_string(buf, message.address)
        primitives.write_string(buf, message.type_tags)

        for arg in message.arguments:
            match arg:
                case Float32(value):
                    primitives.write_float32(buf, value)
                case Int32(value):
                    primitives.write_int32(buf, value)
                case Str(value):
                    primitives.write_string(buf, value)
                case Blob(value):
                    primitives.write_blob(buf, value)
                case _:
                    raise ShapeError(f"{type(arg).__name__} is not an OSC argument")

    def _encode_bundle(self, bundle: Bundle, buf: bytearray) -> None:
        primitives.write_string(buf, BUNDLE_MARKER)
        primitives.write_timetag(buf, bundle.timetag)

        for element in bundle.elements:
            element_buf = bytearray()
            self._encode_packet(element, element_buf)
            primitives.write_int32(buf, len(element_buf))
            buf.extend(element_buf)

    # Sequence visitor

    def begin_sequence(self) -> None:
        if not self._stack:
            if self._packet is not None:
                raise ShapeError("top-level value must be exactly one packet")
            self._stack.append(_Frame(_Kind.PACKET))
            return

        top = self._stack[-1]
        match top.kind:
            case _Kind.PACKET:
                self._stack.append(_Frame(_Kind.TIMETAG))
            case _Kind.MESSAGE | _Kind.ARGS:
                # Shares the message's argument list
                self._stack.append(_Frame(_Kind.ARGS, items=top.items))
            case _Kind.BUNDLE:
                self._stack.append(_Frame(_Kind.PACKET))
            case _Kind.TIMETAG:
                raise ShapeError("time tag must be a pair of integers")

    def field(self, value: Any, osc_type: str | None = None) -> None:
        if not self._stack:
            raise ShapeError(f"expected a packet sequence, got {type(value).__name__}")

        top = self._stack[-1]
        match top.kind:
            case _Kind.PACKET:
                self._start_packet(top, value, osc_type)
            case _Kind.MESSAGE | _Kind.ARGS:
                top.items.append(to_argument(value, osc_type))
            case _Kind.BUNDLE:
                raise ShapeError(f"bundle element must be a packet, got {type(value).__name__}")
            case _Kind.TIMETAG:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ShapeError("time tag must be a pair of integers")
                top.items.append(value)

    def _start_packet(self, frame: _Frame, value: Any, osc_type: str | None) -> None:
        if isinstance(value, TimeTag) and osc_type in (None, "timetag"):
            frame.kind = _Kind.BUNDLE
            frame.timetag = value
        elif isinstance(value, str) and osc_type in (None, "address", "string"):
            frame.kind = _Kind.MESSAGE
            frame.address = value
        else:
            raise ShapeError(
                f"packet must start with an address or a time tag, got {type(value).__name__}"
            )

    def end_sequence(self) -> None:
        if not self._stack:
            raise ShapeError("end_sequence() without begin_sequence()")

        frame = self._stack.pop()
        match frame.kind:
            case _Kind.PACKET:
                raise ShapeError("packet has no address or time tag")
            case _Kind.ARGS:
                return
            case _Kind.TIMETAG:
                if len(frame.items) != 2:
                    raise ShapeError(f"time tag needs 2 integers, got {len(frame.items)}")
                try:
                    timetag = TimeTag(*frame.items)
                except ValueError as ex:
                    raise ShapeError(str(ex)) from ex
                self._start_packet(self._stack[-1], timetag, None)
                return
            case _Kind.MESSAGE:
                packet: Packet = Message(frame.address, tuple(frame.items))
            case _Kind.BUNDLE:
                packet = Bundle(frame.timetag, tuple(frame.items))

        if self._stack:
            self._stack[-1].items.append(packet)
        else:
            self._packet = packet

    def packet(self) -> Packet:
        """Return the packet built from the visited sequence."""
        if self._stack or self._packet is None:
            raise ShapeError("no complete packet has been visited")
        return self._packet

    def result(self) -> bytes:
        """Encode the packet built from the visited sequence."""
        return self.encode(self.packet())


def encode(packet: Packet) -> bytes:
    """Encode a Message or Bundle to OSC bytes."""
    return Encoder().encode(packet)
