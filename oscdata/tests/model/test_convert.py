"""Tests for converting structured values to and from OSC bytes."""

from dataclasses import dataclass

import pytest

from oscdata.codec import encode
from oscdata.codec.errors import DepthExceeded, InvalidAddress, ShapeError
from oscdata.codec.types import Blob, Bundle, Float32, Int32, Message, TimeTag
from oscdata.model import OscStruct, from_bytes, osc_field, to_bytes, to_packet

FREQ = b"/synth/freq\x00,f\x00\x00\x43\xdc\x00\x00"

EXAMPLE = (
    b"/example/path\x00\x00\x00,ifb\x00\x00\x00\x00"
    b"\x01\x02\x03\x04\x43\xdc\x00\x00\x00\x00\x00\x05\xde\xad\xbe\xef\xff\x00\x00\x00"
)

BUNDLE = (
    b"#bundle\x00\x01\x02\x03\x04\x05\x06\x07\x08"
    b"\x00\x00\x00\x0c/m1\x00,i\x00\x00\x5e\xee\xee\xed"
    b"\x00\x00\x00\x0c/m2\x00,f\x00\x00\x43\xdc\x00\x00"
)


@dataclass
class SetFrequency(OscStruct):
    address: str
    frequency: float = osc_field(type="float32")


@dataclass
class Point:
    x: float
    y: float


@dataclass
class Move(OscStruct):
    address: str
    position: Point
    speed: int


@dataclass
class Batch(OscStruct):
    timetag: TimeTag
    first: SetFrequency
    rest: list[SetFrequency] = osc_field(type="elements", default_factory=list)


def describe_tuples():
    def message(expect):
        expect(to_bytes(("/synth/freq", 440.0))) == FREQ
        expect(to_bytes(("/example/path", 0x01020304, 440.0, b"\xde\xad\xbe\xef\xff"))) == EXAMPLE

    def unit_message(expect):
        expect(to_bytes(("/ts",))) == b"/ts\x00,\x00\x00\x00"

    def decodes_to_natural_form(expect):
        expect(from_bytes(EXAMPLE)) == (
            "/example/path",
            (0x01020304, 440.0, b"\xde\xad\xbe\xef\xff"),
        )
        expect(to_bytes(from_bytes(EXAMPLE))) == EXAMPLE

    def bundle(expect):
        value = (TimeTag(0x01020304, 0x05060708), ("/m1", 0x5EEEEEED), ("/m2", 440.0))
        expect(to_bytes(value)) == BUNDLE
        expect(from_bytes(BUNDLE)) == (
            TimeTag(0x01020304, 0x05060708),
            ("/m1", (0x5EEEEEED,)),
            ("/m2", (440.0,)),
        )

    def timetag_pair(expect):
        data = to_bytes(((0, 0), ("/synth/freq", 440.0)))
        expect(data) == b"#bundle\x00" + b"\x00" * 8 + b"\x00\x00\x00\x14" + FREQ

    def nested_bundles(expect):
        data = to_bytes((TimeTag(1), (TimeTag(2), ("/a",))))
        expect(from_bytes(data)) == (TimeTag(1), (TimeTag(2), ("/a", ())))

    def invalid_values(expect):
        for value in [("/a", True), (1, 2), (), ("/a", None)]:
            with pytest.raises(ShapeError):
                to_bytes(value)

    def invalid_address(expect):
        with pytest.raises(InvalidAddress):
            to_bytes(("freq", 440.0))

    def text_that_is_not_utf8(expect):
        with pytest.raises(ShapeError):
            to_bytes(("/a", "\ud800"))
        with pytest.raises(InvalidAddress):
            to_bytes(("/\ud800",))


def describe_structs():
    def encodes_declared_types(expect):
        expect(SetFrequency("/synth/freq", 440).to_bytes()) == FREQ

    def decodes(expect):
        expect(SetFrequency.from_bytes(FREQ)) == SetFrequency("/synth/freq", 440.0)

    def nested_struct(expect):
        move = Move("/move", Point(1.0, 2.0), 3)
        expect(move.to_packet()) == Message("/move", (Float32(1.0), Float32(2.0), Int32(3)))
        expect(Move.from_bytes(move.to_bytes())) == move

    def bundle_struct(expect):
        batch = Batch(TimeTag(0, 1), SetFrequency("/a", 1.0), [SetFrequency("/b", 2.0)])
        expect(to_packet(batch)) == Bundle(
            TimeTag(0, 1),
            (Message("/a", (Float32(1.0),)), Message("/b", (Float32(2.0),))),
        )
        expect(Batch.from_bytes(batch.to_bytes())) == batch

    def depth_limit(expect):
        batch = Batch(TimeTag(0, 1), SetFrequency("/a", 1.0))
        with pytest.raises(DepthExceeded):
            Batch.from_bytes(batch.to_bytes(), max_depth=0)

    def declared_type_mismatch(expect):
        with pytest.raises(ShapeError):
            SetFrequency("/a", "loud").to_bytes()

    def packets_as_values(expect):
        message = Message("/a", (Int32(1), Blob(b"\x01")))
        expect(to_bytes(message)) == encode(message)
        expect(from_bytes(encode(message), Message)) == message
