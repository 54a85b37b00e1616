"""Tests for the OSC value types."""

import struct

import pytest

from oscdata.codec.types import Blob, Bundle, Float32, Int32, Message, Str, TimeTag


def describe_arguments():
    def float32_is_single_precision(expect):
        (single,) = struct.unpack(">f", struct.pack(">f", 0.1))
        expect(Float32(0.1).value) == single
        expect(Float32(440).value) == 440.0

    def float32_rejects_overflow(expect):
        with pytest.raises(ValueError):
            Float32(1e39)

    def float32_keeps_infinity(expect):
        expect(Float32(float("inf")).value) == float("inf")

    def int32_range(expect):
        expect(Int32(2**31 - 1).value) == 2**31 - 1
        expect(Int32(-(2**31)).value) == -(2**31)
        with pytest.raises(ValueError):
            Int32(2**31)
        with pytest.raises(ValueError):
            Int32(True)

    def str_rejects_null(expect):
        with pytest.raises(ValueError):
            Str("a\x00b")

    def float32_rejects_non_numbers(expect):
        for value in (True, "1.5", None):
            with pytest.raises(ValueError):
                Float32(value)

    def str_rejects_lone_surrogates(expect):
        with pytest.raises(ValueError):
            Str("\ud800")

    def blob_normalises_to_bytes(expect):
        expect(Blob(bytearray(b"\x01\x02")).value) == b"\x01\x02"
        expect(Blob(memoryview(b"ab")).value) == b"ab"

    def blob_rejects_non_bytes(expect):
        for value in (5, "ab", [1, 2]):
            with pytest.raises(ValueError):
                Blob(value)

    def tags(expect):
        expect([Float32.tag, Int32.tag, Str.tag, Blob.tag]) == ["f", "i", "s", "b"]


def describe_timetag():
    def immediately(expect):
        expect(TimeTag.IMMEDIATELY) == TimeTag(0, 1)

    def unpacks_as_pair(expect):
        seconds, fraction = TimeTag(7, 9)
        expect((seconds, fraction)) == (7, 9)

    def converts_to_and_from_int(expect):
        tag = TimeTag(0x01020304, 0x05060708)
        expect(int(tag)) == 0x0102030405060708
        expect(TimeTag.from_int(0x0102030405060708)) == tag

    def rejects_out_of_range(expect):
        with pytest.raises(ValueError):
            TimeTag(-1)
        with pytest.raises(ValueError):
            TimeTag(0, 2**32)


def describe_packets():
    def message_type_tags(expect):
        message = Message("/a", (Float32(1.0), Int32(2), Str("x"), Blob(b"")))
        expect(message.type_tags) == ",fisb"
        expect(Message("/a").type_tags) == ","

    def message_arguments_become_a_tuple(expect):
        expect(Message("/a", [Int32(1)]).arguments) == (Int32(1),)

    def bundle_coerces_timetag(expect):
        expect(Bundle((1, 2)).timetag) == TimeTag(1, 2)

    def bundle_depth(expect):
        inner = Bundle(TimeTag(0), (Message("/a"),))
        expect(inner.depth) == 1
        expect(Bundle(TimeTag(0), (Message("/b"), inner)).depth) == 2
