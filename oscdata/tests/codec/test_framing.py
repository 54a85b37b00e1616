"""Tests for size-prefixed stream framing."""

import pytest

from oscdata.codec import StreamFramer, decode, decode_frame, encode, encode_frame
from oscdata.codec.errors import FrameError
from oscdata.codec.types import Bundle, Float32, Int32, Message, TimeTag

BUNDLE = Bundle(
    TimeTag(0x01020304, 0x05060708),
    (Message("/m1", (Int32(0x5EEEEEED),)), Message("/m2", (Float32(440.0),))),
)


def describe_frames():
    def prefixes_the_size(expect):
        packet = b"/a\x00\x00,\x00\x00\x00"
        expect(encode_frame(packet)) == b"\x00\x00\x00\x08" + packet

    def bundle_stream_form(expect):
        frame = encode_frame(encode(BUNDLE))
        expect(frame[:4]) == b"\x00\x00\x00\x30"
        data, consumed = decode_frame(frame + b"extra")
        expect(consumed) == 52
        expect(decode(data)) == BUNDLE

    def rejects_empty_packets(expect):
        with pytest.raises(FrameError):
            encode_frame(b"")

    def incomplete_frames(expect):
        with pytest.raises(FrameError):
            decode_frame(b"\x00\x00")
        with pytest.raises(FrameError):
            decode_frame(b"\x00\x00\x00\x08/a\x00\x00")

    def negative_size(expect):
        with pytest.raises(FrameError):
            decode_frame(b"\xff\xff\xff\xfc\x00\x00\x00\x00")


def describe_stream_framer():
    def reassembles_byte_by_byte(expect):
        framer = StreamFramer()
        frame = framer.encode_frame(encode(BUNDLE))
        results = []
        for i in range(len(frame)):
            framer.append_buffer(frame[i : i + 1])
            packet = framer.decode_frame()
            if packet is not None:
                results.append(packet)
        expect(results) == [encode(BUNDLE)]
        expect(framer.buffered) == 0

    def returns_all_complete_frames(expect):
        framer = StreamFramer()
        first = encode(Message("/a"))
        second = encode(Message("/b", (Int32(2),)))
        framer.append_buffer(encode_frame(first) + encode_frame(second) + b"\x00\x00")
        expect(framer.frames()) == [first, second]
        expect(framer.buffered) == 2

    def oversized_frame_clears_buffer(expect):
        framer = StreamFramer(max_frame_size=16)
        framer.append_buffer(b"\x00\x00\x01\x00" + b"\x00" * 8)
        with pytest.raises(FrameError):
            framer.decode_frame()
        expect(framer.buffered) == 0

    def negative_frame_size(expect):
        framer = StreamFramer()
        framer.append_buffer(b"\x80\x00\x00\x00")
        with pytest.raises(FrameError):
            framer.decode_frame()

    def refuses_to_encode_oversized_frames(expect):
        with pytest.raises(FrameError):
            StreamFramer(max_frame_size=4).encode_frame(b"\x00" * 8)

    def clear_buffer(expect):
        framer = StreamFramer()
        framer.append_buffer(b"\x00\x00\x00\x08")
        framer.clear_buffer()
        expect(framer.decode_frame()) == None
