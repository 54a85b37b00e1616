"""Packet notation parser using Lark."""

import json
import os
from typing import Any

from lark import Lark
from lark.exceptions import LarkError, VisitError
from lark.visitors import Transformer

from oscdata.codec.errors import NotationError
from oscdata.codec.types import Blob, Bundle, Float32, Int32, Message, Packet, Str, TimeTag

_g_parser: Lark | None = None


class PacketTransformer(Transformer):
    """Transform a parse tree into packet values."""

    def start(self, args: list[Any]) -> Packet:
        return args[0]

    def message(self, args: list[Any]) -> Message:
        address, *arguments = args
        return Message(str(address), tuple(arguments))

    def bundle(self, args: list[Any]) -> Bundle:
        timetag, *elements = args
        return Bundle(timetag, tuple(elements))

    def timetag(self, args: list[Any]) -> TimeTag:
        return TimeTag(int(args[0]), int(args[1]))

    def float32(self, args: list[Any]) -> Float32:
        return Float32(float(args[0]))

    def suffixed_float32(self, args: list[Any]) -> Float32:
        return Float32(float(args[0][:-1]))

    def int32(self, args: list[Any]) -> Int32:
        return Int32(int(args[0]))

    def string(self, args: list[Any]) -> Str:
        return Str(json.loads(args[0]))

    def blob(self, args: list[Any]) -> Blob:
        return Blob(bytes.fromhex(args[0][1:-1]))


def parse(text: str) -> Packet:
    """Parse the textual notation of one packet.

    Raises:
        NotationError: The text is malformed, or holds a value that is out of
            range for its OSC type.
    """
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/notation.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar, parser="lalr")

    try:
        tree = _g_parser.parse(text)
        return PacketTransformer().transform(tree)
    except VisitError as ex:
        raise NotationError(f"invalid value: {ex.orig_exc}") from ex.orig_exc
    except LarkError as ex:
        raise NotationError(str(ex)) from ex
