"""Formats packets in the notation read by ``oscdata.text.parser``."""

import json

from oscdata.codec.errors import ShapeError
from oscdata.codec.types import Argument, Blob, Bundle, Float32, Int32, Message, Packet, Str


def format_argument(arg: Argument) -> str:
    match arg:
        case Float32(value):
            return repr(value)
        case Int32(value):
            return str(value)
        case Str(value):
            return json.dumps(value, ensure_ascii=False)
        case Blob(value):
            return f"<{value.hex()}>"
        case _:
            raise ShapeError(f"not an OSC argument: {arg!r}")


def format_packet(packet: Packet) -> str:
    """Render a packet on one line.

    ``parse(format_packet(p)) == p`` holds when no address contains whitespace
    or any of ``[]"<>``; such addresses are written as-is and do not parse back.
    """
    match packet:
        case Message(address, arguments):
            return " ".join([address, *(format_argument(a) for a in arguments)])
        case Bundle(timetag, elements):
            parts = [f"#bundle {timetag.seconds}:{timetag.fraction}"]
            parts.extend(f"[ {format_packet(element)} ]" for element in elements)
            return " ".join(parts)
        case _:
            raise ShapeError(f"not an OSC packet: {packet!r}")
