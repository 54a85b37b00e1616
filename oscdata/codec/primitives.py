"""Primitive OSC encodings: big-endian numbers, padded strings and blobs.

Every OSC primitive occupies a multiple of 4 bytes. Writers append to a
``bytearray``; ``Reader`` walks an immutable buffer with an explicit cursor
and treats every length it reads as untrusted.
"""

import struct

from .errors import MalformedString, Truncated
from .types import TimeTag

_INT32 = struct.Struct(">i")
_FLOAT32 = struct.Struct(">f")
_TIMETAG = struct.Struct(">II")

ALIGNMENT = 4


def padded_length(size: int) -> int:
    """Round ``size`` up to the next multiple of 4."""
    return (size + ALIGNMENT - 1) & ~(ALIGNMENT - 1)


def string_length(encoded: bytes) -> int:
    """Encoded size of an OSC-string whose UTF-8 bytes are ``encoded``."""
    # At least one terminator, then padding
    return padded_length(len(encoded) + 1)


def blob_length(payload: bytes) -> int:
    """Encoded size of an OSC-blob, size field included."""
    return 4 + padded_length(len(payload))


def write_int32(buf: bytearray, value: int) -> None:
    buf.extend(_INT32.pack(value))


def write_float32(buf: bytearray, value: float) -> None:
    buf.extend(_FLOAT32.pack(value))


def write_string(buf: bytearray, value: str | bytes) -> None:
    """Append an OSC-string: the bytes, a null terminator and null padding."""
    encoded = value.encode("utf-8") if isinstance(value, str) else value
    buf.extend(encoded)
    buf.extend(b"\x00" * (string_length(encoded) - len(encoded)))


def write_blob(buf: bytearray, value: bytes) -> None:
    """Append an OSC-blob: int32 size, the payload and zero padding."""
    write_int32(buf, len(value))
    buf.extend(value)
    buf.extend(b"\x00" * (padded_length(len(value)) - len(value)))


def write_timetag(buf: bytearray, timetag: TimeTag) -> None:
    buf.extend(_TIMETAG.pack(timetag.seconds, timetag.fraction))


class Reader:
    """Cursor over a byte buffer, bounded by ``end``.

    Reads never go past ``end`` even if the underlying buffer is longer;
    nested bundle elements are decoded by readers confined to the element.
    """

    def __init__(
        self, data: bytes | bytearray | memoryview, offset: int = 0, end: int | None = None
    ) -> None:
        self._data = data if isinstance(data, bytes) else bytes(data)
        self.offset = offset
        self.end = len(data) if end is None else end

    @property
    def remaining(self) -> int:
        return self.end - self.offset

    def sub_reader(self, size: int) -> "Reader":
        """Return a reader over the next ``size`` bytes and skip past them."""
        self._require(size, "element")
        reader = Reader(self._data, self.offset, self.offset + size)
        self.offset += size
        return reader

    def _require(self, size: int, what: str) -> None:
        if size < 0:
            raise Truncated(f"negative {what} size {size}", self.offset)
        if size > self.remaining:
            raise Truncated(
                f"{what} needs {size} bytes but only {self.remaining} remain", self.offset
            )

    def read_int32(self) -> int:
        self._require(4, "int32")
        (value,) = _INT32.unpack_from(self._data, self.offset)
        self.offset += 4
        return value

    def read_float32(self) -> float:
        self._require(4, "float32")
        (value,) = _FLOAT32.unpack_from(self._data, self.offset)
        self.offset += 4
        return value

    def read_timetag(self) -> TimeTag:
        self._require(8, "time tag")
        seconds, fraction = _TIMETAG.unpack_from(self._data, self.offset)
        self.offset += 8
        return TimeTag(seconds, fraction)

    def read_raw_string(self) -> bytes:
        """Read an OSC-string and return its bytes without the terminator."""
        start = self.offset
        terminator = self._data.find(b"\x00", start, self.end)
        if terminator < 0:
            raise Truncated("string is not null-terminated before end of data", start)

        raw = self._data[start:terminator]
        size = string_length(raw)
        self._require(size, "string")
        if self._data[terminator : start + size].strip(b"\x00"):
            raise MalformedString("string padding contains non-null bytes", start)

        self.offset += size
        return raw

    def read_string(self) -> str:
        start = self.offset
        raw = self.read_raw_string()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as ex:
            raise MalformedString("string is not valid UTF-8", start) from ex

    def read_blob(self) -> bytes:
        start = self.offset
        size = self.read_int32()
        if size < 0:
            raise Truncated(f"negative blob size {size}", start)
        self._require(padded_length(size), "blob")
        value = self._data[self.offset : self.offset + size]
        self.offset += padded_length(size)
        return value
