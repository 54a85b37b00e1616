"""Size-prefixed framing of OSC packets for stream transports.

On a stream (TCP, serial, files) OSC 1.0 sends each packet preceded by its
length as a big-endian int32. Datagram transports carry bare packets and do
not need this module.
"""

import logging
import struct

from .errors import FrameError

logger = logging.getLogger(__name__)

_SIZE = struct.Struct(">i")

#: Default upper bound for a single frame accepted by StreamFramer
DEFAULT_MAX_FRAME_SIZE = 1 << 20


def encode_frame(data: bytes) -> bytes:
    """Prefix an encoded packet with its size."""
    if not data:
        raise FrameError("data must not be empty")
    return _SIZE.pack(len(data)) + data


def decode_frame(data: bytes) -> tuple[bytes, int]:
    """Split one frame off the front of ``data``.

    Returns:
        Tuple of (packet bytes, bytes consumed).
    """
    if len(data) < _SIZE.size:
        raise FrameError("frame size prefix is incomplete")
    (size,) = _SIZE.unpack_from(data)
    if size < 0:
        raise FrameError(f"negative frame size {size}")
    end = _SIZE.size + size
    if end > len(data):
        raise FrameError(f"frame of {size} bytes but only {len(data) - _SIZE.size} available")
    return bytes(data[_SIZE.size : end]), end


class StreamFramer:
    """Reassembles size-prefixed packets from arbitrary stream chunks."""

    def __init__(self, max_frame_size: int = DEFAULT_MAX_FRAME_SIZE) -> None:
        self._max_frame_size = max_frame_size
        self._buffer = bytearray()

    @property
    def buffered(self) -> int:
        """Number of bytes waiting for a complete frame."""
        return len(self._buffer)

    def encode_frame(self, data: bytes) -> bytes:
        """Encode a packet as a frame."""
        if len(data) > self._max_frame_size:
            raise FrameError(f"frame of {len(data)} bytes exceeds {self._max_frame_size}")
        return encode_frame(data)

    def decode_frame(self) -> bytes | None:
        """Return the next complete packet in the buffer, or None."""
        if len(self._buffer) < _SIZE.size:
            return None

        (size,) = _SIZE.unpack_from(self._buffer)
        if size < 0 or size > self._max_frame_size:
            logger.debug("Discarding %d buffered bytes after bad frame size", len(self._buffer))
            self.clear_buffer()
            raise FrameError(f"invalid frame size {size}")

        end = _SIZE.size + size
        if len(self._buffer) < end:
            return None

        frame = bytes(self._buffer[_SIZE.size : end])
        del self._buffer[:end]
        return frame

    def frames(self) -> list[bytes]:
        """Return all complete packets currently buffered."""
        result: list[bytes] = []
        while (frame := self.decode_frame()) is not None:
            result.append(frame)
        return result

    def clear_buffer(self) -> None:
        """Clear the receive buffer."""
        self._buffer.clear()

    def append_buffer(self, data: bytes) -> None:
        """Append data to the receive buffer."""
        self._buffer.extend(data)
