"""OSC 1.0 wire format encoder and decoder."""

from .decoder import DEFAULT_MAX_DEPTH, Decoder, PacketAccess, decode
from .encoder import Encoder, encode, to_argument
from .errors import (
    DecodeError,
    DepthExceeded,
    EncodeError,
    FrameError,
    InvalidAddress,
    MalformedString,
    MissingTypeTag,
    NotationError,
    OscError,
    ShapeError,
    TrailingData,
    Truncated,
    UnsupportedType,
)
from .framing import StreamFramer, decode_frame, encode_frame
from .sizes import SizeInfo, SizeKind, encoded_size
from .types import Argument, Blob, Bundle, Float32, Int32, Message, Packet, Str, TimeTag
