"""oscdata - Open Sound Control 1.0 codec for tuples and dataclasses."""

from importlib.metadata import PackageNotFoundError, version

from .codec import (
    Blob,
    Bundle,
    DecodeError,
    EncodeError,
    Float32,
    Int32,
    Message,
    OscError,
    ShapeError,
    Str,
    TimeTag,
    decode,
    encode,
)
from .model import OscStruct, from_bytes, osc_field, to_bytes

try:
    __version__ = version("oscdata")
except PackageNotFoundError:
    __version__ = "(local)"
