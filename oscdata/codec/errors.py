"""Error taxonomy for the OSC codec."""


class OscError(RuntimeError):
    """Base exception for all oscdata errors."""


class EncodeError(OscError):
    """Raised when a packet cannot be encoded."""


class DecodeError(OscError):
    """Raised when a byte sequence is not a well-formed OSC packet.

    Attributes:
        rule: Description of the violated rule.
        offset: Byte offset where the violation was detected, if known.
    """

    def __init__(self, rule: str, offset: int | None = None) -> None:
        self.rule = rule
        self.offset = offset
        super().__init__(rule if offset is None else f"{rule} (at byte {offset})")


class InvalidAddress(EncodeError, DecodeError):
    """Address pattern is missing its leading '/' or is not a valid OSC-string."""


class MissingTypeTag(DecodeError):
    """The type-tag string is absent or does not start with ','."""


class UnsupportedType(DecodeError):
    """A type tag outside of 'f', 'i', 's' and 'b'."""


class MalformedString(DecodeError):
    """A string with non-null padding or bytes that are not valid UTF-8."""


class Truncated(DecodeError):
    """A declared length runs past the end of the buffer."""


class DepthExceeded(DecodeError):
    """Bundles are nested deeper than the configured limit."""


class TrailingData(DecodeError):
    """Bytes remain after the last argument of a message."""


class ShapeError(OscError):
    """A structured value does not map onto a Message or Bundle."""


class FrameError(OscError):
    """Raised when a size-prefixed stream frame is invalid."""


class NotationError(OscError):
    """Raised when the text notation of a packet cannot be parsed."""
