"""Structured values (tuples and dataclasses) as OSC packets."""

from .builder import construct, natural
from .convert import OscStruct, from_bytes, to_bytes, to_packet
from .fields import OscFieldInfo, field_info, osc_field
from .shapes import FieldDescriptor, ShapeDescriptor, describe, shape_size
from .walker import SequenceVisitor, walk
