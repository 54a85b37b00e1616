"""Textual notation for OSC packets."""

from .formatter import format_argument, format_packet
from .parser import parse
