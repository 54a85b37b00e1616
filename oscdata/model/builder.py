"""Builds structured values from decoded packets.

``construct`` pulls fields from a ``PacketAccess`` in wire order and places
them into a target type, guided by the target's annotations:

* ``str``, ``int``, ``float``, ``bytes`` and ``TimeTag`` take one field whose
  decoded type must match;
* argument variants (``Int32``, ...) take one argument of that variant;
* ``tuple[...]`` takes one item per member; a time tag satisfies a pair;
* nested dataclasses are flattened into a message's arguments, and take one
  element of a bundle;
* ``list[...]`` and fields declared "args"/"elements" take everything left.
"""

import dataclasses
import types
import typing
from typing import Any, TypeVar

from oscdata.codec.decoder import PacketAccess
from oscdata.codec.errors import ShapeError
from oscdata.codec.types import Blob, Bundle, Float32, Int32, Message, Str, TimeTag

from .fields import field_info, is_struct_type

T = TypeVar("T")

# Python types that decoded argument values are checked against
_SCALAR_TYPES: dict[str, type] = {
    "int32": int,
    "float32": float,
    "string": str,
    "address": str,
    "blob": bytes,
    "timetag": TimeTag,
}

_PACKET_TYPES = (Message, Bundle)


def construct(target: type[T] | None, access: PacketAccess) -> T:
    """Build ``target`` from every item of ``access``.

    Args:
        target: A dataclass type, ``Message``/``Bundle`` to get the packet
            itself, or ``tuple``/None for the natural tuple form
            (``(address, (args...))`` or ``(timetag, element, ...)``).
        access: The decoded packet.

    Raises:
        ShapeError: The packet does not fit the target.
    """
    if target is None or target is tuple:
        return typing.cast(T, natural(access))

    if target in _PACKET_TYPES or target is typing.Any:
        if target in _PACKET_TYPES and not isinstance(access.packet, target):
            raise ShapeError(f"expected a {target.__name__}, decoded {access.describe()}")
        return typing.cast(T, access.packet)

    if not is_struct_type(target):
        raise ShapeError(f"cannot construct {target!r} from an OSC packet")

    value = _construct_struct(target, access)
    _check_consumed(access)
    return value


def natural(access: PacketAccess) -> tuple[Any, ...]:
    """Build the natural tuple form of a packet."""
    if access.is_bundle:
        timetag = access.next_field()
        elements = [natural(access.next_sequence()) for _ in range(access.remaining)]
        return (timetag, *elements)

    address = access.next_field()
    return (address, tuple(access.next_field() for _ in range(access.remaining)))


def _check_consumed(access: PacketAccess) -> None:
    if access.remaining:
        raise ShapeError(f"{access.remaining} unconsumed items in {access.describe()}")


def _construct_struct(cls: type[T], access: PacketAccess) -> T:
    try:
        hints = typing.get_type_hints(cls)
    except NameError as ex:
        raise ShapeError(f"cannot resolve annotations of {cls.__name__}: {ex}") from ex

    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        kwargs[f.name] = _read(hints.get(f.name, Any), field_info(f).type, access)
    return cls(**kwargs)


def _read(annotation: Any, declared: str | None, access: PacketAccess) -> Any:
    origin = typing.get_origin(annotation)

    if declared in ("args", "elements") or origin is list or annotation is list:
        members = typing.get_args(annotation)
        item_type = members[0] if members else Any
        values = [_read(item_type, None, access) for _ in range(access.remaining)]
        return tuple(values) if origin is tuple else values

    if origin is tuple or annotation is tuple:
        return _read_tuple(annotation, access)

    if annotation is Any or annotation is object:
        if isinstance(access.peek(), PacketAccess):
            return natural(access.next_sequence())
        return access.next_field()

    if annotation in _PACKET_TYPES or origin in (typing.Union, types.UnionType):
        return _read_packet(annotation, access)

    if annotation in (Float32, Int32, Str, Blob):
        arg = access.next_argument()
        if not isinstance(arg, annotation):
            raise ShapeError(f"expected {annotation.__name__}, decoded {type(arg).__name__}")
        return arg

    if is_struct_type(annotation):
        if not access.is_bundle:
            # Flattened into the enclosing message
            return _construct_struct(annotation, access)
        sub = access.next_sequence()
        value = _construct_struct(annotation, sub)
        _check_consumed(sub)
        return value

    return _read_scalar(annotation, declared, access)


def _read_tuple(annotation: Any, access: PacketAccess) -> tuple[Any, ...]:
    members = typing.get_args(annotation)
    item = access.peek()

    if isinstance(item, TimeTag):
        if len(members) not in (0, 2):
            raise ShapeError(f"a time tag cannot fill {annotation!r}")
        return tuple(access.next_field())

    if len(members) == 2 and members[1] is Ellipsis:
        return tuple(_read(members[0], None, access) for _ in range(access.remaining))

    if isinstance(item, PacketAccess):
        sub = access.next_sequence()
        if not members:
            return natural(sub)
        value = tuple(_read(member, None, sub) for member in members)
        _check_consumed(sub)
        return value

    if not members:
        raise ShapeError(f"bare tuple annotation needs member types in {access.describe()}")
    return tuple(_read(member, None, access) for member in members)


def _read_packet(annotation: Any, access: PacketAccess) -> Any:
    allowed = typing.get_args(annotation) or (annotation,)
    if not all(t in _PACKET_TYPES for t in allowed):
        raise ShapeError(f"unsupported annotation {annotation!r}")
    packet = access.next_sequence().packet
    if not isinstance(packet, allowed):
        raise ShapeError(f"expected {annotation!r}, decoded {type(packet).__name__}")
    return packet


def _read_scalar(annotation: Any, declared: str | None, access: PacketAccess) -> Any:
    if declared in _SCALAR_TYPES:
        expected = _SCALAR_TYPES[declared]
    elif annotation in (int, float, str, bytes, TimeTag):
        expected = annotation
    else:
        raise ShapeError(f"unsupported annotation {annotation!r}")

    value = access.next_field()
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ShapeError(
            f"expected {expected.__name__}, decoded {type(value).__name__} "
            f"in {access.describe()}"
        )
    return value
