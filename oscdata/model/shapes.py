"""Static descriptions of struct shapes and their encoded sizes."""

import dataclasses
import typing
from dataclasses import dataclass
from typing import Any

from dataclasses_json import DataClassJsonMixin

from oscdata.codec.errors import ShapeError
from oscdata.codec.primitives import string_length
from oscdata.codec.sizes import (
    BUNDLE_HEADER_SIZE,
    ELEMENT_PREFIX_SIZE,
    NUMERIC_SIZE,
    SizeInfo,
    SizeKind,
    fixed,
    variable,
)
from oscdata.codec.types import Blob, Bundle, Float32, Int32, Message, Str, TimeTag

from .fields import VARIADIC_TYPES, field_info, is_struct_type

# Smallest possible message: "/\0\0\0" and ",\0\0\0"
MIN_MESSAGE_SIZE = 8

_ANNOTATION_TYPES: dict[Any, str] = {
    int: "int32",
    float: "float32",
    str: "string",
    bytes: "blob",
    TimeTag: "timetag",
    Int32: "int32",
    Float32: "float32",
    Str: "string",
    Blob: "blob",
}

_TAGS = {"int32": "i", "float32": "f", "string": "s", "blob": "b"}


@dataclass
class FieldDescriptor(DataClassJsonMixin):
    """Describes one field of a struct shape.

    Fields of nested message groups are flattened with dotted names.
    """

    name: str
    osc_type: str
    python_type: str
    tag: str | None
    min_size: int
    max_size: int | None


@dataclass
class ShapeDescriptor(DataClassJsonMixin):
    """Describes the OSC packet a struct type maps to."""

    name: str
    kind: str
    fields: list[FieldDescriptor]
    type_tags: str | None
    min_size: int
    max_size: int | None
    size_kind: str


def describe(struct_type: type) -> ShapeDescriptor:
    """Describe the packet shape of a dataclass type."""
    if not is_struct_type(struct_type):
        raise ShapeError(f"{struct_type!r} is not a dataclass type")

    members = _members(struct_type)
    if not members:
        raise ShapeError(f"{struct_type.__name__} has no fields")

    _, first_annotation, first_declared, _ = members[0]
    first_type = first_declared or _ANNOTATION_TYPES.get(first_annotation)
    if typing.get_origin(first_annotation) is tuple and first_declared is None:
        first_type = "timetag"

    if first_type in ("string", "address"):
        return _describe_message(struct_type, members)
    if first_type == "timetag":
        return _describe_bundle(struct_type, members)
    raise ShapeError(f"{struct_type.__name__} must start with an address or a time tag")


def shape_size(struct_type: type) -> SizeInfo:
    """Encoded size range of a struct type."""
    shape = describe(struct_type)
    return SizeInfo(shape.min_size, shape.max_size, SizeKind(shape.size_kind))


def _members(struct_type: type) -> list[tuple[str, Any, str | None, Any]]:
    try:
        hints = typing.get_type_hints(struct_type)
    except NameError as ex:
        raise ShapeError(f"cannot resolve annotations of {struct_type.__name__}: {ex}") from ex

    result = []
    for f in dataclasses.fields(struct_type):
        if not f.init:
            continue
        default = f.default if f.default is not dataclasses.MISSING else None
        result.append((f.name, hints.get(f.name, Any), field_info(f).type, default))
    return result


def _type_name(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or str(annotation)


def _describe_message(struct_type: type, members: list) -> ShapeDescriptor:
    name, _annotation, _declared, default = members[0]
    if isinstance(default, str):
        address_size = fixed(string_length(default.encode("utf-8")))
    else:
        address_size = variable(4)

    fields = [
        FieldDescriptor(name, "address", "str", None, address_size.min_size, address_size.max_size)
    ]
    variadic = False
    for member in members[1:]:
        member_fields, member_variadic = _argument_fields(*member)
        fields.extend(member_fields)
        variadic = variadic or member_variadic

    tags = "," + "".join(f.tag or "" for f in fields[1:])
    tag_size = string_length(tags.encode("ascii"))
    size = address_size + (variable(tag_size) if variadic else fixed(tag_size))
    for f in fields[1:]:
        size = size + _size_of(f)

    return ShapeDescriptor(
        name=struct_type.__name__,
        kind="message",
        fields=fields,
        type_tags=None if variadic else tags,
        min_size=size.min_size,
        max_size=size.max_size,
        size_kind=str(size.kind),
    )


def _argument_fields(
    name: str, annotation: Any, declared: str | None, _default: Any = None
) -> tuple[list[FieldDescriptor], bool]:
    origin = typing.get_origin(annotation)

    if declared in VARIADIC_TYPES or origin is list:
        return [FieldDescriptor(name, "args", _type_name(annotation), None, 0, None)], True

    if is_struct_type(annotation):
        result: list[FieldDescriptor] = []
        variadic = False
        for member_name, member_annotation, member_declared, _ in _members(annotation):
            sub, sub_variadic = _argument_fields(
                f"{name}.{member_name}", member_annotation, member_declared
            )
            result.extend(sub)
            variadic = variadic or sub_variadic
        return result, variadic

    if origin is tuple:
        result = []
        variadic = False
        for index, member in enumerate(typing.get_args(annotation)):
            if member is Ellipsis:
                return [FieldDescriptor(name, "args", _type_name(annotation), None, 0, None)], True
            sub, sub_variadic = _argument_fields(f"{name}[{index}]", member, None)
            result.extend(sub)
            variadic = variadic or sub_variadic
        return result, variadic

    osc_type = declared or _ANNOTATION_TYPES.get(annotation)
    if osc_type not in _TAGS:
        raise ShapeError(f"field {name} has no OSC argument type ({annotation!r})")

    if osc_type in ("int32", "float32"):
        min_size, max_size = NUMERIC_SIZE, NUMERIC_SIZE
    else:
        min_size, max_size = 4, None
    return [
        FieldDescriptor(
            name, osc_type, _type_name(annotation), _TAGS[osc_type], min_size, max_size
        )
    ], False


def _describe_bundle(struct_type: type, members: list) -> ShapeDescriptor:
    name, annotation, _declared, _default = members[0]
    fields = [FieldDescriptor(name, "timetag", _type_name(annotation), None, 8, 8)]
    size = fixed(BUNDLE_HEADER_SIZE)

    for member_name, member_annotation, declared, _ in members[1:]:
        origin = typing.get_origin(member_annotation)
        if declared in VARIADIC_TYPES or origin is list:
            element = FieldDescriptor(
                member_name, "elements", _type_name(member_annotation), None, 0, None
            )
        elif is_struct_type(member_annotation):
            nested = shape_size(member_annotation)
            element = FieldDescriptor(
                member_name,
                "packet",
                member_annotation.__name__,
                None,
                ELEMENT_PREFIX_SIZE + nested.min_size,
                None if nested.max_size is None else ELEMENT_PREFIX_SIZE + nested.max_size,
            )
        elif member_annotation in (Message, Bundle) or origin is not None:
            element = FieldDescriptor(
                member_name,
                "packet",
                _type_name(member_annotation),
                None,
                ELEMENT_PREFIX_SIZE + MIN_MESSAGE_SIZE,
                None,
            )
        else:
            raise ShapeError(f"bundle field {member_name} must be a packet ({member_annotation!r})")
        fields.append(element)
        size = size + _size_of(element)

    return ShapeDescriptor(
        name=struct_type.__name__,
        kind="bundle",
        fields=fields,
        type_tags=None,
        min_size=size.min_size,
        max_size=size.max_size,
        size_kind=str(size.kind),
    )


def _size_of(f: FieldDescriptor) -> SizeInfo:
    if f.max_size == f.min_size:
        return fixed(f.min_size)
    return variable(f.min_size)
