"""Command-line interface for encoding, decoding and describing OSC packets."""

from __future__ import annotations

import importlib
import logging
import os
import sys
from typing import TYPE_CHECKING, BinaryIO, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from oscdata import __version__
from oscdata.codec import (
    DEFAULT_MAX_DEPTH,
    Bundle,
    Message,
    OscError,
    StreamFramer,
    decode,
    encode,
)
from oscdata.codec.framing import encode_frame
from oscdata.model import describe
from oscdata.text import format_argument, format_packet, parse

if TYPE_CHECKING:
    from oscdata.codec import Packet
    from oscdata.model import ShapeDescriptor

logger = logging.getLogger(__name__)

_FORMATS = click.Choice(["hex", "raw"])


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log decoder and framer activity")
@click.version_option(__version__, prog_name="oscdata")
def cli(verbose: bool) -> None:
    """OSC 1.0 packet encoder and decoder."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command("encode")
@click.argument("text")
@click.option("--output", "-o", "output_file", default=None, help="Output file (default stdout)")
@click.option("--format", "-f", "fmt", type=_FORMATS, default="hex", help="Output format")
@click.option("--framed", is_flag=True, help="Prefix the packet with its size")
def encode_command(text: str, output_file: str | None, fmt: str, framed: bool) -> None:
    """Encode a packet written in text notation.

    Example: oscdata encode '/synth/freq 440.0 "sine"'
    """
    try:
        data = encode(parse(text))
        if framed:
            data = encode_frame(data)
    except OscError as ex:
        _fail(ex)

    output = data.hex().encode("ascii") + b"\n" if fmt == "hex" else data
    if output_file:
        with open(output_file, "wb") as f:
            f.write(output)
    else:
        stdout = click.get_binary_stream("stdout")
        stdout.write(output)
        stdout.flush()


@cli.command("decode")
@click.argument("hex_data", metavar="HEX", required=False)
@click.option(
    "--input", "-i", "input_file", type=click.File("rb"), default=None, help="Input file"
)
@click.option("--format", "-f", "fmt", type=_FORMATS, default="hex", help="Input format")
@click.option(
    "--max-depth",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_DEPTH,
    show_default=True,
    help="Maximum bundle nesting",
)
@click.option("--framed", is_flag=True, help="Input is a stream of size-prefixed packets")
@click.option("--notation", is_flag=True, help="Print text notation instead of a tree")
def decode_command(
    hex_data: str | None,
    input_file: BinaryIO | None,
    fmt: str,
    max_depth: int,
    framed: bool,
    notation: bool,
) -> None:
    """Decode OSC bytes given as HEX, a file or stdin."""
    if hex_data is not None and input_file is not None:
        raise click.UsageError("give either HEX or --input, not both")

    if hex_data is not None:
        data = _from_hex(hex_data)
    else:
        raw = (input_file or click.get_binary_stream("stdin")).read()
        data = _from_hex(raw.decode("ascii", errors="replace")) if fmt == "hex" else raw

    try:
        packets = [decode(frame, max_depth) for frame in _split(data, framed)]
    except OscError as ex:
        _fail(ex)

    console = Console()
    for packet in packets:
        if notation:
            console.print(format_packet(packet), markup=False, highlight=False)
        else:
            console.print(_packet_tree(packet))


@cli.command()
@click.argument("target", metavar="MODULE:CLASS")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(target: str, output_json: bool) -> None:
    """Display the packet shape and size of a struct class."""
    try:
        shape = describe(_load_class(target))
    except OscError as ex:
        _fail(ex)

    if output_json:
        print(shape.to_json(indent=2))
    else:
        _output_plain(shape)


def _fail(ex: Exception) -> NoReturn:
    Console(stderr=True).print(f"[bold red]error:[/bold red] {escape(str(ex))}")
    sys.exit(1)


def _from_hex(text: str) -> bytes:
    try:
        return bytes.fromhex("".join(text.split()))
    except ValueError as ex:
        raise click.BadParameter(f"invalid hex input: {ex}") from ex


def _split(data: bytes, framed: bool) -> list[bytes]:
    if not framed:
        return [data]

    framer = StreamFramer()
    framer.append_buffer(data)
    frames = framer.frames()
    if framer.buffered:
        logger.warning("Ignoring %d bytes of an incomplete frame", framer.buffered)
    return frames


def _load_class(target: str) -> type:
    module_name, _, class_name = target.partition(":")
    if not module_name or not class_name:
        raise click.BadParameter("expected MODULE:CLASS", param_hint="target")

    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    try:
        module = importlib.import_module(module_name)
    except ImportError as ex:
        raise click.BadParameter(f"cannot import {module_name}: {ex}") from ex

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise click.BadParameter(f"{module_name} has no class {class_name}")
    return cls


def _packet_tree(packet: Packet, parent: Tree | None = None) -> Tree:
    if isinstance(packet, Message):
        label = f"[bold]{escape(packet.address)}[/bold] [dim]{escape(packet.type_tags)}[/dim]"
    else:
        timetag = packet.timetag
        label = f"[bold magenta]#bundle[/bold magenta] {timetag.seconds}:{timetag.fraction}"
    node = Tree(label) if parent is None else parent.add(label)

    match packet:
        case Message(_, arguments):
            for arg in arguments:
                node.add(f"[cyan]{arg.tag}[/cyan] {escape(format_argument(arg))}")
        case Bundle(_, elements):
            for element in elements:
                _packet_tree(element, node)
    return node


def _format_size(size: int | None) -> str:
    """Format a size value, handling None for unbounded."""
    return "unbounded" if size is None else str(size)


def _output_plain(shape: ShapeDescriptor) -> None:
    """Output a shape using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]{escape(shape.name)}[/bold cyan] ({shape.kind})")
    summary = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    summary.add_column("Label", style="dim")
    summary.add_column("Value", style="white")
    if shape.type_tags is not None:
        summary.add_row("Type tags", shape.type_tags)
    if shape.min_size == shape.max_size:
        summary.add_row("Size", f"{shape.min_size} bytes")
    else:
        summary.add_row("Size", f"{shape.min_size}-{_format_size(shape.max_size)} bytes")
    summary.add_row("Kind", shape.size_kind)
    console.print(summary)
    console.print()

    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Field", style="white")
    table.add_column("OSC type", style="green")
    table.add_column("Tag", style="cyan")
    table.add_column("Size", style="yellow", justify="right")

    for f in shape.fields:
        if f.min_size == f.max_size:
            size_str = str(f.min_size)
        else:
            size_str = f"{f.min_size}-{_format_size(f.max_size)}"
        table.add_row(escape(f.name), f.osc_type, f.tag or "", size_str)

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
