"""Tests for CLI interface."""

import json

from oscdata.cli import cli

FREQ_HEX = "2f73796e74682f6672657100" + "2c660000" + "43dc0000"

PING_MODULE = '''
from dataclasses import dataclass

from oscdata import OscStruct


@dataclass
class Ping(OscStruct):
    address: str = "/ping"
    count: int = 0
'''


def describe_encode_command():
    def prints_hex(expect, runner):
        result = runner.invoke(cli, ["encode", "/synth/freq 440.0"])
        expect(result.exit_code) == 0
        expect(result.output.strip()) == FREQ_HEX

    def framed(expect, runner):
        result = runner.invoke(cli, ["encode", "--framed", "/synth/freq 440.0"])
        expect(result.output.strip()) == "00000014" + FREQ_HEX

    def writes_raw_file(expect, runner, tmp_path):
        output_file = tmp_path / "packet.osc"
        result = runner.invoke(
            cli, ["encode", "-f", "raw", "-o", str(output_file), "/synth/freq 440.0"]
        )
        expect(result.exit_code) == 0
        expect(output_file.read_bytes()) == bytes.fromhex(FREQ_HEX)

    def fails_on_bad_notation(expect, runner):
        result = runner.invoke(cli, ["encode", "synth 1"])
        expect(result.exit_code) == 1
        expect("error" in result.output) == True


def describe_decode_command():
    def prints_tree(expect, runner):
        result = runner.invoke(cli, ["decode", FREQ_HEX])
        expect(result.exit_code) == 0
        expect("/synth/freq" in result.output) == True
        expect("440.0" in result.output) == True

    def prints_notation(expect, runner):
        result = runner.invoke(cli, ["decode", "--notation", FREQ_HEX])
        expect(result.output.strip()) == "/synth/freq 440.0"

    def reads_raw_file(expect, runner, tmp_path):
        input_file = tmp_path / "packet.osc"
        input_file.write_bytes(bytes.fromhex(FREQ_HEX))
        result = runner.invoke(
            cli, ["decode", "--notation", "-f", "raw", "-i", str(input_file)]
        )
        expect(result.output.strip()) == "/synth/freq 440.0"

    def reads_stdin(expect, runner):
        result = runner.invoke(cli, ["decode", "--notation"], input=FREQ_HEX + "\n")
        expect(result.output.strip()) == "/synth/freq 440.0"

    def framed_stream(expect, runner):
        stream = ("00000014" + FREQ_HEX) * 2
        result = runner.invoke(cli, ["decode", "--framed", "--notation", stream])
        expect(result.output.split("\n")[:2]) == ["/synth/freq 440.0", "/synth/freq 440.0"]

    def truncated_input(expect, runner):
        result = runner.invoke(cli, ["decode", FREQ_HEX[:-4]])
        expect(result.exit_code) == 1
        expect("error" in result.output) == True

    def depth_limit(expect, runner):
        bundle_hex = "2362756e646c6500" + "0000000000000001"
        result = runner.invoke(cli, ["decode", "--max-depth", "0", bundle_hex])
        expect(result.exit_code) == 1
        result = runner.invoke(cli, ["decode", "--notation", bundle_hex])
        expect(result.output.strip()) == "#bundle 0:1"

    def invalid_hex(expect, runner):
        result = runner.invoke(cli, ["decode", "xyz"])
        expect(result.exit_code) == 2


def describe_info_command():
    def shows_struct_as_json(expect, runner, tmp_path, monkeypatch):
        (tmp_path / "ping_shapes.py").write_text(PING_MODULE)
        monkeypatch.syspath_prepend(str(tmp_path))
        result = runner.invoke(cli, ["info", "ping_shapes:Ping", "--json"])
        expect(result.exit_code) == 0
        data = json.loads(result.output)
        expect(data["kind"]) == "message"
        expect(data["type_tags"]) == ",i"
        expect(data["min_size"]) == 16
        expect(data["size_kind"]) == "fixed"

    def shows_struct_as_table(expect, runner, tmp_path, monkeypatch):
        (tmp_path / "ping_table.py").write_text(PING_MODULE)
        monkeypatch.syspath_prepend(str(tmp_path))
        result = runner.invoke(cli, ["info", "ping_table:Ping"])
        expect(result.exit_code) == 0
        expect("Ping" in result.output) == True
        expect("16 bytes" in result.output) == True

    def rejects_bad_target(expect, runner):
        result = runner.invoke(cli, ["info", "no_such_module_here:Thing"])
        expect(result.exit_code) == 2

    def rejects_non_structs(expect, runner):
        result = runner.invoke(cli, ["info", "oscdata.codec.types:Message"])
        expect(result.exit_code) == 1


def describe_version():
    def prints_version(expect, runner):
        result = runner.invoke(cli, ["--version"])
        expect(result.exit_code) == 0
        expect("oscdata" in result.output) == True
