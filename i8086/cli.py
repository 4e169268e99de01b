#!/usr/bin/env python3
"""Command-line front ends for the decoder and the reassembler."""

import logging
import sys
from pathlib import Path
from typing import Optional

from plumbum import cli  # type: ignore[import-untyped]

from . import __version__
from .asm import Assembler, AssemblerError
from .config import load_decoder_config
from .decoding import DecodeError
from .listing import disassemble_file


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class DisassemblerCLI(cli.Application):
    """Decodes a raw 8086 binary of mov instructions into an assembly listing."""

    PROGNAME = "i8086-disasm"
    VERSION = __version__

    output_file = cli.SwitchAttr(
        ["-o", "--output"], str, help="Output file path for the listing (default: stdout)"
    )
    hardware_accurate = cli.Flag(
        ["--hardware-accurate"],
        help="Sign-extend displacements and decode MOD=00 R/M=110 as a direct address",
    )
    verbose = cli.Flag(["--verbose"], help="Log every decoded instruction")

    def main(self, input_file: cli.ExistingFile) -> Optional[int]:
        _configure_logging(self.verbose)
        config = load_decoder_config().with_overrides(
            hardware_accurate=True if self.hardware_accurate else None
        )
        try:
            listing = disassemble_file(str(input_file), config)
        except DecodeError as e:
            print(f"Decode Error: {e}", file=sys.stderr)
            return 1

        if self.output_file:
            Path(self.output_file).write_text(listing)
        else:
            sys.stdout.write(listing)
        return None


class AssemblerCLI(cli.Application):
    """Reassembles a listing produced by i8086-disasm into a raw binary."""

    PROGNAME = "i8086-asm"
    VERSION = __version__

    output_file = cli.SwitchAttr(
        ["-o", "--output"], str, help="Output file path for the binary (default: hex dump on stdout)"
    )
    hardware_accurate = cli.Flag(
        ["--hardware-accurate"], help="Accept signed displacements and direct addresses"
    )
    verbose = cli.Flag(["--verbose"], help="Enable debug logging")

    def main(self, input_file: cli.ExistingFile) -> Optional[int]:
        _configure_logging(self.verbose)
        config = load_decoder_config().with_overrides(
            hardware_accurate=True if self.hardware_accurate else None
        )
        try:
            source_code = Path(str(input_file)).read_text()
            data = Assembler(config).assemble(source_code)
        except AssemblerError as e:
            print(f"Assembly Error: {e}", file=sys.stderr)
            return 1

        if self.output_file:
            Path(self.output_file).write_bytes(data)
        else:
            print(data.hex(" "))
        return None


def disasm_main() -> None:
    DisassemblerCLI.run()


def asm_main() -> None:
    AssemblerCLI.run()


if __name__ == "__main__":
    DisassemblerCLI.run()
