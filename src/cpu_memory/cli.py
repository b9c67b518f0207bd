"""Command-line interface for inspecting and patching 64K memory images."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .dump import format_hex_dump
from .memory.banking import BankRegistry
from .memory.errors import MemoryAccessError
from .memory.overlay import BankType
from .memory.space import MEMORY_SIZE, AddressSpace, Endianness
from .memory.store import load_image


def _parse_int(value: str) -> int:
    """Parse a decimal or 0x-prefixed integer argument."""
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number '{value}'") from None


def _parse_rom_arg(value: str) -> tuple[int, str, bool]:
    """Parse a --rom ADDR:FILE[:wt] argument.

    Returns:
        Tuple of (address, file_path, writethrough).

    Raises:
        argparse.ArgumentTypeError: If the format is invalid.
    """
    parts = value.split(":")
    if len(parts) not in (2, 3) or not parts[0] or not parts[1]:
        raise argparse.ArgumentTypeError(
            f"invalid format '{value}', expected ADDR:FILE[:wt]"
        )
    if len(parts) == 3 and parts[2] != "wt":
        raise argparse.ArgumentTypeError(
            f"invalid flag '{parts[2]}' in '{value}', only 'wt' is allowed"
        )
    return _parse_int(parts[0]), parts[1], len(parts) == 3


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("image", help="Raw 64K memory image")
    parser.add_argument(
        "--big-endian", action="store_true",
        help="Treat 16-bit words as big-endian",
    )


def _add_rom(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--rom", action="append", type=_parse_rom_arg, default=[],
        metavar="ADDR:FILE[:wt]",
        help="Bank a ROM image at ADDR; ':wt' enables writethrough (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpu-memory", description="Inspect and patch 64K memory images",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log banking activity")
    sub = parser.add_subparsers(dest="command")

    peek_parser = sub.add_parser("peek", help="Read a byte or word")
    _add_common(peek_parser)
    _add_rom(peek_parser)
    peek_parser.add_argument("address", type=_parse_int)
    peek_parser.add_argument("--word", action="store_true", help="Read 16 bits")

    poke_parser = sub.add_parser("poke", help="Write a byte or word to the image")
    _add_common(poke_parser)
    poke_parser.add_argument("address", type=_parse_int)
    poke_parser.add_argument("value", type=_parse_int)
    poke_parser.add_argument("--word", action="store_true", help="Write 16 bits")

    dump_parser = sub.add_parser("dump", help="Hex dump part of the image")
    _add_common(dump_parser)
    _add_rom(dump_parser)
    dump_parser.add_argument("--start", type=_parse_int, default=0)
    dump_parser.add_argument("--rows", type=int, default=16)

    return parser


def _open_banked(args: argparse.Namespace) -> BankRegistry:
    """Load the image read-only and bank any --rom images over it."""
    memory = AddressSpace(
        contents=load_image(args.image, MEMORY_SIZE),
        endianness=Endianness.BIG if args.big_endian else Endianness.LITTLE,
    )
    registry = BankRegistry(memory)
    for address, path, writethrough in args.rom:
        registry.bank(
            address, os.path.getsize(path), BankType.ROM, path,
            writethrough=writethrough,
        )
    return registry


def _banks_table(registry: BankRegistry) -> Table:
    table = Table(title="Banks")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Type")
    table.add_column("Writethrough")
    for overlay in registry.banks:
        table.add_row(
            f"0x{overlay.start:04X}", f"0x{overlay.end - 1:04X}",
            overlay.type.value, "yes" if overlay.writethrough else "no",
        )
    return table


def run_peek(args: argparse.Namespace, console: Console) -> None:
    registry = _open_banked(args)
    if args.word:
        value = registry.peek16(args.address)
        console.print(f"0x{args.address:04X}: 0x{value:04X} ({value})")
    else:
        value = registry.peek8(args.address)
        console.print(f"0x{args.address:04X}: 0x{value:02X} ({value})")


def run_poke(args: argparse.Namespace, console: Console) -> None:
    memory = AddressSpace(
        file=args.image,
        endianness=Endianness.BIG if args.big_endian else Endianness.LITTLE,
    )
    if args.word:
        written = memory.poke16(args.address, args.value)
    else:
        written = memory.poke8(args.address, args.value)
    console.print(f"Wrote {written} byte(s) at 0x{args.address:04X}")


def run_dump(args: argparse.Namespace, console: Console) -> None:
    registry = _open_banked(args)
    dump = format_hex_dump(registry, args.start, args.rows)
    console.print(Panel(Text(dump, no_wrap=True), title=str(args.image), expand=False))
    if registry.banks:
        console.print(_banks_table(registry))


def main(argv: list[str] | None = None) -> None:
    """Entry point for the cpu-memory CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    commands = {"peek": run_peek, "poke": run_poke, "dump": run_dump}
    if args.command not in commands:
        parser.print_help()
        sys.exit(1)

    console = Console(highlight=False)
    try:
        commands[args.command](args, console)
    except (MemoryAccessError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
