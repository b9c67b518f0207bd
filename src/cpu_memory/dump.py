"""Hex dumps of 64K memories, with a per-byte bank map for BankRegistry."""

from __future__ import annotations

from typing import Protocol

from .memory.banking import BankRegistry
from .memory.errors import AddressOutOfRange
from .memory.overlay import BankType, Overlay
from .memory.space import ADDRESS_MASK

ROW_BYTES = 16

# Bank map symbols
UNBANKED = "."
ROM_BLOCKING = "R"
ROM_WRITETHROUGH = "W"
RAM_ISOLATED = "M"


class Peekable(Protocol):
    def peek8(self, addr: int) -> int: ...


def bank_symbol(overlay: Overlay | None) -> str:
    """One-character state of an address: unbanked, ROM, writethrough ROM or RAM."""
    if overlay is None:
        return UNBANKED
    if overlay.type is BankType.RAM:
        return RAM_ISOLATED
    return ROM_WRITETHROUGH if overlay.writethrough else ROM_BLOCKING


def _printable(value: int | None) -> str:
    if value is None or not 0x20 <= value <= 0x7E:
        return "."
    return chr(value)


def _read_row(memory: Peekable, row_addr: int) -> list[int | None]:
    """Bytes of one row; None where the memory is shorter than 64K."""
    values: list[int | None] = []
    for addr in range(row_addr, row_addr + ROW_BYTES):
        try:
            values.append(memory.peek8(addr))
        except AddressOutOfRange:
            values.append(None)
    return values


def format_hex_dump(memory: Peekable, start_addr: int, num_rows: int = 16) -> str:
    """Format a memory region as a hex dump with addresses, hex bytes, and ASCII.

    Each row covers 16 bytes:
        ADDR: HH HH HH HH HH HH HH HH  HH HH HH HH HH HH HH HH  |ASCII...........|

    When `memory` is a BankRegistry, each row also gets a bank map with
    one character per byte: '.' unbanked, 'R' ROM, 'W' writethrough ROM,
    'M' RAM bank. Values shown are what the CPU would read.

    Addresses wrap from 0xFFFF back to 0x0000. Bytes a smaller address
    space cannot supply show as '??'.

    Args:
        memory: An AddressSpace or BankRegistry.
        start_addr: First address to show (aligned down to 16 bytes).
        num_rows: Number of rows.

    Returns:
        A multi-line string suitable for display in a Rich Panel.
    """
    registry = memory if isinstance(memory, BankRegistry) else None
    first_row = start_addr & ADDRESS_MASK & ~(ROW_BYTES - 1)
    lines: list[str] = []

    for row in range(num_rows):
        row_addr = (first_row + row * ROW_BYTES) & ADDRESS_MASK
        values = _read_row(memory, row_addr)
        cells = ["??" if v is None else f"{v:02X}" for v in values]
        hex_str = " ".join(cells[:8]) + "  " + " ".join(cells[8:])
        text = "".join(_printable(v) for v in values)
        line = f"0x{row_addr:04X}: {hex_str}  |{text}|"
        if registry is not None:
            bank_map = "".join(
                bank_symbol(registry.bank_at(addr))
                for addr in range(row_addr, row_addr + ROW_BYTES)
            )
            line += f" {bank_map}"
        lines.append(line)

    return "\n".join(lines)
