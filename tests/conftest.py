"""Shared fixtures for memory tests."""

import pytest

from cpu_memory.memory.banking import BankRegistry
from cpu_memory.memory.space import AddressSpace

ROM_TEXT = b"This is a ROM"  # 13 bytes


@pytest.fixture
def rom_file(tmp_path):
    """A 13-byte ROM image on disk."""
    path = tmp_path / "rom.bin"
    path.write_bytes(ROM_TEXT)
    return path


@pytest.fixture
def make_registry():
    """Factory fixture: returns a function that builds a BankRegistry over fresh memory.

    The base memory is filled with a recognisable pattern (low byte of
    each address) so evicted banks are easy to tell apart from ROM data.
    """
    def _make(endianness: str = "LITTLE") -> BankRegistry:
        pattern = bytes(addr & 0xFF for addr in range(0x10000))
        return BankRegistry(AddressSpace(contents=pattern, endianness=endianness))
    return _make
