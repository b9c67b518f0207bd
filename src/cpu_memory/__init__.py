"""Memory for 8-bit CPU emulators: a flat 64K space with ROM/RAM banking."""

from .memory import AddressSpace, BankRegistry, BankType, Endianness

__all__ = ["AddressSpace", "BankRegistry", "BankType", "Endianness"]
