"""Exceptions raised by the address space, overlays and bank registry."""


class MemoryAccessError(Exception):
    """Base class for every error raised by cpu_memory."""


class AddressOutOfRange(MemoryAccessError, ValueError):
    """An address fell outside the address space."""

    def __init__(self, addr: int, size: int = 0x10000) -> None:
        super().__init__(
            f"Address 0x{addr:04X} out of range [0x0000, 0x{size - 1:04X}]"
            if addr >= 0 else f"Address {addr} out of range"
        )
        self.addr = addr


class ValueOutOfRange(MemoryAccessError, ValueError):
    """A byte or word value did not fit its width."""

    def __init__(self, value: int, limit: int = 0xFF) -> None:
        super().__init__(f"Value {value} out of range [0, {limit}]")
        self.value = value


class RangeInvalid(MemoryAccessError, ValueError):
    """A bank's start/size do not describe a region inside the space."""


class MissingSource(MemoryAccessError):
    """A ROM bank was requested without anything to load it from."""


class SizeMismatch(MemoryAccessError):
    """An image or source holds a different number of bytes than required."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        super().__init__(f"{what} is wrong size: expected {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


class NoSuchBank(MemoryAccessError, KeyError):
    """unbank() was given an address where no overlay starts."""

    def __init__(self, addr: int) -> None:
        super().__init__(f"No bank starts at 0x{addr:04X}")
        self.addr = addr

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class BackingStoreIOError(MemoryAccessError, OSError):
    """Reading or writing a backing file failed."""
