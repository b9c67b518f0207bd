"""Overlay: a ROM or RAM region banked over part of an address space."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .errors import MissingSource, RangeInvalid, SizeMismatch
from .space import MEMORY_SIZE
from .store import open_source


class BankType(enum.Enum):
    """What an overlay does with reads and writes."""

    ROM = "ROM"
    RAM = "RAM"


def check_range(start: int, size: int, limit: int = MEMORY_SIZE) -> None:
    """Raise RangeInvalid unless [start, start+size) is a non-empty region inside [0, limit)."""
    if start < 0 or start >= limit:
        raise RangeInvalid(f"Bank address 0x{start:04X} out of range" if start >= 0
                           else f"Bank address {start} out of range")
    if size < 1:
        raise RangeInvalid(f"Bank size must be at least 1, got {size}")
    if start + size > limit:
        raise RangeInvalid(
            f"Bank [0x{start:04X}, 0x{start + size:05X}) runs past end of memory "
            f"(0x{limit:05X})"
        )


@dataclass(frozen=True, eq=False)
class Overlay:
    """A banked region and the bytes that shadow it.

    ROM content is immutable `bytes`; RAM content is a `bytearray` owned
    by the overlay and never shared with the underlying address space.
    `writethrough` only has an effect on ROM overlays.
    """

    start: int
    size: int
    type: BankType
    content: bytes | bytearray
    writethrough: bool = False

    def __post_init__(self) -> None:
        check_range(self.start, self.size)
        if len(self.content) != self.size:
            raise SizeMismatch("bank contents", self.size, len(self.content))

    @classmethod
    def load(
        cls,
        start: int,
        size: int,
        type: BankType | str,
        source: object = None,
        writethrough: bool = False,
    ) -> Overlay:
        """Validate the geometry, then read the overlay's content from `source`.

        ROM banks need a source. RAM banks take their initial contents
        from one if given and start zeroed otherwise.

        Raises:
            RangeInvalid: Bad start/size.
            MissingSource: ROM bank without a source.
            SizeMismatch: Source holds other than `size` bytes.
        """
        bank_type = BankType(type)
        check_range(start, size)
        if source is None:
            if bank_type is BankType.ROM:
                raise MissingSource(f"ROM bank at 0x{start:04X} needs a source")
            return cls(start, size, bank_type, bytearray(size), writethrough)

        data = open_source(source).read_exact(size)
        if bank_type is BankType.RAM:
            return cls(start, size, bank_type, bytearray(data), writethrough)
        return cls(start, size, bank_type, bytes(data), writethrough)

    @property
    def end(self) -> int:
        """First address past the overlay."""
        return self.start + self.size

    def covers(self, addr: int) -> bool:
        return self.start <= addr < self.end

    def intersects(self, start: int, size: int) -> bool:
        return start < self.end and start + size > self.start

    def read(self, addr: int) -> int:
        return self.content[addr - self.start]

    def write(self, addr: int, value: int) -> None:
        """Store a byte in a RAM overlay's own buffer."""
        if self.type is not BankType.RAM:
            raise TypeError("ROM overlay contents are read-only")
        self.content[addr - self.start] = value  # type: ignore[index]
