"""AddressSpace: a flat 64K byte-addressable store with optional disk backing."""

from __future__ import annotations

import enum
import logging
import os

from .errors import AddressOutOfRange, SizeMismatch, ValueOutOfRange
from .store import PathLike, load_image, save_image

logger = logging.getLogger(__name__)

MEMORY_SIZE = 0x10000
ADDRESS_MASK = 0xFFFF
BYTE_MAX = 0xFF


class Endianness(enum.Enum):
    """Byte order used by peek16/poke16."""

    LITTLE = "LITTLE"
    BIG = "BIG"


def swap16(value: int) -> int:
    """Exchange the low and high bytes of a 16-bit value."""
    return ((value & 0xFF) << 8) | ((value >> 8) & 0xFF)


class AddressSpace:
    """Byte-addressable memory with 8- and 16-bit accessors.

    With a backing `file`, the image is loaded from it if it exists
    (it must be exactly `size` bytes) or created zero-filled otherwise,
    and every successful write rewrites the whole file before returning.
    This trades throughput for per-write durability. The file is assumed
    to be owned by this object alone for its lifetime.

    Without a file, memory starts zeroed or as a copy of `contents`.

    Words are always stored low byte first. With BIG endianness the value
    is byte-swapped on its way in and out, so a BIG space presents the
    stored bytes as high/low instead of low/high.
    """

    def __init__(
        self,
        file: PathLike | None = None,
        endianness: Endianness | str = Endianness.LITTLE,
        contents: bytes | bytearray | None = None,
        size: int = MEMORY_SIZE,
    ) -> None:
        self.endianness = Endianness(endianness)
        self.size = size
        self.file = file

        if file is not None and contents is not None:
            raise ValueError("Pass either a backing file or initial contents, not both")

        if contents is not None:
            if len(contents) != size:
                raise SizeMismatch("initial contents", size, len(contents))
            self._data = bytearray(contents)
        elif file is not None and os.path.exists(file):
            self._data = load_image(file, size)
            # Write it straight back so a read-only image fails here
            save_image(file, self._data)
            logger.debug("Loaded %d byte image from %s", size, os.fspath(file))
        else:
            self._data = bytearray(size)
            if file is not None:
                save_image(file, self._data)
                logger.debug("Created zeroed %d byte image at %s", size, os.fspath(file))

    def _check_addr(self, addr: int) -> None:
        if addr < 0 or addr >= self.size:
            raise AddressOutOfRange(addr, self.size)

    def _sync(self) -> None:
        if self.file is not None:
            save_image(self.file, self._data)

    def peek8(self, addr: int) -> int:
        """Read the unsigned byte at addr."""
        self._check_addr(addr)
        return self._data[addr]

    def poke8(self, addr: int, value: int) -> int:
        """Write a byte at addr. Returns 1, the number of bytes written."""
        if value < 0 or value > BYTE_MAX:
            raise ValueOutOfRange(value)
        self._check_addr(addr)
        self._data[addr] = value
        self._sync()
        return 1

    peek = peek8
    poke = poke8

    def peek16(self, addr: int) -> int:
        """Read the 16-bit word at addr, addr+1 in the configured byte order."""
        value = self.peek8(addr) + 256 * self.peek8(addr + 1)
        if self.endianness is Endianness.BIG:
            value = swap16(value)
        return value

    def poke16(self, addr: int, value: int) -> int:
        """Write a 16-bit word at addr, addr+1. Returns 2.

        Both addresses are checked before either byte is stored.
        """
        if value < 0 or value > 0xFFFF:
            raise ValueOutOfRange(value, 0xFFFF)
        self._check_addr(addr)
        self._check_addr(addr + 1)
        if self.endianness is Endianness.BIG:
            value = swap16(value)
        self._data[addr] = value & 0xFF
        self._data[addr + 1] = value >> 8
        self._sync()
        return 2

    def load_segment(self, addr: int, data: bytes) -> None:
        """Bulk-copy `data` into memory starting at addr.

        The whole segment is range-checked before anything changes, and
        the backing file is rewritten once rather than per byte.

        Args:
            addr: Start address for the load.
            data: Raw bytes to copy.

        Raises:
            AddressOutOfRange: If any byte of the segment falls outside memory.
        """
        if not data:
            return
        self._check_addr(addr)
        self._check_addr(addr + len(data) - 1)
        self._data[addr:addr + len(data)] = data
        self._sync()

    def snapshot(self) -> bytes:
        """Return an immutable copy of the full contents."""
        return bytes(self._data)
