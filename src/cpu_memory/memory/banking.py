"""Bank registry: overlays ROM/RAM banks on top of an AddressSpace."""

from __future__ import annotations

import logging

from .errors import AddressOutOfRange, NoSuchBank, ValueOutOfRange
from .overlay import BankType, Overlay, check_range
from .space import AddressSpace, Endianness, swap16

logger = logging.getLogger(__name__)


class BankRegistry:
    """Routes each access to the active overlay covering it, or to memory.

    At most one overlay covers any address. Banking a region evicts every
    active overlay that intersects it, whole, even if only one byte
    overlaps; ranges are never clipped. Banking and unbanking never alter
    the underlying AddressSpace, so base contents reappear unchanged once
    an overlay goes away (apart from writethrough writes made meanwhile).

    Write results from poke():
        1 -- the byte was stored (in memory, a RAM bank, or through a ROM).
        0 -- a ROM bank without writethrough suppressed the write.
    """

    def __init__(self, memory: AddressSpace | None = None) -> None:
        self.memory = memory if memory is not None else AddressSpace()
        self._overlays: list[Overlay] = []
        self._last_hit: Overlay | None = None

    @property
    def banks(self) -> tuple[Overlay, ...]:
        """Active overlays ordered by start address."""
        return tuple(sorted(self._overlays, key=lambda o: o.start))

    @property
    def endianness(self) -> Endianness:
        """Byte order of the underlying memory, used by peek16/poke16."""
        return self.memory.endianness

    def bank(
        self,
        address: int,
        size: int,
        type: BankType | str,
        source: object = None,
        writethrough: bool = False,
    ) -> Overlay:
        """Activate an overlay over [address, address+size).

        The overlay's content is read from `source` before any existing
        bank is touched, so a failed bank() leaves the registry unchanged.

        Args:
            address: First address covered.
            size: Number of bytes covered, at least 1.
            type: BankType.ROM or BankType.RAM (or their names).
            source: Path, bytes, binary stream or ByteSource holding
                exactly `size` bytes. Required for ROM; optional initial
                contents for RAM.
            writethrough: For ROM, send writes to the underlying memory
                instead of discarding them.

        Returns:
            The newly active Overlay.

        Raises:
            RangeInvalid: Bad address/size.
            MissingSource: ROM without a source.
            SizeMismatch: Source length differs from `size`.
        """
        check_range(address, size, self.memory.size)
        overlay = Overlay.load(address, size, type, source, writethrough)

        kept: list[Overlay] = []
        for existing in self._overlays:
            if existing.intersects(address, size):
                logger.debug(
                    "Evicting %s bank [0x%04X, 0x%05X) for new bank at 0x%04X",
                    existing.type.value, existing.start, existing.end, address,
                )
            else:
                kept.append(existing)
        kept.append(overlay)
        self._overlays = kept
        self._last_hit = None

        logger.debug(
            "Banked %s [0x%04X, 0x%05X)%s",
            overlay.type.value, overlay.start, overlay.end,
            " writethrough" if overlay.writethrough else "",
        )
        return overlay

    def unbank(self, address: int) -> Overlay:
        """Remove the overlay that starts exactly at `address`.

        Addresses inside an overlay but not at its start do not match.

        Returns:
            The overlay that was removed.

        Raises:
            NoSuchBank: If no active overlay starts at `address`.
        """
        for i, overlay in enumerate(self._overlays):
            if overlay.start == address:
                del self._overlays[i]
                self._last_hit = None
                logger.debug("Unbanked [0x%04X, 0x%05X)", overlay.start, overlay.end)
                return overlay
        raise NoSuchBank(address)

    def bank_at(self, addr: int) -> Overlay | None:
        """Return the active overlay covering addr, if any.

        Uses a last-hit cache so runs of accesses to one bank skip the scan.
        """
        hit = self._last_hit
        if hit is not None and hit.covers(addr):
            return hit
        for overlay in self._overlays:
            if overlay.covers(addr):
                self._last_hit = overlay
                return overlay
        return None

    def peek8(self, addr: int) -> int:
        """Read a byte, from the covering overlay if there is one."""
        overlay = self.bank_at(addr)
        if overlay is None:
            return self.memory.peek8(addr)
        return overlay.read(addr)

    def poke8(self, addr: int, value: int) -> int:
        """Write a byte, honouring any overlay. Returns 1 if stored, 0 if suppressed."""
        overlay = self.bank_at(addr)
        if overlay is None:
            return self.memory.poke8(addr, value)
        if value < 0 or value > 0xFF:
            raise ValueOutOfRange(value)
        if overlay.type is BankType.RAM:
            overlay.write(addr, value)
            return 1
        if overlay.writethrough:
            return self.memory.poke8(addr, value)
        return 0

    peek = peek8
    poke = poke8

    def peek16(self, addr: int) -> int:
        """Read a 16-bit word; each byte resolves through banking on its own."""
        value = self.peek8(addr) + 256 * self.peek8(addr + 1)
        if self.endianness is Endianness.BIG:
            value = swap16(value)
        return value

    def poke16(self, addr: int, value: int) -> int:
        """Write a 16-bit word byte by byte.

        Both addresses are checked first, so a word that would run past
        the end of memory stores nothing.

        Returns:
            How many of the two bytes were stored (0, 1 or 2).
        """
        if value < 0 or value > 0xFFFF:
            raise ValueOutOfRange(value, 0xFFFF)
        if addr < 0:
            raise AddressOutOfRange(addr, self.memory.size)
        if addr + 1 >= self.memory.size:
            raise AddressOutOfRange(addr + 1, self.memory.size)
        if self.endianness is Endianness.BIG:
            value = swap16(value)
        return self.poke8(addr, value & 0xFF) + self.poke8(addr + 1, value >> 8)
