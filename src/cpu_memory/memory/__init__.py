"""Banked 64K memory: address space, overlays and the bank registry."""

from .banking import BankRegistry
from .errors import (
    AddressOutOfRange,
    BackingStoreIOError,
    MemoryAccessError,
    MissingSource,
    NoSuchBank,
    RangeInvalid,
    SizeMismatch,
    ValueOutOfRange,
)
from .overlay import BankType, Overlay
from .space import MEMORY_SIZE, AddressSpace, Endianness
from .store import ByteSource, FileSource, StreamSource, load_image, open_source, save_image

__all__ = [
    "MEMORY_SIZE",
    "AddressOutOfRange",
    "AddressSpace",
    "BackingStoreIOError",
    "BankRegistry",
    "BankType",
    "ByteSource",
    "Endianness",
    "FileSource",
    "MemoryAccessError",
    "MissingSource",
    "NoSuchBank",
    "Overlay",
    "RangeInvalid",
    "SizeMismatch",
    "StreamSource",
    "ValueOutOfRange",
    "load_image",
    "open_source",
    "save_image",
]
