"""Persistence for memory images: whole-file load/save and byte sources.

Every function here opens, uses and closes its file within the one call;
no handle outlives the operation that needed it.
"""

from __future__ import annotations

import io
import os
from typing import BinaryIO, Protocol, Union, runtime_checkable

from .errors import BackingStoreIOError, SizeMismatch

PathLike = Union[str, "os.PathLike[str]"]


def load_image(path: PathLike, size: int) -> bytearray:
    """Read a raw image file that must hold exactly `size` bytes.

    Args:
        path: File to read.
        size: Required length in bytes.

    Returns:
        The file contents as a mutable buffer.

    Raises:
        BackingStoreIOError: If the file cannot be read.
        SizeMismatch: If the file length differs from `size`.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise BackingStoreIOError(f"Couldn't read {os.fspath(path)}: {e}") from e
    if len(data) != size:
        raise SizeMismatch(os.fspath(path), size, len(data))
    return bytearray(data)


def save_image(path: PathLike, data: bytes | bytearray) -> None:
    """Overwrite `path` with the full contents of `data` and flush it.

    Raises:
        BackingStoreIOError: If the file cannot be written.
    """
    try:
        with open(path, "wb") as f:
            f.write(data)
            f.flush()
    except OSError as e:
        raise BackingStoreIOError(f"Can't write {os.fspath(path)}: {e}") from e


@runtime_checkable
class ByteSource(Protocol):
    """Anything that can produce exactly N bytes of overlay content."""

    def read_exact(self, size: int) -> bytes:
        """Return exactly `size` bytes or raise SizeMismatch."""
        ...


class FileSource:
    """A ROM or RAM image stored in a file on disk."""

    def __init__(self, path: PathLike) -> None:
        self.path = path

    def read_exact(self, size: int) -> bytes:
        return bytes(load_image(self.path, size))

    def __repr__(self) -> str:
        return f"FileSource({os.fspath(self.path)!r})"


class StreamSource:
    """An in-memory buffer or an already-open binary stream.

    Bytes-like data is wrapped in a BytesIO. For streams, everything from
    the current position to EOF is consumed on each read_exact() call.
    """

    def __init__(self, data: bytes | bytearray | memoryview | BinaryIO) -> None:
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = io.BytesIO(bytes(data))
        self._stream = data

    def read_exact(self, size: int) -> bytes:
        try:
            data = self._stream.read()
        except OSError as e:
            raise BackingStoreIOError(f"Couldn't read stream: {e}") from e
        if len(data) != size:
            raise SizeMismatch("stream", size, len(data))
        return bytes(data)


def open_source(obj: object) -> ByteSource:
    """Coerce a path, bytes-like object or stream into a ByteSource.

    Raises:
        TypeError: If `obj` is none of the supported kinds.
    """
    if isinstance(obj, ByteSource):
        return obj
    if isinstance(obj, (str, os.PathLike)):
        return FileSource(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return StreamSource(obj)
    if hasattr(obj, "read"):
        return StreamSource(obj)  # type: ignore[arg-type]
    raise TypeError(f"Cannot read bank contents from {type(obj).__name__}")
