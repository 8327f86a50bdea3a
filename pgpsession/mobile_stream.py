"""Adapters between byte streams and a pull-style reader protocol."""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol


@dataclass
class MobileReadResult:
    """Outcome of one pull-style read: count, end-of-data flag and the bytes."""

    n: int
    is_eof: bool
    data: bytes = field(default=b"")


class _PullReader(Protocol):
    def read(self, max_size: int) -> MobileReadResult: ...


def new_mobile_read_result(n: int, eof: bool, data: bytes) -> MobileReadResult:
    """Build a read result holding its own copy of ``data``."""
    return MobileReadResult(n=n, is_eof=eof, data=bytes(data))


def _readinto(reader: BinaryIO, buffer) -> int:
    readinto = getattr(reader, "readinto", None)
    if readinto is not None:
        return readinto(buffer) or 0
    chunk = reader.read(len(buffer))
    buffer[: len(chunk)] = chunk
    return len(chunk)


class MobileWriter:
    """Writes a private copy of each buffer to the wrapped writer."""

    def __init__(self, writer: BinaryIO) -> None:
        self._writer = writer

    def write(self, data) -> int:
        copy = bytes(data)
        written = self._writer.write(copy)
        return len(copy) if written is None else written


class MobileWriterWithSHA256:
    """Like :class:`MobileWriter`, also hashing what was written with SHA-256."""

    def __init__(self, writer: BinaryIO) -> None:
        self._writer = writer
        self._hash = hashlib.sha256()

    def write(self, data) -> int:
        copy = bytes(data)
        written = self._writer.write(copy)
        if written is None:
            written = len(copy)
        self._hash.update(copy[:written])
        return written

    def sha256(self) -> bytes:
        """Return the SHA-256 digest of everything written so far."""
        return self._hash.digest()


class MobileReader(io.RawIOBase):
    """A binary stream fed by a pull-style reader returning :class:`MobileReadResult`."""

    def __init__(self, reader: _PullReader) -> None:
        super().__init__()
        self._reader = reader
        self._eof = False

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._eof:
            return 0
        try:
            result = self._reader.read(len(buffer))
        except Exception as exc:
            raise OSError("couldn't read from mobile reader") from exc
        n = result.n
        if n > 0:
            buffer[:n] = result.data[:n]
        if result.is_eof:
            self._eof = True
        return n


class AndroidReader:
    """Reads into a caller's buffer, returning -1 once the data is exhausted."""

    def __init__(self, reader: BinaryIO) -> None:
        self._reader = reader
        self._eof = False

    def read(self, buffer) -> int:
        if self._eof:
            return -1
        if len(buffer) == 0:
            return 0
        n = _readinto(self._reader, buffer)
        if n == 0:
            self._eof = True
            return -1
        return n


class IOSReader:
    """Pull-style reader over a binary stream, returning :class:`MobileReadResult`."""

    def __init__(self, reader: BinaryIO) -> None:
        self._reader = reader

    def read(self, size: int) -> MobileReadResult:
        data = self._reader.read(size) or b""
        return MobileReadResult(n=len(data), is_eof=size > 0 and not data, data=bytes(data))