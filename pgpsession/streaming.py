"""Streaming encryption and decryption of data packets with a session key."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO

from . import clock
from .packets import LiteralData
from .sessionkey import SessionKey


@dataclass
class PlainMessageMetadata:
    """Literal data metadata carried alongside the plaintext."""

    is_binary: bool = True
    filename: str = ""
    mod_time: int = 0


class EncryptingWriter:
    """Collects plaintext and writes the encrypted data packet when closed."""

    def __init__(
        self,
        session_key: SessionKey,
        output: BinaryIO,
        metadata: PlainMessageMetadata,
    ) -> None:
        self._session_key = session_key
        self._output = output
        self._metadata = metadata
        self._buffer = bytearray()
        self.closed = False

    def write(self, data) -> int:
        """Append ``data`` to the plaintext and return the number of bytes taken."""
        if self.closed:
            raise ValueError("write to a closed writer")
        chunk = bytes(data)
        self._buffer += chunk
        return len(chunk)

    def close(self) -> None:
        """Encrypt the collected plaintext and write the data packet to the output."""
        if self.closed:
            return
        self.closed = True
        literal = LiteralData(
            data=bytes(self._buffer),
            is_binary=self._metadata.is_binary,
            filename=self._metadata.filename,
            time=int(self._metadata.mod_time) & 0xFFFFFFFF,
        )
        self._buffer[:] = bytes(len(self._buffer))
        self._buffer.clear()
        self._output.write(self._session_key.encrypt(literal))

    def __enter__(self) -> EncryptingWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.closed = True
            self._buffer.clear()


class PlainMessageReader:
    """Reads the plaintext of a decrypted data packet."""

    def __init__(self, literal: LiteralData) -> None:
        self._literal = literal
        self._stream = io.BytesIO(literal.data)

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left when ``size`` is negative."""
        return self._stream.read(size)

    def metadata(self) -> PlainMessageMetadata:
        """Return the literal data metadata of the decrypted message."""
        return PlainMessageMetadata(
            is_binary=self._literal.is_binary,
            filename=self._literal.filename,
            mod_time=self._literal.time,
        )

    def __iter__(self):
        while chunk := self._stream.read(io.DEFAULT_BUFFER_SIZE):
            yield chunk


def encrypt_stream(
    session_key: SessionKey,
    output: BinaryIO,
    metadata: PlainMessageMetadata | None = None,
) -> EncryptingWriter:
    """Return a writer whose plaintext is encrypted into ``output`` on close.

    Without ``metadata`` the data is marked binary, unnamed and stamped
    with the current clock time.
    """
    session_key.cipher()
    if metadata is None:
        metadata = PlainMessageMetadata(is_binary=True, filename="", mod_time=clock.get_unix_time())
    return EncryptingWriter(session_key, output, metadata)


def decrypt_stream(session_key: SessionKey, reader: BinaryIO) -> PlainMessageReader:
    """Decrypt the data packet read from ``reader``."""
    data = reader.read()
    return PlainMessageReader(session_key.decrypt(data or b""))