"""OpenPGP packet framing, literal data, compression and symmetric encryption."""

from __future__ import annotations

import bz2
import enum
import hashlib
import os
import zlib
from dataclasses import dataclass

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

try:
    from cryptography.hazmat.decrepit.ciphers.algorithms import CAST5, TripleDES
except ImportError:  # older releases keep them with the other algorithms
    from cryptography.hazmat.primitives.ciphers.algorithms import CAST5, TripleDES

TAG_PKESK = 1
TAG_SIGNATURE = 2
TAG_SKESK = 3
TAG_ONE_PASS_SIGNATURE = 4
TAG_COMPRESSED = 8
TAG_MARKER = 10
TAG_LITERAL = 11
TAG_SEIPD = 18
TAG_MDC = 19

_MDC_HEADER = bytes([0xC0 | TAG_MDC, 20])
_SEIPD_VERSION = 1
_SKESK_VERSION = 4
_S2K_SIMPLE = 0
_S2K_SALTED = 1
_S2K_ITERATED = 3
_S2K_SALT_LENGTH = 8
_S2K_HASH_SHA256 = 8
_S2K_DEFAULT_COUNT_BYTE = 0x60  # encodes 65536 hashed bytes
_S2K_HASHES = {
    1: "md5",
    2: "sha1",
    8: "sha256",
    9: "sha384",
    10: "sha512",
    11: "sha224",
}

_COMPRESSION_NONE = 0
_COMPRESSION_ZIP = 1
_COMPRESSION_ZLIB = 2
_COMPRESSION_BZIP2 = 3


class PacketError(ValueError):
    """Raised when packet data is malformed or cannot be decrypted."""


class CipherAlgorithm(enum.IntEnum):
    """Symmetric cipher identifiers as used on the wire."""

    TRIPLE_DES = 2
    CAST5 = 3
    AES128 = 7
    AES192 = 8
    AES256 = 9

    def key_size(self) -> int:
        """Key length in bytes."""
        return _KEY_SIZES[self]

    def block_size(self) -> int:
        """Block length in bytes."""
        return _BLOCK_SIZES[self]


_KEY_SIZES = {
    CipherAlgorithm.TRIPLE_DES: 24,
    CipherAlgorithm.CAST5: 16,
    CipherAlgorithm.AES128: 16,
    CipherAlgorithm.AES192: 24,
    CipherAlgorithm.AES256: 32,
}

_BLOCK_SIZES = {
    CipherAlgorithm.TRIPLE_DES: 8,
    CipherAlgorithm.CAST5: 8,
    CipherAlgorithm.AES128: 16,
    CipherAlgorithm.AES192: 16,
    CipherAlgorithm.AES256: 16,
}


@dataclass
class Packet:
    """A packet tag together with its body."""

    tag: int
    body: bytes


@dataclass
class LiteralData:
    """The contents of a literal data packet."""

    data: bytes
    is_binary: bool = True
    filename: str = ""
    time: int = 0

    def __post_init__(self) -> None:
        self.data = bytes(self.data)


def _as_cipher(value) -> CipherAlgorithm:
    try:
        return CipherAlgorithm(value)
    except ValueError as exc:
        raise PacketError(f"unsupported cipher algorithm: {value}") from exc


def _as_bytes(value) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


# ----- framing -----


def _encode_length(length: int) -> bytes:
    if length < 192:
        return bytes([length])
    if length < 8384:
        length -= 192
        return bytes([(length >> 8) + 192, length & 0xFF])
    return b"\xff" + length.to_bytes(4, "big")


def serialize_packet(tag: int, body: bytes) -> bytes:
    """Frame ``body`` as a new-format packet with the given tag."""
    if not 0 <= tag <= 63:
        raise PacketError(f"invalid packet tag: {tag}")
    body = bytes(body)
    return bytes([0xC0 | tag]) + _encode_length(len(body)) + body


def _take(data: bytes, pos: int, count: int) -> bytes:
    if pos + count > len(data):
        raise PacketError("truncated packet")
    return data[pos:pos + count]


def _read_new_body(data: bytes, pos: int) -> tuple[bytes, int]:
    chunks = []
    while True:
        first = _take(data, pos, 1)[0]
        pos += 1
        if first < 192:
            length = first
        elif first < 224:
            second = _take(data, pos, 1)[0]
            pos += 1
            length = ((first - 192) << 8) + second + 192
        elif first == 255:
            length = int.from_bytes(_take(data, pos, 4), "big")
            pos += 4
        else:
            partial = 1 << (first & 0x1F)
            chunks.append(_take(data, pos, partial))
            pos += partial
            continue
        chunks.append(_take(data, pos, length))
        return b"".join(chunks), pos + length


def _read_old_body(data: bytes, pos: int, length_type: int) -> tuple[bytes, int]:
    if length_type == 3:
        return data[pos:], len(data)
    width = 1 << length_type
    length = int.from_bytes(_take(data, pos, width), "big")
    pos += width
    return _take(data, pos, length), pos + length


def parse_packets(data: bytes) -> list[Packet]:
    """Split a byte string into its packets (old or new format)."""
    data = bytes(data)
    packets = []
    pos = 0
    while pos < len(data):
        header = data[pos]
        pos += 1
        if not header & 0x80:
            raise PacketError("invalid packet header")
        if header & 0x40:
            tag = header & 0x3F
            body, pos = _read_new_body(data, pos)
        else:
            tag = (header >> 2) & 0x0F
            body, pos = _read_old_body(data, pos, header & 0x03)
        packets.append(Packet(tag, body))
    return packets


# ----- literal data -----


def serialize_literal(literal: LiteralData) -> bytes:
    """Serialize a literal data packet."""
    filename = literal.filename.encode("utf-8")[:255]
    body = (
        (b"b" if literal.is_binary else b"t")
        + bytes([len(filename)])
        + filename
        + (literal.time & 0xFFFFFFFF).to_bytes(4, "big")
        + literal.data
    )
    return serialize_packet(TAG_LITERAL, body)


def parse_literal(body: bytes) -> LiteralData:
    """Parse the body of a literal data packet."""
    body = bytes(body)
    if len(body) < 2:
        raise PacketError("truncated literal data packet")
    name_length = body[1]
    header_end = 2 + name_length + 4
    if len(body) < header_end:
        raise PacketError("truncated literal data packet")
    return LiteralData(
        data=body[header_end:],
        is_binary=body[0] == ord("b"),
        filename=body[2:2 + name_length].decode("utf-8", errors="replace"),
        time=int.from_bytes(body[2 + name_length:header_end], "big"),
    )


# ----- compression -----


def compress(data: bytes) -> bytes:
    """Wrap ``data`` in a ZLIB compressed data packet."""
    return serialize_packet(TAG_COMPRESSED, bytes([_COMPRESSION_ZLIB]) + zlib.compress(bytes(data)))


def decompress(body: bytes) -> bytes:
    """Return the contents of a compressed data packet body."""
    body = bytes(body)
    if not body:
        raise PacketError("empty compressed data packet")
    algorithm, payload = body[0], body[1:]
    try:
        if algorithm == _COMPRESSION_NONE:
            return payload
        if algorithm == _COMPRESSION_ZIP:
            inflater = zlib.decompressobj(-15)
            return inflater.decompress(payload) + inflater.flush()
        if algorithm == _COMPRESSION_ZLIB:
            return zlib.decompress(payload)
        if algorithm == _COMPRESSION_BZIP2:
            return bz2.decompress(payload)
    except (zlib.error, OSError, ValueError) as exc:
        raise PacketError("corrupt compressed data") from exc
    raise PacketError(f"unsupported compression algorithm: {algorithm}")


# ----- block cipher in OpenPGP CFB mode -----


def _block_cipher(cipher: CipherAlgorithm, key: bytes):
    if cipher is CipherAlgorithm.TRIPLE_DES:
        return TripleDES(key)
    if cipher is CipherAlgorithm.CAST5:
        return CAST5(key)
    return algorithms.AES(key)


def _cfb(cipher: CipherAlgorithm, key: bytes, data: bytes, *, decrypt: bool) -> bytes:
    ecb = Cipher(_block_cipher(cipher, key), modes.ECB()).encryptor()
    size = cipher.block_size()
    feedback = bytes(size)
    out = bytearray()
    for start in range(0, len(data), size):
        chunk = data[start:start + size]
        keystream = ecb.update(feedback)[: len(chunk)]
        block = (int.from_bytes(chunk, "big") ^ int.from_bytes(keystream, "big")).to_bytes(len(chunk), "big")
        out += block
        feedback = chunk if decrypt else block
    return bytes(out)


def encrypt_seipd(cipher, key: bytes, plaintext: bytes) -> bytes:
    """Encrypt ``plaintext`` into a symmetrically encrypted integrity protected packet."""
    cipher = _as_cipher(cipher)
    key = bytes(key)
    if len(key) != cipher.key_size():
        raise PacketError("wrong key size")
    prefix = os.urandom(cipher.block_size())
    hashed = prefix + prefix[-2:] + bytes(plaintext) + _MDC_HEADER
    plain = hashed + hashlib.sha1(hashed).digest()
    body = bytes([_SEIPD_VERSION]) + _cfb(cipher, key, plain, decrypt=False)
    return serialize_packet(TAG_SEIPD, body)


def decrypt_seipd(cipher, key: bytes, body: bytes) -> bytes:
    """Decrypt the body of an integrity protected packet and check its MDC."""
    cipher = _as_cipher(cipher)
    key = bytes(key)
    body = bytes(body)
    if len(key) != cipher.key_size():
        raise PacketError("wrong key size")
    if not body or body[0] != _SEIPD_VERSION:
        raise PacketError("unsupported encrypted data packet version")
    size = cipher.block_size()
    if len(body) - 1 < size + 2 + len(_MDC_HEADER) + 20:
        raise PacketError("truncated encrypted data packet")
    plain = _cfb(cipher, key, body[1:], decrypt=True)
    if plain[size - 2:size] != plain[size:size + 2]:
        raise PacketError("incorrect key")
    hashed, digest = plain[:-20], plain[-20:]
    if hashed[-2:] != _MDC_HEADER or hashlib.sha1(hashed).digest() != digest:
        raise PacketError("MDC hash mismatch")
    return plain[size + 2:-22]


# ----- password-encrypted session keys -----


def _decode_count(count_byte: int) -> int:
    return (16 + (count_byte & 15)) << ((count_byte >> 4) + 6)


def _s2k(hash_name: str, salt: bytes, password: bytes, count: int | None, key_length: int) -> bytes:
    data = salt + password
    out = b""
    zeros = 0
    while len(out) < key_length:
        digest = hashlib.new(hash_name)
        digest.update(bytes(zeros))
        if count is None:
            digest.update(data)
        else:
            remaining = max(count, len(data))
            chunk = data * max(1, 65536 // len(data))
            while remaining:
                piece = chunk[:remaining]
                digest.update(piece)
                remaining -= len(piece)
        out += digest.digest()
        zeros += 1
    return out[:key_length]


def serialize_skesk(cipher, session_key: bytes, password) -> bytes:
    """Encrypt ``session_key`` under ``password`` as a symmetric-key session key packet."""
    cipher = _as_cipher(cipher)
    session_key = bytes(session_key)
    if len(session_key) != cipher.key_size():
        raise PacketError("wrong session key size")
    salt = os.urandom(_S2K_SALT_LENGTH)
    key = _s2k(
        _S2K_HASHES[_S2K_HASH_SHA256],
        salt,
        _as_bytes(password),
        _decode_count(_S2K_DEFAULT_COUNT_BYTE),
        cipher.key_size(),
    )
    encrypted = _cfb(cipher, key, bytes([cipher]) + session_key, decrypt=False)
    body = (
        bytes([_SKESK_VERSION, cipher, _S2K_ITERATED, _S2K_HASH_SHA256])
        + salt
        + bytes([_S2K_DEFAULT_COUNT_BYTE])
        + encrypted
    )
    return serialize_packet(TAG_SKESK, body)


def decrypt_skesk(body: bytes, password) -> tuple[CipherAlgorithm, bytes]:
    """Recover the cipher and session key from a symmetric-key session key packet body."""
    body = bytes(body)
    if len(body) < 4:
        raise PacketError("truncated session key packet")
    if body[0] != _SKESK_VERSION:
        raise PacketError(f"unsupported session key packet version: {body[0]}")
    cipher = _as_cipher(body[1])
    s2k_type, hash_id = body[2], body[3]
    pos = 4
    count = None
    salt = b""
    if s2k_type in (_S2K_SALTED, _S2K_ITERATED):
        salt = _take(body, pos, _S2K_SALT_LENGTH)
        pos += _S2K_SALT_LENGTH
        if s2k_type == _S2K_ITERATED:
            count = _decode_count(_take(body, pos, 1)[0])
            pos += 1
    elif s2k_type != _S2K_SIMPLE:
        raise PacketError(f"unsupported S2K type: {s2k_type}")
    hash_name = _S2K_HASHES.get(hash_id)
    if hash_name is None:
        raise PacketError(f"unsupported S2K hash: {hash_id}")
    key = _s2k(hash_name, salt, _as_bytes(password), count, cipher.key_size())
    encrypted = body[pos:]
    if not encrypted:
        return cipher, key
    decrypted = _cfb(cipher, key, encrypted, decrypt=True)
    session_cipher = _as_cipher(decrypted[0])
    session_key = decrypted[1:]
    if len(session_key) != session_cipher.key_size():
        raise PacketError("wrong session key size")
    return session_cipher, session_key