"""Session keys: generation and symmetric encryption of data packets."""

from __future__ import annotations

import base64
import secrets
from dataclasses import dataclass

from .packets import (
    TAG_COMPRESSED,
    TAG_LITERAL,
    TAG_MARKER,
    TAG_ONE_PASS_SIGNATURE,
    TAG_SEIPD,
    TAG_SIGNATURE,
    CipherAlgorithm,
    LiteralData,
    PacketError,
    compress,
    decompress,
    decrypt_seipd,
    encrypt_seipd,
    parse_literal,
    parse_packets,
    serialize_literal,
)

THREE_DES = "3des"
TRIPLE_DES = "tripledes"
CAST5 = "cast5"
AES128 = "aes128"
AES192 = "aes192"
AES256 = "aes256"

_SYMMETRIC_ALGOS = {
    THREE_DES: CipherAlgorithm.TRIPLE_DES,
    TRIPLE_DES: CipherAlgorithm.TRIPLE_DES,
    CAST5: CipherAlgorithm.CAST5,
    AES128: CipherAlgorithm.AES128,
    AES192: CipherAlgorithm.AES192,
    AES256: CipherAlgorithm.AES256,
}

_SKIPPED_TAGS = frozenset({TAG_ONE_PASS_SIGNATURE, TAG_SIGNATURE, TAG_MARKER})


class SessionKeyError(ValueError):
    """Raised when a session key is unusable or a data packet cannot be decrypted."""


@dataclass
class SessionKey:
    """A decrypted session key and the name of its symmetric algorithm."""

    key: bytearray
    algo: str

    def __post_init__(self) -> None:
        self.key = bytearray(self.key)

    def cipher(self) -> CipherAlgorithm:
        """Return the cipher matching :attr:`algo`."""
        try:
            return _SYMMETRIC_ALGOS[self.algo]
        except KeyError:
            raise SessionKeyError(f"unsupported cipher function: {self.algo}") from None

    def base64_key(self) -> str:
        """Return the key encoded with standard base64."""
        return base64.b64encode(bytes(self.key)).decode("ascii")

    def check_size(self) -> None:
        """Raise if the key length does not match the algorithm."""
        cipher = _SYMMETRIC_ALGOS.get(self.algo)
        if cipher is None:
            raise SessionKeyError("unknown symmetric key algorithm")
        if cipher.key_size() != len(self.key):
            raise SessionKeyError("wrong session key size")

    def clear(self) -> None:
        """Overwrite the key bytes with zeros."""
        self.key[:] = bytes(len(self.key))

    def _encrypt(self, plaintext: bytes) -> bytes:
        cipher = self.cipher()
        try:
            return encrypt_seipd(cipher, bytes(self.key), plaintext)
        except PacketError as exc:
            raise SessionKeyError(f"unable to encrypt: {exc}") from exc

    def encrypt(self, message: LiteralData) -> bytes:
        """Encrypt ``message`` into a data packet."""
        return self._encrypt(serialize_literal(message))

    def encrypt_with_compression(self, message: LiteralData) -> bytes:
        """Compress ``message`` with ZLIB and encrypt it into a data packet."""
        return self._encrypt(compress(serialize_literal(message)))

    def decrypt(self, data_packet: bytes) -> LiteralData:
        """Decrypt a data packet and return the literal data it holds."""
        try:
            packets = parse_packets(data_packet)
        except PacketError as exc:
            raise SessionKeyError(f"unable to read symmetric packet: {exc}") from exc
        if not packets:
            raise SessionKeyError("unable to read symmetric packet: no packet found")
        if packets[0].tag != TAG_SEIPD:
            raise SessionKeyError("invalid packet type")
        cipher = self.cipher()
        try:
            plaintext = decrypt_seipd(cipher, bytes(self.key), packets[0].body)
        except PacketError as exc:
            raise SessionKeyError(f"unable to decrypt symmetric packet: {exc}") from exc
        try:
            return _read_literal(plaintext)
        except PacketError as exc:
            raise SessionKeyError(f"unable to decode symmetric packet: {exc}") from exc


def _read_literal(data: bytes) -> LiteralData:
    for packet in parse_packets(data):
        if packet.tag == TAG_COMPRESSED:
            return _read_literal(decompress(packet.body))
        if packet.tag == TAG_LITERAL:
            return parse_literal(packet.body)
        if packet.tag not in _SKIPPED_TAGS:
            raise PacketError(f"unexpected packet tag: {packet.tag}")
    raise PacketError("no literal data packet")


def random_token(size: int) -> bytes:
    """Return ``size`` cryptographically random bytes."""
    return secrets.token_bytes(size)


def generate_session_key_algo(algo: str) -> SessionKey:
    """Generate a random key of the right length for ``algo``."""
    cipher = _SYMMETRIC_ALGOS.get(algo)
    if cipher is None:
        raise SessionKeyError("unknown symmetric key generation algorithm")
    return SessionKey(random_token(cipher.key_size()), algo)


def generate_session_key() -> SessionKey:
    """Generate a random AES-256 session key."""
    return generate_session_key_algo(AES256)


def session_key_from_token(token: bytes, algo: str) -> SessionKey:
    """Build a session key holding a copy of ``token``."""
    return SessionKey(bytearray(token), algo)


def algo_for_cipher(cipher) -> str:
    """Return the algorithm name for ``cipher``, defaulting to AES-256."""
    for name, candidate in _SYMMETRIC_ALGOS.items():
        if candidate == cipher:
            return name
    return AES256