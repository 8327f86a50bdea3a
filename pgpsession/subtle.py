"""Primitives without integrity protection: AES-CTR and scrypt key derivation."""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

_SCRYPT_R = 8
_SCRYPT_P = 1
_DERIVED_KEY_LENGTH = 32


def encrypt_without_integrity(key: bytes, data: bytes, iv: bytes) -> bytes:
    """Encrypt ``data`` with AES-CTR.

    The output carries no authentication tag, so it must not be stored or
    sent over an untrusted medium.
    """
    encryptor = Cipher(algorithms.AES(bytes(key)), modes.CTR(bytes(iv))).encryptor()
    return encryptor.update(bytes(data)) + encryptor.finalize()


def decrypt_without_integrity(key: bytes, data: bytes, iv: bytes) -> bytes:
    """Decrypt data produced by :func:`encrypt_without_integrity`."""
    # CTR mode is symmetric: decryption is the same keystream XOR.
    return encrypt_without_integrity(key, data, iv)


def derive_key(password: str, salt: bytes, n: int) -> bytes:
    """Derive a 32-byte key from ``password`` with scrypt (r=8, p=1).

    ``n`` should be the highest power of two that can be computed within
    about 100 milliseconds.
    """
    kdf = Scrypt(salt=bytes(salt), length=_DERIVED_KEY_LENGTH, n=n, r=_SCRYPT_R, p=_SCRYPT_P)
    return kdf.derive(password.encode("utf-8"))