"""Password-based encryption of messages and session keys."""

from __future__ import annotations

from .packets import (
    TAG_COMPRESSED,
    TAG_LITERAL,
    TAG_MARKER,
    TAG_ONE_PASS_SIGNATURE,
    TAG_SEIPD,
    TAG_SIGNATURE,
    TAG_SKESK,
    CipherAlgorithm,
    LiteralData,
    PacketError,
    decompress,
    decrypt_seipd,
    decrypt_skesk,
    encrypt_seipd,
    parse_literal,
    parse_packets,
    serialize_literal,
    serialize_skesk,
)
from .sessionkey import SessionKey, SessionKeyError, algo_for_cipher, random_token

_MESSAGE_CIPHER = CipherAlgorithm.AES256
_SKIPPED_TAGS = frozenset({TAG_ONE_PASS_SIGNATURE, TAG_SIGNATURE, TAG_MARKER})
_MALFORMED = "error in reading password protected message: wrong password or malformed message"
_SYMMETRIC_DECRYPTION_FAILED = "wrong password in symmetric decryption"


class PasswordError(ValueError):
    """Raised when password-based encryption or decryption fails."""


def _password_bytes(password) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    return bytes(password)


def encrypt_message_with_password(message: LiteralData, password) -> bytes:
    """Encrypt ``message`` with AES-256 under a key derived from ``password``."""
    session_key = random_token(_MESSAGE_CIPHER.key_size())
    try:
        key_packet = serialize_skesk(_MESSAGE_CIPHER, session_key, _password_bytes(password))
        data_packet = encrypt_seipd(_MESSAGE_CIPHER, session_key, serialize_literal(message))
    except PacketError as exc:
        raise PasswordError(f"error in encrypting message symmetrically: {exc}") from exc
    return key_packet + data_packet


def _read_literal(data: bytes) -> LiteralData:
    for packet in parse_packets(data):
        if packet.tag == TAG_COMPRESSED:
            return _read_literal(decompress(packet.body))
        if packet.tag == TAG_LITERAL:
            return parse_literal(packet.body)
        if packet.tag not in _SKIPPED_TAGS:
            raise PacketError(f"unexpected packet tag: {packet.tag}")
    raise PacketError("no literal data packet")


def decrypt_message_with_password(data: bytes, password) -> LiteralData:
    """Decrypt a password protected message and return its literal data."""
    try:
        packets = parse_packets(data)
    except PacketError as exc:
        raise PasswordError(_MALFORMED) from exc

    password_bytes = _password_bytes(password)
    session = None
    data_body = None
    for packet in packets:
        if packet.tag == TAG_SKESK:
            if session is not None:
                continue
            try:
                session = decrypt_skesk(packet.body, password_bytes)
            except PacketError as exc:
                raise PasswordError(_MALFORMED) from exc
        elif packet.tag == TAG_SEIPD:
            data_body = packet.body
            break
        elif packet.tag != TAG_MARKER:
            raise PasswordError(_MALFORMED)

    if session is None or data_body is None:
        raise PasswordError(_MALFORMED)

    cipher, key = session
    try:
        plaintext = decrypt_seipd(cipher, key, data_body)
    except PacketError as exc:
        if "MDC" in str(exc):
            raise PasswordError(_SYMMETRIC_DECRYPTION_FAILED) from exc
        raise PasswordError(_MALFORMED) from exc

    try:
        return _read_literal(plaintext)
    except PacketError as exc:
        raise PasswordError(_MALFORMED) from exc


def encrypt_session_key_with_password(session_key: SessionKey, password) -> bytes:
    """Encrypt ``session_key`` under ``password`` as a symmetric-key session key packet."""
    try:
        cipher = session_key.cipher()
    except SessionKeyError as exc:
        raise PasswordError(f"unable to encrypt session key with password: {exc}") from exc

    if password is None or len(password) == 0:
        raise PasswordError("password can't be empty")

    try:
        session_key.check_size()
    except SessionKeyError as exc:
        raise PasswordError(f"unable to encrypt session key with password: {exc}") from exc

    try:
        return serialize_skesk(cipher, bytes(session_key.key), _password_bytes(password))
    except PacketError as exc:
        raise PasswordError(f"unable to encrypt session key with password: {exc}") from exc


def decrypt_session_key_with_password(key_packet: bytes, password) -> SessionKey:
    """Recover a session key from symmetric-key session key packets using ``password``."""
    try:
        packets = parse_packets(key_packet)
    except PacketError:
        packets = []

    key_packets = [packet for packet in packets if packet.tag == TAG_SKESK]
    if key_packets and password is not None:
        password_bytes = _password_bytes(password)
        for packet in key_packets:
            try:
                cipher, key = decrypt_skesk(packet.body, password_bytes)
            except PacketError:
                continue
            session_key = SessionKey(bytearray(key), algo_for_cipher(cipher))
            try:
                session_key.check_size()
            except SessionKeyError as exc:
                raise PasswordError(f"unable to decrypt session key with password: {exc}") from exc
            return session_key

    raise PasswordError("unable to decrypt any packet")