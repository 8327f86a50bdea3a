import base64

import pytest

from pgpsession.packets import CipherAlgorithm, LiteralData, serialize_literal
from pgpsession.sessionkey import (
    SessionKey,
    SessionKeyError,
    algo_for_cipher,
    generate_session_key,
    generate_session_key_algo,
    random_token,
    session_key_from_token,
)

TEST_TIME = 1557754627
SECRET_TEXT = "The secret code is... 1, 2, 3, 4, 5. I repeat: the secret code is... 1, 2, 3, 4, 5"


@pytest.fixture
def session_key():
    return generate_session_key()


@pytest.fixture
def message():
    return LiteralData(SECRET_TEXT.encode(), is_binary=False, time=TEST_TIME)


def test_random_token():
    assert len(random_token(40)) == 40


def test_generate_session_key(session_key):
    assert len(session_key.key) == 32
    assert session_key.algo == "aes256"


def test_generate_session_key_algo():
    sk = generate_session_key_algo("aes128")
    assert len(sk.key) == CipherAlgorithm.AES128.key_size()
    assert sk.cipher() is CipherAlgorithm.AES128


def test_generate_unknown_algo():
    with pytest.raises(SessionKeyError, match="unknown symmetric key generation algorithm"):
        generate_session_key_algo("rot13")


def test_data_packet_encryption(session_key, message):
    data_packet = session_key.encrypt(message)
    assert len(data_packet) == 133

    wrong_key = SessionKey(b"wrong pass", "aes256")
    with pytest.raises(SessionKeyError):
        wrong_key.decrypt(data_packet)

    decrypted = session_key.decrypt(data_packet)
    assert decrypted.data.decode() == SECRET_TEXT
    assert decrypted == message


def test_decrypt_with_other_key_of_right_size(session_key, message):
    data_packet = session_key.encrypt(message)
    with pytest.raises(SessionKeyError):
        generate_session_key().decrypt(data_packet)


def test_data_packet_encryption_with_compression(session_key, message):
    data_packet = session_key.encrypt_with_compression(message)
    assert len(data_packet) < len(session_key.encrypt(message))
    assert session_key.decrypt(data_packet).data.decode() == SECRET_TEXT


def test_metadata_round_trip(session_key):
    message = LiteralData(b"\x00\x01binary", is_binary=True, filename="file.bin", time=TEST_TIME)
    assert session_key.decrypt(session_key.encrypt(message)) == message


def test_session_key_clear(session_key):
    session_key.clear()
    assert session_key.key == bytearray(32)


def test_decrypt_invalid_packet_type(session_key):
    with pytest.raises(SessionKeyError, match="invalid packet type"):
        session_key.decrypt(serialize_literal(LiteralData(b"plain")))


def test_decrypt_garbage(session_key):
    with pytest.raises(SessionKeyError):
        session_key.decrypt(b"\x01\x02\x03")


def test_unsupported_algo(message):
    sk = SessionKey(bytes(32), "rot13")
    with pytest.raises(SessionKeyError, match="unsupported cipher function: rot13"):
        sk.encrypt(message)
    with pytest.raises(SessionKeyError, match="unsupported cipher function"):
        sk.cipher()


def test_check_size():
    with pytest.raises(SessionKeyError, match="wrong session key size"):
        SessionKey(random_token(32), "aes128").check_size()
    with pytest.raises(SessionKeyError, match="unknown symmetric key algorithm"):
        SessionKey(random_token(32), "rot13").check_size()
    sk = SessionKey(random_token(16), "aes128")
    sk.check_size()
    assert sk.cipher() is CipherAlgorithm.AES128


def test_triple_des_names():
    assert SessionKey(bytes(24), "3des").cipher() is CipherAlgorithm.TRIPLE_DES
    assert SessionKey(bytes(24), "tripledes").cipher() is CipherAlgorithm.TRIPLE_DES


def test_triple_des_round_trip(message):
    sk = generate_session_key_algo("3des")
    assert sk.decrypt(sk.encrypt(message)) == message


def test_base64_key():
    token = random_token(32)
    sk = session_key_from_token(token, "aes256")
    assert base64.b64decode(sk.base64_key()) == token


def test_session_key_from_token_copies():
    token = bytearray(random_token(16))
    sk = session_key_from_token(token, "aes128")
    original = bytes(token)
    token[0] ^= 0xFF
    assert bytes(sk.key) == original


def test_session_key_equality():
    token = random_token(32)
    assert SessionKey(token, "aes256") == session_key_from_token(token, "aes256")


def test_algo_for_cipher():
    assert algo_for_cipher(CipherAlgorithm.AES128) == "aes128"
    assert algo_for_cipher(CipherAlgorithm.AES192) == "aes192"
    assert algo_for_cipher(CipherAlgorithm.CAST5) == "cast5"
    assert algo_for_cipher(42) == "aes256"