# pgpsession

A small library for symmetric OpenPGP work:

- generate session keys for 3DES, CAST5 and AES-128/192/256 and use them to
  encrypt or decrypt integrity-protected data packets, with or without ZLIB
  compression;
- encrypt whole messages, or single session keys, under a password;
- write and read data packets through writer and reader objects that keep the
  literal-data metadata (binary flag, file name, modification time);
- ASCII armor and text canonicalisation;
- a process-wide clock that follows the latest time a server reported;
- chunked reader and writer adapters, including one that tracks SHA-256;
- raw AES-CTR and scrypt helpers.

## Installation

```
pip install pgpsession
```

To run the test suite:

```
pip install "pgpsession[test]"
pytest
```

## Messages

Plaintext is carried as `pgpsession.packets.LiteralData`:

```python
from pgpsession.packets import LiteralData

message = LiteralData(b"hello", is_binary=False, filename="note.txt", time=0)
```

## Session keys

```python
from pgpsession.sessionkey import generate_session_key

session_key = generate_session_key()        # AES-256
data_packet = session_key.encrypt(message)
plain = session_key.decrypt(data_packet)    # a LiteralData
```

- `generate_session_key_algo(algo)` takes one of `"3des"`, `"tripledes"`,
  `"cast5"`, `"aes128"`, `"aes192"`, `"aes256"`.
- `SessionKey.encrypt_with_compression(message)` compresses with ZLIB first;
  `decrypt` handles both forms.
- `random_token(size)` returns random bytes; `session_key_from_token(token, algo)`
  wraps existing key material.
- `SessionKey.cipher()`, `base64_key()`, `check_size()` and `clear()` (which
  zeroes the key bytes). Problems raise `SessionKeyError`.

## Passwords

```python
from pgpsession.password import (
    decrypt_message_with_password,
    encrypt_message_with_password,
)

password = b"password"
encrypted = encrypt_message_with_password(message, password)
decrypted = decrypt_message_with_password(encrypted, password)
```

Messages are encrypted with AES-256 under an iterated, salted SHA-256 S2K.
A wrong password or a malformed message raises `PasswordError`.
`encrypt_session_key_with_password` and `decrypt_session_key_with_password`
do the same for a single session key packet; an empty password is refused.

## Writer and reader

```python
from pgpsession.streaming import PlainMessageMetadata, decrypt_stream, encrypt_stream

with encrypt_stream(session_key, output, PlainMessageMetadata(True, "data.bin", 0)) as writer:
    writer.write(chunk)

reader = decrypt_stream(session_key, source)
data = reader.read(-1)
print(reader.metadata())
```

The writer collects the plaintext in memory and writes the encrypted data
packet to `output` when it is closed; `decrypt_stream` reads the whole packet
from `source` before decrypting. Without metadata, `encrypt_stream` marks the
data binary, unnamed and stamped with `clock.get_unix_time()`.

## Other modules

- `pgpsession.packets`: packet framing (`serialize_packet`, `parse_packets`),
  literal data, compression, `encrypt_seipd` / `decrypt_seipd`,
  `serialize_skesk` / `decrypt_skesk`, and `CipherAlgorithm`. Errors raise
  `PacketError`.
- `pgpsession.text`: `canonicalize_and_trim`, `armor`, `unarmor` (returns an
  `ArmorBlock`, checks the CRC-24; raises `ArmorError`).
- `pgpsession.clock`: `update_time`, `get_unix_time`, `get_time`,
  `set_key_generation_offset`, `key_generation_time`.
- `pgpsession.errors`: `SignatureVerificationError`, `SignatureStatus` and
  constructors for the standard failures.
- `pgpsession.models`: `EncryptedSigned`, a pair of armored strings.
- `pgpsession.mobile_stream`: `MobileWriter`, `MobileWriterWithSHA256`,
  `MobileReader`, `AndroidReader`, `IOSReader` and `MobileReadResult`.
- `pgpsession.subtle`: `encrypt_without_integrity` / `decrypt_without_integrity`
  (AES-CTR, no authentication) and `derive_key` (scrypt, r=8, p=1, 32 bytes).

## What it does not do

There are no public or private keys here: no key generation, key rings,
public-key encryption of session keys, signing or signature verification.
Signature packets inside decrypted data are skipped, not checked; the
signature error types are provided for callers who verify elsewhere. There is
no MIME handling and no command-line tool.