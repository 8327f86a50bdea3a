"""Text canonicalisation and OpenPGP ASCII armor."""

from __future__ import annotations

import base64
import binascii
import textwrap
from dataclasses import dataclass, field

_LINE_LENGTH = 64
_CRC24_INIT = 0xB704CE
_CRC24_POLY = 0x1864CFB
_BEGIN = "-----BEGIN "
_END = "-----END "
_DASHES = "-----"


class ArmorError(ValueError):
    """Raised when armored text cannot be decoded."""


@dataclass
class ArmorBlock:
    """A decoded armored block."""

    type: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)


def canonicalize_and_trim(text: str) -> str:
    """Strip trailing spaces, tabs and CRs from each line and join with CRLF."""
    return "\r\n".join(line.rstrip(" \t\r") for line in text.split("\n"))


def _crc24(data: bytes) -> int:
    crc = _CRC24_INIT
    for byte in data:
        crc ^= byte << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= _CRC24_POLY
    return crc & 0xFFFFFF


def _encode_crc(data: bytes) -> str:
    return base64.b64encode(_crc24(data).to_bytes(3, "big")).decode("ascii")


def armor(data: bytes, block_type: str, headers: dict[str, str] | None = None) -> str:
    """Encode ``data`` as an armored block of ``block_type`` (e.g. ``PGP MESSAGE``)."""
    data = bytes(data)
    lines = [f"{_BEGIN}{block_type}{_DASHES}"]
    lines.extend(f"{key}: {value}" for key, value in (headers or {}).items())
    lines.append("")
    lines.extend(textwrap.wrap(base64.b64encode(data).decode("ascii"), _LINE_LENGTH))
    lines.append("=" + _encode_crc(data))
    lines.append(f"{_END}{block_type}{_DASHES}")
    return "\n".join(lines)


def unarmor(text: str) -> ArmorBlock:
    """Decode the first armored block found in ``text``."""
    lines = (line.rstrip() for line in text.splitlines())

    for line in lines:
        if line.startswith(_BEGIN) and line.endswith(_DASHES):
            block_type = line[len(_BEGIN):-len(_DASHES)]
            break
    else:
        raise ArmorError("unable to unarmor: no armored block found")

    headers: dict[str, str] = {}
    body_lines: list[str] = []
    checksum: str | None = None
    in_headers = True
    for line in lines:
        if line.startswith(_END):
            if line != f"{_END}{block_type}{_DASHES}":
                raise ArmorError("unable to unarmor: mismatched armor end line")
            break
        if in_headers:
            if not line:
                in_headers = False
                continue
            key, sep, value = line.partition(": ")
            if sep:
                headers[key] = value
                continue
            in_headers = False
        if not line:
            continue
        if line.startswith("="):
            checksum = line[1:]
            continue
        body_lines.append(line)
    else:
        raise ArmorError("unable to unarmor: missing armor end line")

    try:
        body = base64.b64decode("".join(body_lines), validate=True)
    except binascii.Error as exc:
        raise ArmorError("unable to unarmor: invalid base64 body") from exc

    if checksum is not None:
        try:
            expected = int.from_bytes(base64.b64decode(checksum, validate=True), "big")
        except binascii.Error as exc:
            raise ArmorError("unable to unarmor: invalid checksum") from exc
        if expected != _crc24(body):
            raise ArmorError("unable to unarmor: checksum mismatch")

    return ArmorBlock(type=block_type, body=body, headers=headers)