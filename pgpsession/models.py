"""Plain data containers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EncryptedSigned:
    """An armored encrypted message together with its armored signature."""

    encrypted: str
    signature: str