"""Signature verification errors."""

from __future__ import annotations

import enum


class SignatureStatus(enum.IntEnum):
    """Outcome of a signature verification."""

    OK = 0
    NOT_SIGNED = 1
    NO_VERIFIER = 2
    FAILED = 3


class SignatureVerificationError(Exception):
    """Raised when a signature cannot be verified."""

    def __init__(self, status: SignatureStatus, message: str) -> None:
        super().__init__(f"Signature Verification Error: {message}")
        self.status = SignatureStatus(status)
        self.message = message


def signature_failed() -> SignatureVerificationError:
    """The signature does not match the data."""
    return SignatureVerificationError(SignatureStatus.FAILED, "Invalid signature")


def signature_insecure() -> SignatureVerificationError:
    """The signature uses a hash that is not accepted."""
    return SignatureVerificationError(SignatureStatus.FAILED, "Insecure signature")


def signature_not_signed() -> SignatureVerificationError:
    """The data carries no signature."""
    return SignatureVerificationError(SignatureStatus.NOT_SIGNED, "Missing signature")


def signature_no_verifier() -> SignatureVerificationError:
    """No key in the verification key ring made the signature."""
    return SignatureVerificationError(SignatureStatus.NO_VERIFIER, "No matching signature")