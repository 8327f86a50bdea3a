import pytest

from pgpsession.errors import (
    SignatureStatus,
    SignatureVerificationError,
    signature_failed,
    signature_insecure,
    signature_no_verifier,
    signature_not_signed,
)


def test_failed_message_and_status():
    err = signature_failed()
    assert str(err) == "Signature Verification Error: Invalid signature"
    assert err.status is SignatureStatus.FAILED


def test_insecure_shares_failed_status():
    err = signature_insecure()
    assert err.message == "Insecure signature"
    assert err.status is SignatureStatus.FAILED


def test_not_signed():
    err = signature_not_signed()
    assert err.status is SignatureStatus.NOT_SIGNED
    assert str(err) == "Signature Verification Error: Missing signature"


def test_no_verifier():
    err = signature_no_verifier()
    assert err.status is SignatureStatus.NO_VERIFIER
    assert err.message == "No matching signature"


def test_error_can_be_raised_and_caught():
    err = signature_no_verifier()
    assert str(err) == "Signature Verification Error: No matching signature"
    with pytest.raises(SignatureVerificationError, match="No matching signature") as info:
        raise err
    assert info.value is err
    assert info.value.status is SignatureStatus.NO_VERIFIER


def test_status_is_coerced_to_enum():
    err = SignatureVerificationError(int(SignatureStatus.NOT_SIGNED), "custom")
    assert err.status is SignatureStatus.NOT_SIGNED
    assert str(err) == "Signature Verification Error: custom"


def test_statuses_are_distinct():
    statuses = {
        signature_failed().status,
        signature_not_signed().status,
        signature_no_verifier().status,
    }
    assert len(statuses) == 3
    assert SignatureStatus.OK not in statuses