import hashlib
import hmac

import pytest

from stratguru.billing.signatures import compute_signature, verify_signature
from stratguru.errors import AuthenticationError, ClientRequestError, ConfigurationError

BODY = b'{"event":"charge.success","data":{"customer":{"customer_code":"CUS_abc"}}}'


def test_compute_signature_is_lowercase_hex_sha512():
    """Signature matches a plain HMAC-SHA512 hexdigest"""
    expected = hmac.new(b"secret", BODY, hashlib.sha512).hexdigest()

    signature = compute_signature(BODY, "secret")

    assert signature == expected
    assert len(signature) == 128
    assert signature == signature.lower()


@pytest.mark.parametrize("body", [b"", b"{}", BODY, "ünïcode".encode()])
def test_verify_accepts_signature_made_with_same_secret(body):
    verify_signature(body, compute_signature(body, "secret"), "secret")


def test_verify_rejects_signature_made_with_other_secret():
    with pytest.raises(AuthenticationError):
        verify_signature(BODY, compute_signature(BODY, "other-secret"), "secret")


def test_single_byte_change_invalidates_signature():
    """Flipping any one byte of the body breaks a valid signature"""
    signature = compute_signature(BODY, "secret")

    for i in range(len(BODY)):
        tampered = bytearray(BODY)
        tampered[i] ^= 0x01
        with pytest.raises(AuthenticationError):
            verify_signature(bytes(tampered), signature, "secret")


def test_signature_is_over_raw_bytes_not_reserialized_json():
    """Whitespace differences matter; the body is never re-serialized"""
    compact = b'{"a":1}'
    spaced = b'{"a": 1}'

    with pytest.raises(AuthenticationError):
        verify_signature(spaced, compute_signature(compact, "secret"), "secret")


def test_uppercase_signature_is_rejected():
    signature = compute_signature(BODY, "secret").upper()

    with pytest.raises(AuthenticationError):
        verify_signature(BODY, signature, "secret")


@pytest.mark.parametrize("signature", [None, ""])
def test_missing_signature_is_client_error(signature):
    with pytest.raises(ClientRequestError):
        verify_signature(BODY, signature, "secret")


@pytest.mark.parametrize("secret", [None, ""])
def test_missing_secret_fails_closed(secret):
    """Missing configuration is a server error, even without a signature"""
    with pytest.raises(ConfigurationError):
        verify_signature(BODY, None, secret)
