import hashlib
import hmac
from typing import Optional

from stratguru.errors import AuthenticationError, ClientRequestError, ConfigurationError


def compute_signature(payload: bytes, secret: str) -> str:
    """Lowercase hex HMAC-SHA512 of the raw request body."""
    return hmac.new(
        secret.encode(),
        payload,
        hashlib.sha512
    ).hexdigest()


def verify_signature(payload: bytes, signature: Optional[str], secret: Optional[str]) -> None:
    """
    Authenticate a webhook body against the provider's signature header.

    The signature must be computed over the exact bytes received, never over
    a re-serialized parse of them.

    Raises:
        ConfigurationError: the shared secret is not configured.
        ClientRequestError: no signature was supplied.
        AuthenticationError: the signature does not match.
    """
    if not secret:
        raise ConfigurationError("Webhook signing secret not configured")

    if not signature:
        raise ClientRequestError("No signature provided")

    computed = compute_signature(payload, secret)
    if not hmac.compare_digest(computed.encode(), signature.encode()):
        raise AuthenticationError("Invalid signature")
