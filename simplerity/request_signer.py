"""
HMAC request signing for the Simplerity API.

Every request body carries a ``signature`` field computed over the other
form fields with the installation's API secret. The server recomputes the
same value to authenticate the request, so the canonical form below must
match it exactly:

1. sort the keys by ordinal order
2. concatenate ``key + value`` for each key, with no separators
3. HMAC-SHA256 with the API secret, lowercase hex digest
"""

import hashlib
import hmac
from typing import Any, Mapping

SIGNATURE_FIELD = "signature"

# Integral floats at or above this magnitude are rendered in exponent form
FLOAT_EXPONENT_THRESHOLD = 1e21


def format_value(value: Any) -> str:
    """
    Render a scalar payload value the way the server stringifies it.

    Floats use the shortest round-trip digits. Integral floats below 1e21
    are written without a fraction or exponent (``2.0`` -> ``2``); larger
    magnitudes and very small values use exponent form (``1e+21``,
    ``1e-05``). Callers needing another rendering should send a string.

    Args:
        value: String, integer, float, boolean or None

    Returns:
        String form used both in the signature and in the form body
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < FLOAT_EXPONENT_THRESHOLD:
        return str(int(value))
    return str(value)


def canonicalize(payload: Mapping[str, Any]) -> str:
    """Build the string that gets signed."""
    return "".join(f"{key}{format_value(payload[key])}" for key in sorted(payload))


def sign_payload(payload: Mapping[str, Any], secret: str) -> str:
    """
    Sign a request payload using HMAC-SHA256.

    Args:
        payload: Form fields to sign (without the signature field)
        secret: API secret from the agent registration

    Returns:
        Hex-encoded HMAC-SHA256 signature
    """
    return hmac.new(
        secret.encode("utf-8"),
        canonicalize(payload).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


class RequestSigner:
    """
    HMAC-SHA256 signer bound to one API secret.

    Attributes:
        secret: API secret from the agent registration
    """

    def __init__(self, secret: str):
        self._secret = secret

    def sign(self, payload: Mapping[str, Any]) -> str:
        return sign_payload(payload, self._secret)

    def signed(self, payload: Mapping[str, Any]) -> dict:
        """
        Return a copy of the payload with its signature added.

        The signature is computed over the payload as given, before the
        signature field is inserted.
        """
        result = dict(payload)
        result[SIGNATURE_FIELD] = self.sign(payload)
        return result

    def verify(self, payload: Mapping[str, Any], signature: str) -> bool:
        """
        Verify a signature against a payload.

        Args:
            payload: Form fields that were signed
            signature: Hex-encoded signature to verify

        Returns:
            True if signature is valid
        """
        expected = self.sign(payload)
        return hmac.compare_digest(expected, signature)
