"""
Unit tests for request signing.
"""

import hashlib
import hmac

from simplerity.request_signer import (
    RequestSigner,
    canonicalize,
    format_value,
    sign_payload,
)


class TestCanonicalize:
    """Tests for the string that gets signed."""

    def test_keys_sorted_without_separators(self):
        payload = {"scope": "basic", "client_id": "1", "grant_type": "password"}
        assert canonicalize(payload) == "client_id1grant_typepasswordscopebasic"

    def test_ordinal_order_puts_uppercase_first(self):
        payload = {"pcName": "demo", "password": "p", "Zeta": "z"}
        assert canonicalize(payload) == "ZetazpasswordppcNamedemo"

    def test_scalar_formatting(self):
        assert format_value("abc") == "abc"
        assert format_value(3600) == "3600"
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(2.0) == "2"
        assert format_value(2.5) == "2.5"
        assert format_value(1e16) == "10000000000000000"
        assert format_value(1e21) == "1e+21"
        assert format_value(0.00001) == "1e-05"
        assert format_value(None) == ""


class TestSignPayload:
    """Tests for sign_payload."""

    def test_matches_reference_hmac(self):
        payload = {"b": "2", "a": "1"}
        expected = hmac.new(b"secret", b"a1b2", hashlib.sha256).hexdigest()
        assert sign_payload(payload, "secret") == expected

    def test_produces_lowercase_hex(self):
        signature = sign_payload({"agentId": "42"}, "s")
        assert len(signature) == 64
        assert all(c in "0123456789abcdef" for c in signature)

    def test_is_deterministic(self):
        payload = {"agentId": "42", "group_name": "ua,office-10"}
        assert sign_payload(payload, "s") == sign_payload(payload, "s")

    def test_independent_of_insertion_order(self):
        first = {"username": "u", "password": "p", "scope": "basic"}
        second = {"scope": "basic", "password": "p", "username": "u"}
        assert sign_payload(first, "s") == sign_payload(second, "s")

    def test_different_value_different_signature(self):
        assert sign_payload({"agentId": "42"}, "s") != sign_payload({"agentId": "43"}, "s")

    def test_different_key_different_signature(self):
        assert sign_payload({"agentId": "42"}, "s") != sign_payload({"agentID": "42"}, "s")

    def test_different_secret_different_signature(self):
        assert sign_payload({"agentId": "42"}, "s1") != sign_payload({"agentId": "42"}, "s2")

    def test_empty_payload(self):
        expected = hmac.new(b"s", b"", hashlib.sha256).hexdigest()
        assert sign_payload({}, "s") == expected

    def test_non_ascii_values_signed_as_utf8(self):
        expected = hmac.new(b"s", "titlebüro".encode("utf-8"), hashlib.sha256).hexdigest()
        assert sign_payload({"title": "büro"}, "s") == expected


class TestRequestSigner:
    """Tests for RequestSigner."""

    def test_signed_adds_signature_over_original_fields(self):
        signer = RequestSigner("s")
        payload = {"build_version": "1.0", "config": "mid"}

        signed = signer.signed(payload)

        assert signed["signature"] == sign_payload(payload, "s")
        assert "signature" not in payload

    def test_verify_accepts_valid_signature(self):
        signer = RequestSigner("s")
        payload = {"agentId": "42"}
        assert signer.verify(payload, signer.sign(payload))

    def test_verify_rejects_tampered_payload(self):
        signer = RequestSigner("s")
        signature = signer.sign({"agentId": "42"})
        assert not signer.verify({"agentId": "43"}, signature)
