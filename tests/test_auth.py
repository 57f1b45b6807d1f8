from __future__ import annotations

import base64
import hashlib
import hmac
import json

from abillio import auth


def test_request_path_wraps_endpoint_in_version_prefix():
    assert auth.request_path("services") == "/v1/services/"
    assert auth.request_path("freelancers/123") == "/v1/freelancers/123/"


def test_envelope_key_order_is_payload_then_request_then_nonce():
    envelope = auth.build_envelope({"b": 1, "a": 2}, "/v1/services/", 1700000000000)
    assert list(envelope) == ["b", "a", "request", "nonce"]
    assert auth.serialize_envelope(envelope) == '{"b":1,"a":2,"request":"/v1/services/","nonce":1700000000000}'


def test_envelope_overrides_reserved_keys_in_place():
    envelope = auth.build_envelope({"nonce": "x", "name": "n", "request": "y"}, "/v1/a/", 5)
    assert list(envelope) == ["nonce", "name", "request"]
    assert envelope["nonce"] == 5
    assert envelope["request"] == "/v1/a/"


def test_envelope_does_not_mutate_caller_payload():
    payload = {"email": "a@b.c"}
    auth.build_envelope(payload, "/v1/a/", 1)
    assert payload == {"email": "a@b.c"}


def test_non_ascii_is_encoded_as_utf8():
    encoded = auth.encode_payload(auth.serialize_envelope({"name": "Jānis"}))
    assert base64.b64decode(encoded).decode("utf-8") == '{"name":"Jānis"}'


def test_signed_headers_signature_covers_exact_payload_header():
    headers = auth.signed_headers("key", "secret", "services", {"lang": "en"}, nonce=42)

    assert headers[auth.HEADER_KEY] == "key"
    expected = hmac.new(b"secret", headers[auth.HEADER_PAYLOAD].encode(), hashlib.sha256).hexdigest()
    assert headers[auth.HEADER_SIGNATURE] == expected
    assert auth.verify_signature("secret", headers[auth.HEADER_PAYLOAD], headers[auth.HEADER_SIGNATURE])
    assert not auth.verify_signature("other", headers[auth.HEADER_PAYLOAD], headers[auth.HEADER_SIGNATURE])


def test_signed_headers_payload_round_trip():
    headers = auth.signed_headers("key", "secret", "freelancers/7", {"email": "a@b.c"}, nonce=99)
    decoded = json.loads(base64.b64decode(headers[auth.HEADER_PAYLOAD]))
    assert decoded == {"email": "a@b.c", "request": "/v1/freelancers/7/", "nonce": 99}
    assert auth.decode_payload(headers[auth.HEADER_PAYLOAD]) == decoded


def test_secret_is_never_placed_in_headers():
    headers = auth.signed_headers("key", "super-secret", "services")
    assert all("super-secret" not in value for value in headers.values())


def test_known_signature_vector():
    # fixed inputs so any serialization drift shows up as a signature change
    headers = auth.signed_headers("k", "s", "services", {}, nonce=1)
    assert headers[auth.HEADER_PAYLOAD] == base64.b64encode(
        b'{"request":"/v1/services/","nonce":1}'
    ).decode()
    assert headers[auth.HEADER_SIGNATURE] == hmac.new(
        b"s", headers[auth.HEADER_PAYLOAD].encode(), hashlib.sha256
    ).hexdigest()


def test_current_nonce_is_epoch_millis(monkeypatch):
    monkeypatch.setattr(auth.time, "time", lambda: 1700000000.1234)
    assert auth.current_nonce() == 1700000000123
