import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Mapping, Optional

HEADER_KEY = "X-ABILLIO-KEY"
HEADER_PAYLOAD = "X-ABILLIO-PAYLOAD"
HEADER_SIGNATURE = "X-ABILLIO-SIGNATURE"


def request_path(endpoint: str) -> str:
    return f"/v1/{endpoint}/"


def current_nonce() -> int:
    return int(time.time() * 1000)


def build_envelope(payload: Optional[Mapping[str, Any]], path: str, nonce: int) -> Dict[str, Any]:
    """Payload keys first, then `request`, then `nonce`.

    A payload key named `request` or `nonce` keeps its position but takes the synthesized value.
    """
    return {**(payload or {}), "request": path, "nonce": nonce}


def serialize_envelope(envelope: Mapping[str, Any]) -> str:
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def encode_payload(serialized: str) -> str:
    return base64.b64encode(serialized.encode("utf-8")).decode("ascii")


def decode_payload(encoded_payload: str) -> Dict[str, Any]:
    return json.loads(base64.b64decode(encoded_payload).decode("utf-8"))


def sign(secret: str, encoded_payload: str) -> str:
    return hmac.new(secret.encode("utf-8"), encoded_payload.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(secret: str, encoded_payload: str, signature: str) -> bool:
    return hmac.compare_digest(sign(secret, encoded_payload), signature or "")


def signed_headers(
    api_key: str,
    api_secret: str,
    endpoint: str,
    payload: Optional[Mapping[str, Any]] = None,
    nonce: Optional[int] = None,
) -> Dict[str, str]:
    envelope = build_envelope(payload, request_path(endpoint), current_nonce() if nonce is None else nonce)
    # the signature must cover the exact header value, so serialize once
    encoded = encode_payload(serialize_envelope(envelope))
    return {
        HEADER_KEY: api_key,
        HEADER_PAYLOAD: encoded,
        HEADER_SIGNATURE: sign(api_secret, encoded),
    }
