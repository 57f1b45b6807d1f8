"""
Lambda handlers for the Abillio API proxy
Same routes as main.py, exposed through API Gateway
"""

import base64
import json
from typing import Any, Dict, Optional

from abillio.api import AbillioClient, get_client, normalize_endpoint
from abillio.errors import AbillioError, UpstreamError


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,Authorization',
    'Access-Control-Allow-Methods': 'GET,POST,OPTIONS',
}


def create_response(status_code: int, body: Any) -> Dict[str, Any]:
    """API Gateway proxy response; non-ASCII kept as UTF-8, like JSONResponse in main.py"""
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json; charset=utf-8', **CORS_HEADERS},
        'body': json.dumps(body, ensure_ascii=False),
    }


def _read_body(event: Dict[str, Any]) -> Any:
    raw = event.get('body') or ''
    if event.get('isBase64Encoded') and raw:
        raw = base64.b64decode(raw).decode('utf-8')
    if not raw.strip():
        return {}
    return json.loads(raw)


def _forward(
    endpoint: str,
    payload: Dict[str, Any],
    method: str,
    params: Dict[str, str],
    client: Optional[AbillioClient] = None,
) -> Dict[str, Any]:
    try:
        data = (client or get_client()).request(endpoint, payload, method, params)
        return create_response(200, data)
    except UpstreamError as e:
        print(f"[Lambda] {method} {endpoint} upstream failed. status={e.status_code} body={str(e.body)[:500]}")
        return create_response(500, {"error": str(e)})
    except AbillioError as e:
        print(f"[Lambda] {method} {endpoint} failed: {e}")
        return create_response(500, {"error": str(e) or "Unknown error"})


def health_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """GET /health; mirrors main.py"""
    print(f"[Lambda] /health called. request_id={getattr(context, 'aws_request_id', None)}")
    return create_response(200, {"status": "ok"})


def services_handler(event: Dict[str, Any], context: Any, client: Optional[AbillioClient] = None) -> Dict[str, Any]:
    """Service listing - GET /api/abillio/services"""
    params = event.get('queryStringParameters') or {}
    print(f"[API] /api/abillio/services called. params={params}")
    return _forward("services", {}, "GET", params, client)


def proxy_handler(event: Dict[str, Any], context: Any, client: Optional[AbillioClient] = None) -> Dict[str, Any]:
    """Catch-all proxy - GET/POST /api/abillio/{endpoint+}"""
    endpoint = normalize_endpoint((event.get('pathParameters') or {}).get('endpoint') or '')
    method = (event.get('httpMethod') or 'GET').upper()
    params = event.get('queryStringParameters') or {}
    print(f"[API] {method} /api/abillio/{endpoint} called.")

    if not endpoint:
        return create_response(400, {"error": "Missing endpoint path"})
    if method not in ("GET", "POST"):
        return create_response(405, {"error": f"Method {method} not allowed"})

    payload: Any = {}
    if method == "POST":
        try:
            payload = _read_body(event)
        except ValueError:
            return create_response(400, {"error": "Request body must be valid JSON"})
        if not isinstance(payload, dict):
            return create_response(400, {"error": "Request body must be a JSON object"})

    return _forward(endpoint, payload, method, params, client)
