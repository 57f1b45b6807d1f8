# abillio/api.py

import threading
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .auth import request_path, signed_headers
from .config import AbillioConfig
from .errors import DecodeError, TransportError, UpstreamError
from .models import CountryOption, CurrencyOption, Pagination, ServicePage

ALLOWED_METHODS = ("GET", "POST")


def normalize_endpoint(raw: str) -> str:
    """Join the non-empty segments of a proxied path: "/freelancers//123/" -> "freelancers/123"."""
    return "/".join(segment for segment in (raw or "").split("/") if segment)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class AbillioClient:
    """
    Signed client for the Abillio v1 API.

      - Every call is signed: payload + {request, nonce} -> JSON -> base64 -> HMAC-SHA256 (hex).
      - The signed envelope travels only in the X-ABILLIO-* headers; no body is sent, even for POST.
      - Query params are appended to the URL and are not covered by the signature.
      - No retries. Errors surface as TransportError / UpstreamError / DecodeError.
    """

    def __init__(self, config: AbillioConfig, *, transport: Optional[httpx.BaseTransport] = None) -> None:
        config.validate()
        self.config = config
        self._client = httpx.Client(
            timeout=config.timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def request(
        self,
        endpoint: str,
        payload: Optional[Mapping[str, Any]] = None,
        method: str = "GET",
        params: Optional[Mapping[str, str]] = None,
    ) -> Any:
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported method {method!r}, expected one of {ALLOWED_METHODS}")

        path = request_path(endpoint)
        url = f"{self.config.base_url}{path}"
        headers = signed_headers(self.config.api_key, self.config.api_secret, endpoint, payload)
        query = dict(params or {})

        print(f"[Abillio] {method} {url} params={query}")
        try:
            response = self._client.request(method, url, headers=headers, params=query)
        except httpx.RequestError as e:
            raise TransportError(f"Request to {url} failed: {e!r}", url=url) from e

        if not response.is_success:
            raise UpstreamError(response.status_code, _response_body(response), url=url)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(response.status_code, response.text, url=url) from e

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AbillioClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


_default_client: Optional[AbillioClient] = None
_default_lock = threading.Lock()


def get_client() -> AbillioClient:
    """Process-wide client built from the environment on first use.

    A ConfigurationError is raised on every call until the environment is fixed.
    """
    global _default_client
    with _default_lock:
        if _default_client is None:
            config = AbillioConfig.from_env()
            _default_client = AbillioClient(config)
            print(f"[Abillio] Client configured. base_url={config.base_url} key={config.masked_key()}")
        return _default_client


def reset_client() -> None:
    global _default_client
    with _default_lock:
        if _default_client is not None:
            _default_client.close()
        _default_client = None


def request(
    endpoint: str,
    payload: Optional[Mapping[str, Any]] = None,
    method: str = "GET",
    params: Optional[Mapping[str, str]] = None,
) -> Any:
    return get_client().request(endpoint, payload, method, params)


def unwrap_result(response: Dict[str, Any]) -> Any:
    if isinstance(response, dict) and "result" in response and not response.get("errors"):
        return response["result"]
    detail = (response.get("errors") or response.get("error")) if isinstance(response, dict) else response
    raise ValueError(f"API Error: {detail}")


# API Function: GET /v1/services/
def list_services(
    lang: str = "en",
    country: Optional[str] = None,
    page: Optional[int] = None,
    client: Optional[AbillioClient] = None,
) -> ServicePage:
    params = {"lang": lang}
    if country:
        params["country"] = country
    if page is not None:
        params["p"] = str(page)
    response = (client or get_client()).request("services", {}, "GET", params)
    return ServicePage(
        services=unwrap_result(response),
        pagination=Pagination.from_dict(response.get("pagination")),
    )


# API Function: GET /v1/services/<id>/
def get_service(service_id: str, lang: str = "en", client: Optional[AbillioClient] = None) -> Dict[str, Any]:
    if not str(service_id).strip():
        raise ValueError("service_id must not be empty")
    response = (client or get_client()).request(f"services/{service_id}", {}, "GET", {"lang": lang})
    return unwrap_result(response)


# API Function: GET /v1/countries/
def list_countries(lang: str = "en", client: Optional[AbillioClient] = None) -> List[CountryOption]:
    response = (client or get_client()).request("countries", {}, "GET", {"lang": lang})
    return [
        CountryOption(value=c["id"], label=c.get("name") or c["id"], flag=c.get("flag"))
        for c in unwrap_result(response)
    ]


# API Function: GET /v1/currencies/
def list_currencies(
    lang: str = "en",
    payment_only: bool = True,
    client: Optional[AbillioClient] = None,
) -> List[CurrencyOption]:
    params = {"lang": lang}
    if payment_only:
        # upstream only checks for the flag's presence
        params["is_payment_currency"] = ""
    response = (client or get_client()).request("currencies", {}, "GET", params)
    return [
        CurrencyOption(value=c["id"], label=c["id"], symbol=c.get("symbol"))
        for c in unwrap_result(response)
    ]
