from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from abillio.api import AbillioClient, get_client, normalize_endpoint, reset_client
from abillio.errors import AbillioError, UpstreamError


@asynccontextmanager
async def lifespan(app: FastAPI):
	print("[App] lifespan startup finished.")
	try:
		yield
	finally:
		print("[App] lifespan shutdown started.")
		reset_client()
		print("[App] lifespan shutdown finished.")


app = FastAPI(title="Abillio API Proxy", lifespan=lifespan)


def get_abillio_client() -> AbillioClient:
	"""Shared signed client; raises ConfigurationError while credentials are missing."""
	return get_client()


@app.exception_handler(AbillioError)
async def abillio_error_handler(request: Request, exc: AbillioError):
	if isinstance(exc, UpstreamError):
		print(f"[API] {request.url.path} upstream failed. status={exc.status_code} body={str(exc.body)[:500]}")
	else:
		print(f"[API] {request.url.path} failed: {exc}")
	return JSONResponse({"error": str(exc) or "Unknown error"}, status_code=500)


async def forward(client: AbillioClient, endpoint: str, payload: Dict[str, Any], method: str, params: Dict[str, str]):
	data = await run_in_threadpool(client.request, endpoint, payload, method, params)
	return JSONResponse(data)


@app.get("/health")
async def health():
	print("[API] /health called.")
	return {"status": "ok"}


@app.get("/api/abillio/services")
async def services(request: Request, client: AbillioClient = Depends(get_abillio_client)):
	params = dict(request.query_params)
	print(f"[API] /api/abillio/services called. params={params}")
	return await forward(client, "services", {}, "GET", params)


def missing_endpoint() -> JSONResponse:
	return JSONResponse({"error": "Missing endpoint path"}, status_code=400)


@app.get("/api/abillio/{endpoint:path}")
async def proxy_get(endpoint: str, request: Request, client: AbillioClient = Depends(get_abillio_client)):
	endpoint = normalize_endpoint(endpoint)
	print(f"[API] GET /api/abillio/{endpoint} called.")
	if not endpoint:
		return missing_endpoint()
	return await forward(client, endpoint, {}, "GET", dict(request.query_params))


@app.post("/api/abillio/{endpoint:path}")
async def proxy_post(endpoint: str, request: Request, client: AbillioClient = Depends(get_abillio_client)):
	endpoint = normalize_endpoint(endpoint)
	print(f"[API] POST /api/abillio/{endpoint} called.")
	if not endpoint:
		return missing_endpoint()
	raw = await request.body()
	payload: Any = {}
	if raw.strip():
		try:
			payload = await request.json()
		except ValueError:
			return JSONResponse({"error": "Request body must be valid JSON"}, status_code=400)
	if not isinstance(payload, dict):
		return JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)
	return await forward(client, endpoint, payload, "POST", dict(request.query_params))
