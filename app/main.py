"""
app/main.py — FastAPI app exposing the advice lookup over JSON-RPC.

Endpoints:
  POST /rpc      — JSON-RPC 2.0 (method AdviceService.GiveMeAdvice)
  GET  /health   — Liveness check

Run with:
    advice-rpc            (or: python -m app.main)
"""
import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from app.cache import TTLStore
from app.config import settings
from app.rpc import AcceptJSONMiddleware, build_dispatcher
from app.service import build_service

logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s | %(name)s | %(message)s")
logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


# ── Lifespan (startup / shutdown) ───────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up…")
    client = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
    store = TTLStore()
    service = build_service(client, store)
    app.state.dispatcher = build_dispatcher(service)
    yield
    logger.info("Shutting down…")
    await client.aclose()


# ── App instance ─────────────────────────────────────────────────────────────

app = FastAPI(
    title="Advice RPC",
    description="Caching JSON-RPC proxy for the Advice Slip API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],      # tighten for production
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AcceptJSONMiddleware)


def _media_types(header: str | None) -> list[str]:
    if not header:
        return []
    return [part.split(";")[0].strip().lower() for part in header.split(",")]


# ── Routes ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post(settings.rpc_path, summary="JSON-RPC 2.0 endpoint")
async def rpc(request: Request):
    """
    Body is a JSON-RPC 2.0 request or batch; the reply follows the spec.
    Requests must send and accept application/json.
    """
    if _media_types(request.headers.get("content-type"))[:1] != [JSON_MEDIA_TYPE]:
        return PlainTextResponse("Unsupported content type, expected application/json", status_code=415)
    if JSON_MEDIA_TYPE not in _media_types(request.headers.get("accept")):
        return PlainTextResponse("Not acceptable, client must accept application/json", status_code=406)

    body = await request.body()
    reply = await request.app.state.dispatcher.handle(body)
    if reply is None:
        return Response(status_code=204)
    return JSONResponse(reply)


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
