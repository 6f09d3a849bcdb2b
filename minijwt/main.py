# minijwt/main.py
import json
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from minijwt.auth.bearer import get_verified_payload, require_secret
from minijwt.config import Settings, get_settings
from minijwt.errors import InvalidEncoding, MalformedToken
from minijwt.middleware.rate_limit import rate_limit
from minijwt.telemetry.otel_setup import setup_otel
from minijwt.tokens import jwt

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    log.info("Starting HS256 token service...")
    if settings.JWT_SECRET is None:
        log.warning("JWT_SECRET is not set. Token issuance and verification will fail.")
    if settings.ENABLE_DEBUG_ROUTES:
        log.warning("Debug routes are enabled: /v1/tokens/decode returns unverified payloads.")
    yield
    log.info("Shutting down HS256 token service.")


app = FastAPI(title="HS256 Token Service (FastAPI)", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_otel(app, get_settings().OTEL_EXPORTER_OTLP_ENDPOINT)


class IssueRequest(BaseModel):
    claims: dict[str, Any] = Field(default_factory=dict)


class IssueResponse(BaseModel):
    token: str


class TokenBody(BaseModel):
    token: str


class VerifyResponse(BaseModel):
    valid: bool


class PayloadResponse(BaseModel):
    payload: str
    verified: bool


def _as_text(payload: bytes) -> str:
    return payload.decode("utf-8", errors="replace")


@app.get("/healthz", tags=["Health"])
def healthz() -> dict[str, Any]:
    return {"ok": True, "timestamp": int(time.time())}


@app.get("/readyz", tags=["Health"])
async def readyz(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    return {
        "signing": bool(settings.JWT_SECRET and settings.JWT_SECRET.get_secret_value()),
        "debug_routes": settings.ENABLE_DEBUG_ROUTES,
        "ready": True,
    }


@app.post("/v1/tokens", response_model=IssueResponse, tags=["Tokens"])
def issue_token(
    req: IssueRequest,
    request: Request,
    secret: bytes = Depends(require_secret),
    settings: Settings = Depends(get_settings),
) -> IssueResponse:
    payload = json.dumps(req.claims, separators=(",", ":")).encode("utf-8")
    if len(payload) > settings.MAX_PAYLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Claim set exceeds MAX_PAYLOAD_BYTES.")

    token = jwt.encode(payload, secret)
    claim_keys = ", ".join(sorted(map(str, req.claims.keys()))) or "<empty>"
    log.info(
        "issued token for %s (claim keys=%s)",
        request.client.host if request.client else "unknown",
        claim_keys,
    )
    return IssueResponse(token=token)


@app.post(
    "/v1/tokens/verify",
    response_model=VerifyResponse,
    dependencies=[Depends(rate_limit)],
    tags=["Tokens"],
)
def verify_token(body: TokenBody, secret: bytes = Depends(require_secret)) -> VerifyResponse:
    valid = jwt.verify(body.token, secret)
    if not valid:
        log.info("token verification failed")
    return VerifyResponse(valid=valid)


@app.post("/v1/tokens/decode", response_model=PayloadResponse, tags=["Debug"])
def decode_token(body: TokenBody, settings: Settings = Depends(get_settings)) -> PayloadResponse:
    if not settings.ENABLE_DEBUG_ROUTES:
        raise HTTPException(status_code=404, detail="Not Found")
    try:
        payload = jwt.decode_without_verify(body.token)
    except MalformedToken as e:
        raise HTTPException(status_code=400, detail=f"Malformed token: {e}") from e
    except InvalidEncoding as e:
        raise HTTPException(status_code=400, detail=f"Invalid encoding: {e}") from e
    return PayloadResponse(payload=_as_text(payload), verified=False)


@app.get(
    "/v1/whoami",
    response_model=PayloadResponse,
    dependencies=[Depends(rate_limit)],
    tags=["Tokens"],
)
def whoami(payload: bytes = Depends(get_verified_payload)) -> PayloadResponse:
    return PayloadResponse(payload=_as_text(payload), verified=True)
