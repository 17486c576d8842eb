"""
GroundCheck API — Main Application

POST /detect    — Whole-text trigger detection (block/allow signal)
POST /score     — Per-sentence scores and labels
GET  /weights   — Effective category weights
GET  /patterns  — Full detection surface
GET  /health    — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from groundcheck import __version__
from groundcheck.config import settings
from groundcheck.frozen_core import CORE_VERSION, detect, frozen_core
from groundcheck.logging import setup_logging, get_logger
from groundcheck.scorer import score_text, worst_label
from groundcheck.weights import DEFAULT_WEIGHTS, load_weights, resolve_weights
from groundcheck.schemas.scan import (
    DetectRequest,
    DetectResponse,
    ScoreRequest,
    ScoreResponse,
    WeightsResponse,
    HealthResponse,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("GroundCheck API starting", extra={"config_path": settings.WEIGHTS_FILE})
    yield
    logger.info("GroundCheck API shutting down")


app = FastAPI(
    title="GroundCheck API",
    description="Unverified-claim detection for assistant narrative",
    version=f"{__version__} (core {CORE_VERSION})",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The audit could not be completed."},
    )


# ============================================================
# ROUTES
# ============================================================

@app.post("/detect", response_model=DetectResponse)
async def detect_text(request: DetectRequest):
    """Audit a whole message. `blocked` is true when any trigger fired."""
    matches = detect(request.text)
    kinds = list(dict.fromkeys(m.kind.value for m in matches))
    return {
        "matches": [m.to_dict() for m in matches],
        "kinds": kinds,
        "blocked": bool(matches),
        "core_version": CORE_VERSION,
    }


@app.post("/score", response_model=ScoreResponse)
async def score(request: ScoreRequest):
    """
    Score a message sentence by sentence.

    Request weights are merged onto the defaults; without them the
    weights file in the server's working directory applies.
    """
    if request.weights is not None:
        weights = resolve_weights(request.weights)
    else:
        weights = load_weights()

    results = score_text(request.text, weights)
    logger.info(
        f"Scored {len(results)} sentence(s)",
        extra={"sentence_count": len(results)},
    )
    return {
        "results": [r.to_dict() for r in results],
        "total": len(results),
        "worst_label": worst_label(results).value,
        "weights": weights,
        "core_version": CORE_VERSION,
    }


@app.get("/weights", response_model=WeightsResponse)
async def get_weights():
    return {"weights": load_weights(), "defaults": dict(DEFAULT_WEIGHTS)}


@app.get("/patterns")
async def get_patterns():
    """Return every phrase and structural shape the core matches."""
    patterns = frozen_core.get_patterns()
    return {
        "core_version": CORE_VERSION,
        "total_patterns": len(patterns),
        "patterns": patterns,
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "core_version": CORE_VERSION,
    }


# --- Version + Security Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-GroundCheck-Version"] = __version__
    response.headers["X-Core-Version"] = CORE_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    return response


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
