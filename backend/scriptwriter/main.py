"""
Scriptwriter Backend API

FastAPI service behind the four scriptwriting stages (gather sources, extract
content, generate components, assemble the final script) plus script
analysis/export. Run with ``uvicorn scriptwriter.main:app``.
"""

import os
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    list_pipeline_steps,
    get_model_name,
)
from .routes import scriptwriting_router
from .core import (
    setup_logging,
    get_logger,
    set_request_id,
    clear_context,
    parse_bool_env,
    is_generation_configured,
    MISSING_CREDENTIAL_MESSAGE,
    ScriptwriterError,
)
from .services.infrastructure.llm import get_cost_tracker

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
JSON_LOGS = parse_bool_env(os.getenv("JSON_LOGS"), default=False)
MAX_REQUEST_BODY_BYTES = int(os.getenv("MAX_REQUEST_BODY_BYTES", str(1024 * 1024)))

# Endpoints that call the generation service
GENERATION_PATHS = frozenset({
    "/gather-sources",
    "/extract-content",
    "/generate-components",
    "/generate-final-script",
})

_log_path = os.getenv("LOG_FILE")
setup_logging(level=LOG_LEVEL, log_file=Path(_log_path) if _log_path else None, use_json=JSON_LOGS)

logger = get_logger(__name__, service="api")


def _step_models() -> Dict[str, str]:
    return {step: get_model_name(step) for step in list_pipeline_steps()}


def health_report() -> Dict[str, Any]:
    """Credential status, per-step models and usage since startup"""
    configured = is_generation_configured()
    return {
        "status": "healthy" if configured else "unhealthy",
        "checks": {
            "gemini_api_key": {"configured": configured},
            "models": _step_models(),
        },
        "usage": get_cost_tracker().get_summary(),
    }


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("Scriptwriter API starting", extra={
        "log_level": LOG_LEVEL,
        "json_logs": JSON_LOGS,
        "models": _step_models(),
    })
    if not is_generation_configured():
        logger.warning("GEMINI_API_KEY is not set; the four generation endpoints will answer 500")
    yield
    logger.info("Scriptwriter API stopped", extra={"usage": get_cost_tracker().get_summary()})


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(ScriptwriterError)
async def scriptwriter_error_handler(request: Request, exc: ScriptwriterError):
    """Every application error becomes {"error": message} with the error's status"""
    level_log = logger.error if exc.status_code >= 500 else logger.info
    level_log(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}", extra={
        "status_code": exc.status_code,
        "error_type": type(exc).__name__,
    })
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# Declared before correlate_request so it runs inside it
@app.middleware("http")
async def enforce_body_limit(request: Request, call_next):
    """Reject oversized or badly declared bodies.

    A generation request without a credential gets the 500 first, as the
    routes would before touching the body.
    """
    if request.url.path in GENERATION_PATHS and not is_generation_configured():
        return JSONResponse(status_code=500, content={"error": MISSING_CREDENTIAL_MESSAGE})

    declared = request.headers.get("content-length")
    if declared is None:
        return await call_next(request)
    if not declared.isdigit():
        return JSONResponse(status_code=400, content={"error": "Invalid Content-Length header"})
    if int(declared) > MAX_REQUEST_BODY_BYTES:
        logger.info("Rejected oversized body", extra={"content_length": int(declared)})
        return JSONResponse(
            status_code=413,
            content={"error": f"Request body too large. Max allowed: {MAX_REQUEST_BODY_BYTES} bytes"},
        )
    return await call_next(request)


@app.middleware("http")
async def correlate_request(request: Request, call_next):
    """Bind X-Request-ID to every log line of the request and echo it back."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    set_request_id(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        for header, value in (
            ("X-Request-ID", request_id),
            ("X-Content-Type-Options", "nosniff"),
            ("Referrer-Policy", "no-referrer"),
        ):
            response.headers.setdefault(header, value)
        logger.info(f"{request.method} {request.url.path} {response.status_code}", extra={
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            "client": request.client.host if request.client else "unknown",
        })
        return response
    finally:
        clear_context()


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scriptwriting_router)


@app.get("/")
async def root():
    return {
        "message": "Scriptwriter API - Turn a video idea into a short-form video script",
        "version": API_VERSION,
    }


@app.get("/health")
async def health_check():
    """200 with the report when generation is configured, 503 with it as detail otherwise."""
    report = health_report()
    if report["status"] != "healthy":
        logger.warning("Health check failed: GEMINI_API_KEY not configured")
        raise HTTPException(status_code=503, detail=report)
    return report


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "scriptwriter.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=parse_bool_env(os.getenv("RELOAD"), default=False),
    )
