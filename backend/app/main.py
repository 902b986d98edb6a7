"""
SES v2 Local
FastAPI application emulating the AWS SES v2 email-sending API for local
development and tests. Emails are accepted and stored in memory, never sent.

Environment variables
---------------------
HOST            Interface to bind when run as a script (default: 0.0.0.0).
HOST_PORT       Port to bind / report at startup (default: 8005).
LOG_LEVEL       Root log level (default: INFO).
CORS_ORIGINS    Extra allowed CORS origins, comma-separated.
"""

import logging
import os
from typing import List

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.errors import SchemaValidationFailed, SesError
from app.routers import inspection, outbound_emails, templates

load_dotenv()

# Configure logging to output to console
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

DEFAULT_PORT = "8005"

app = FastAPI(
    title="SES v2 Local",
    description="Local emulator for the AWS SES v2 email-sending API",
    version="0.1.0",
)


def get_cors_origins() -> List[str]:
    """
    Build the list of allowed CORS origins.

    Always includes http://localhost:3000 (typical frontend dev server).
    Additional origins are read from the CORS_ORIGINS environment variable
    as a comma-separated list, e.g.:
        CORS_ORIGINS=http://localhost:5173,http://127.0.0.1:5173

    Duplicates are removed while preserving order.
    """
    always_included = ["http://localhost:3000"]

    extra_origins: List[str] = []
    cors_env = os.getenv("CORS_ORIGINS", "").strip()
    if cors_env:
        extra_origins = [o.strip() for o in cors_env.split(",") if o.strip()]

    # Deduplicate while preserving order
    seen: set = set()
    origins: List[str] = []
    for origin in always_included + extra_origins:
        if origin not in seen:
            seen.add(origin)
            origins.append(origin)

    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(outbound_emails.router, prefix="/v2/email", tags=["send"])
app.include_router(templates.router, prefix="/v2/email/templates", tags=["templates"])
app.include_router(inspection.router, tags=["store"])


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------

def _error_response(exc: SesError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "detail": exc.detail},
    )


@app.exception_handler(SesError)
async def ses_error_handler(request: Request, exc: SesError) -> JSONResponse:
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc.detail}")
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI body/query validation failures in the SES error format."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    error = SchemaValidationFailed(f"Schema validation failed ({problems})")
    logger.warning(f"Rejected {request.method} {request.url.path}: {error.detail}")
    return _error_response(error)


# ---------------------------------------------------------------------------
# Lifecycle and health
# ---------------------------------------------------------------------------

@app.on_event("startup")
async def log_startup_url() -> None:
    """
    Log the URL the emulator is reachable at, e.g.:

        SES v2 Local running at: http://localhost:8005
    """
    host_port = os.getenv("HOST_PORT", DEFAULT_PORT)
    logger.info("SES v2 Local running at: http://localhost:%s", host_port)


@app.get("/")
async def root():
    return {"message": "SES v2 Local", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("HOST_PORT", DEFAULT_PORT)),
    )


if __name__ == "__main__":
    run()
