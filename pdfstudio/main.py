"""
PDF Studio — Document Tool API
===============================
FastAPI entry point.
  • POST /extract-text            — PDF upload → plain text + page count
  • POST /generate-{quiz,outline,mindmap} — text → typed artifact JSON
  • Every failure is returned as {"error": ..., "detail": ...}; nothing retries
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdfstudio.api.routes import router
from pdfstudio.core.config import settings
from pdfstudio.core.errors import StudioError, UsageError
from pdfstudio.schemas.common import ErrorResponse

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)

# ── App ──────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="PDF Studio",
    description=(
        "Upload a PDF → extract its text → generate a quiz, an outline and a mind map."
    ),
    version="1.0.0",
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(StudioError)
async def studio_exception_handler(request: Request, exc: StudioError):
    """Expected failures: usage errors keep their message, the rest stay generic."""
    if isinstance(exc, UsageError):
        logger.info(f"Rejected {request.url.path}: {exc.message}")
        body = ErrorResponse(error=exc.message)
    else:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        body = ErrorResponse(error=exc.public_message, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Invalid request body on {request.url.path}: {exc.errors()}")
    body = ErrorResponse(error="Invalid request.", detail=str(exc.errors()))
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all: every unhandled exception returns a clean JSON envelope."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    body = ErrorResponse(error="An internal server error occurred.", detail=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Health Check ─────────────────────────────────────────────────────────────
@app.get("/", tags=["System"])
async def health_check():
    return {
        "status": "operational",
        "service": "PDF Studio",
        "version": app.version,
        "ai_provider": settings.AI_PROVIDER,
    }


app.include_router(router)
