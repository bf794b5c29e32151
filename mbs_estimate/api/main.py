"""
FastAPI Main Application
Entry point for the MBS fee estimate API
Source: https://fastapi.tiangolo.com/
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mbs_estimate.api.config import settings
from mbs_estimate.api.routes import estimates, health, mbs_search
from mbs_estimate.db.connection import close_db_connection
from mbs_estimate.utils.errors import BadRequestError
from mbs_estimate.utils.logging import get_logger, setup_logging

setup_logging(
    level=settings.LOG_LEVEL,
    log_file=settings.LOG_FILE,
    json_logs=settings.is_production,
)

logger = get_logger(__name__)

API_TITLE = "MBS Fee Estimate API"
API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[no-untyped-def]  # noqa: ARG001
    """
    Application lifespan manager.

    Source: https://fastapi.tiangolo.com/advanced/events/
    """
    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")

    yield

    logger.info("Shutting down application")
    await close_db_connection()
    logger.info("Database connections closed")


app = FastAPI(
    title=API_TITLE,
    description="Medicare Benefits Schedule item search and out-of-pocket fee estimates",
    version=API_VERSION,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    openapi_url="/openapi.json" if not settings.is_production else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)

app.include_router(health.router)
app.include_router(mbs_search.router)
app.include_router(estimates.router)


ESTIMATE_PATH_PREFIX = "/api/estimates"
FEE_FIELDS = {"charged_fee", "total_charged_fee"}
INVALID_FEE_MESSAGE = "Please enter a valid positive number for the charged fee."


def validation_error_message(exc: RequestValidationError) -> str:
    """Collapse request validation errors into one user-facing message."""
    messages: list[str] = []
    for error in exc.errors():
        field = str(error["loc"][-1]) if error.get("loc") else ""
        if field in FEE_FIELDS:
            message = INVALID_FEE_MESSAGE
        elif field:
            message = f"{field}: {error.get('msg', 'invalid value')}"
        else:
            message = error.get("msg", "Invalid request")
        if message not in messages:
            messages.append(message)
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def estimate_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report malformed estimate requests as 400 like other invalid input.

    Other routes keep the default 422 response.
    """
    if not request.url.path.startswith(ESTIMATE_PATH_PREFIX):
        return await request_validation_exception_handler(request, exc)

    error = BadRequestError(validation_error_message(exc))
    logger.warning(f"Estimate request rejected: path={request.url.path}, detail={error.detail}")
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "environment": settings.ENVIRONMENT,
        "docs": "/docs" if not settings.is_production else "disabled",
    }
