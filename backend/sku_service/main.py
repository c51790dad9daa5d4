"""SKU Service - Main FastAPI Application

This module creates and configures the FastAPI application, including:
- The SKU router under /api/v1
- Middleware (request ID correlation, CORS)
- Exception handlers rendering RFC 7807 problem+json bodies
- Health, readiness and metrics endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import engine
from .domain.sku import (
    DuplicateKeyError,
    InvalidArgumentError,
    SequenceCounters,
    SkuNotFoundError,
    StateTransitionError,
)
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.request_id import REQUEST_ID_HEADER, get_request_id
from .observability.router import router as observability_router
from .observability.tracing import (
    configure_tracing,
    get_current_trace_id,
    instrument_fastapi,
    instrument_sqlalchemy,
)
from .schemas.problem import PROBLEM_MEDIA_TYPE, ProblemDetail
from .skus.router import router as skus_router

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("SKU service starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Retailer prefix: {settings.RETAILER_PREFIX}")

    yield

    logger.info("SKU service shutting down...")


# =============================================================================
# PROBLEM RESPONSES
# =============================================================================

def problem_response(
    request: Request,
    status_code: int,
    problem_type: str,
    title: str,
    detail: Optional[str] = None,
    errors: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Render a problem+json response for the current request.

    trace_id is the active OpenTelemetry trace id when tracing is on,
    otherwise the request id. X-Request-ID is set here as well because
    unhandled errors are rendered outside RequestIDMiddleware.
    """
    request_id = getattr(request.state, "request_id", None) or get_request_id()
    problem = ProblemDetail(
        type=f"{settings.PROBLEM_BASE_URI}{problem_type}",
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
        trace_id=get_current_trace_id() or request_id,
        request_id=request_id,
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.to_content(),
        media_type=PROBLEM_MEDIA_TYPE,
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
    )


def _field_errors(exc: RequestValidationError) -> Dict[str, str]:
    """Collapse pydantic errors into a field path -> message map.

    The leading location segment (body, query, path) is dropped; the first
    message wins when one field fails several constraints.
    """
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        field = ".".join(loc) or "request"
        errors.setdefault(field, error.get("msg", "Invalid value"))
    return errors


async def sku_not_found_handler(request: Request, exc: SkuNotFoundError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path}: {exc}")
    return problem_response(request, status.HTTP_404_NOT_FOUND, "not-found", "SKU Not Found", str(exc))


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: {exc}", extra={"field": exc.field})
    return problem_response(request, status.HTTP_409_CONFLICT, "duplicate", "Duplicate SKU", str(exc))


async def invalid_argument_handler(request: Request, exc: Exception) -> JSONResponse:
    """InvalidArgumentError and StateTransitionError both surface as 400."""
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return problem_response(
        request, status.HTTP_400_BAD_REQUEST, "invalid-argument", "Invalid Argument", str(exc)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns 400 with a field-level error map.
    """
    errors = _field_errors(exc)
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"errors": errors},
    )
    return problem_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "validation-error",
        "Validation Failed",
        "Request validation failed",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions, database errors included.

    Full details are logged but not exposed to the client.
    """
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal-error",
        "Internal Server Error",
        "An unexpected error occurred",
    )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app() -> FastAPI:
    """Build a fully configured application.

    Each call gets its own SequenceCounters, so tests can create isolated
    instances.
    """
    docs_enabled = not settings.is_production
    app = FastAPI(
        title="SKU Service API",
        description="SKU management for retail product catalogs",
        version="1.0.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.sequence_counters = SequenceCounters()

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    # Added last so it runs first
    app.add_middleware(RequestIDMiddleware)

    # Exception handlers
    app.add_exception_handler(SkuNotFoundError, sku_not_found_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)
    app.add_exception_handler(StateTransitionError, invalid_argument_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # Routers
    app.include_router(observability_router)
    app.include_router(skus_router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    def root() -> dict[str, Any]:
        """Root endpoint - API information."""
        return {
            "name": "SKU Service API",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs" if docs_enabled else None,
        }

    instrument_fastapi(app)
    return app


configure_tracing()
instrument_sqlalchemy(engine)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sku_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
