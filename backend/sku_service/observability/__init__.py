"""Observability module: structured logging, request ids, tracing, metrics, health."""

from .health import ComponentHealth, HealthStatus, check_database_health
from .logging_config import configure_logging, get_logger
from .middleware import RequestIDMiddleware
from .request_id import generate_request_id, get_request_id, request_id_var, set_request_id
from .tracing import (
    configure_tracing,
    get_current_trace_id,
    get_tracer,
    instrument_fastapi,
    instrument_sqlalchemy,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    # Tracing
    "configure_tracing",
    "get_current_trace_id",
    "get_tracer",
    "instrument_fastapi",
    "instrument_sqlalchemy",
    # Health
    "HealthStatus",
    "ComponentHealth",
    "check_database_health",
    # Middleware
    "RequestIDMiddleware",
]
