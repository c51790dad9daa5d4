"""OpenTelemetry tracing.

Spans are always created through the OpenTelemetry API; without a configured
provider they are no-ops. Export over OTLP only happens when OTEL_ENABLED is
set, so tests and local runs need no collector.
"""

from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from ..config import settings
from .logging_config import get_logger

logger = get_logger(__name__)

TRACER_NAME = "sku-service"
TRACER_VERSION = "1.0.0"


def is_tracing_enabled() -> bool:
    return settings.OTEL_ENABLED


def configure_tracing(service_name: Optional[str] = None) -> Optional[TracerProvider]:
    """Install a TracerProvider exporting to OTLP, if tracing is enabled.

    Args:
        service_name: Resource service.name (defaults to OTEL_SERVICE_NAME)

    Returns:
        The installed provider, or None when tracing is disabled
    """
    if not is_tracing_enabled():
        logger.info("OpenTelemetry tracing is disabled")
        return None

    resource = Resource.create({SERVICE_NAME: service_name or settings.OTEL_SERVICE_NAME})
    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT))
    )
    trace.set_tracer_provider(tracer_provider)

    logger.info(f"OpenTelemetry tracing configured, exporting to {settings.OTEL_EXPORTER_OTLP_ENDPOINT}")
    return tracer_provider


def instrument_fastapi(app) -> None:
    if not is_tracing_enabled():
        return
    FastAPIInstrumentor.instrument_app(app)
    logger.info("FastAPI instrumented with OpenTelemetry")


def instrument_sqlalchemy(engine) -> None:
    if not is_tracing_enabled():
        return
    SQLAlchemyInstrumentor().instrument(engine=engine)
    logger.info("SQLAlchemy instrumented with OpenTelemetry")


def get_tracer(name: str = TRACER_NAME) -> trace.Tracer:
    return trace.get_tracer(name, TRACER_VERSION)


def get_current_trace_id() -> Optional[str]:
    """Hex trace id of the active span, or None when no valid span is active."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return format(span_context.trace_id, "032x")
    return None
