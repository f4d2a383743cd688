"""
Distributed tracing using OpenTelemetry.

Instruments row count assertions and the storage queries they issue.
Without initialize_tracing() the global no-op provider is used, so spans
cost nothing in tests and ad-hoc runs.
"""

import logging
import os
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

_is_initialized = False


def initialize_tracing(
    service_name: str = "rowcheck",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Initialize distributed tracing with OpenTelemetry.

    Args:
        service_name: Name of the service for identification
        otlp_endpoint: OTLP collector endpoint (e.g., "localhost:4317");
            defaults to the OTLP_ENDPOINT environment variable
        console_export: If True, also export traces to console (debug)

    Returns:
        Configured tracer instance
    """
    global _is_initialized

    if _is_initialized:
        logger.warning("Tracing already initialized, returning existing tracer")
        return get_tracer()

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    exporters = []

    otlp_endpoint = otlp_endpoint or os.getenv("OTLP_ENDPOINT")
    if otlp_endpoint:
        try:
            provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
            )
            exporters.append("OTLP")
            logger.info(f"OTLP exporter configured: {otlp_endpoint}")
        except Exception as e:
            logger.warning(f"Failed to configure OTLP exporter: {e}")

    if console_export or os.getenv("TRACE_CONSOLE", "").lower() == "true":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("Console")

    if not exporters:
        logger.warning("No trace exporters configured, tracing will be a no-op")

    trace.set_tracer_provider(provider)
    _is_initialized = True

    logger.info(f"Tracing initialized: {service_name} (exporters: {', '.join(exporters) or 'none'})")
    return get_tracer()


def get_tracer() -> trace.Tracer:
    """Get the rowcheck tracer from the current global provider."""
    return trace.get_tracer("rowcheck")


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down."""
    global _is_initialized

    if _is_initialized:
        try:
            provider = trace.get_tracer_provider()
            if hasattr(provider, "shutdown"):
                provider.shutdown()
            logger.info("Tracing shutdown complete")
        except Exception as e:
            logger.error(f"Error during tracing shutdown: {e}")
        finally:
            _is_initialized = False


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes
):
    """
    Context manager for tracing operations.

    Creates a span, adds attributes, records errors and re-raises them.

    Args:
        operation_name: Name of the operation being traced
        kind: Span kind (INTERNAL, CLIENT, ...)
        **attributes: Custom attributes to add to the span

    Yields:
        Span instance

    Example:
        >>> with trace_operation("row_count", table="orders") as span:
        ...     count = store.row_count(ref)
        ...     span.set_attribute("row_count", count)
    """
    with get_tracer().start_as_current_span(operation_name, kind=kind) as span:
        for key, value in attributes.items():
            span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.set_attribute("error.message", str(e))
            span.record_exception(e)
            raise
