"""Logging and tracing for storage-client.

Log records go through a structlog processor chain private to this package
into the ``storage_client`` stdlib logger, rendered as JSON by default or as
key/value text when ``STORAGE_CLIENT_LOG_FORMAT=console``. The global
structlog configuration belongs to the host application and is left alone.
Tracing is off unless ``STORAGE_CLIENT_OTEL_ENABLED`` is set; without it
``get_tracer`` hands out OpenTelemetry's no-op tracer, so spans in the
transport cost nothing.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import settings

LOGGER_NAME = "storage_client"


def setup_tracing() -> None:
    """Install a tracer provider exporting request spans to the console."""
    if not settings.otel_enabled:
        return

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)


def setup_logging() -> None:
    """Attach a stderr handler to the package logger."""
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(getattr(logging, settings.log_level.upper()))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
        package_logger.propagate = False


def _processors() -> list[Any]:
    if settings.log_format == "console":
        renderer: Any = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def get_logger(name: str) -> Any:
    """Get a logger instance bound to the package processor chain."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


# Initialize on import
setup_logging()
setup_tracing()
