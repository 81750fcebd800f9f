import logging
import uuid

import structlog
from fastapi import FastAPI, Request
from prometheus_fastapi_instrumentator import Instrumentator

# OpenTelemetry
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from shared.config.settings import LOG_LEVEL, OTLP_ENDPOINT

# Probe and scrape endpoints stay out of the request metrics
UNMEASURED_PATHS = ["/health", "/metrics"]


def add_otel_ids(logger, log_method, event_dict):
    """Structlog processor copying the active trace and span ids onto the event."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = trace.format_trace_id(ctx.trace_id)
        event_dict["span_id"] = trace.format_span_id(ctx.span_id)
    return event_dict


def configure_logging():
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    # uvicorn and sqlalchemy keep using stdlib logging
    logging.basicConfig(level=level, format="%(message)s")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_otel_ids,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(app: FastAPI):
    """Every log line emitted while serving a request carries its id, method and path."""

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        return await call_next(request)


def configure_tracing(app: FastAPI, service_name: str):
    if not OTLP_ENDPOINT:
        structlog.get_logger(__name__).info("tracing_disabled", reason="OTLP_ENDPOINT not set")
        return

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_ENDPOINT, insecure=True)))
    trace.set_tracer_provider(provider)

    # One server span per incoming request; the app makes no outgoing calls
    FastAPIInstrumentor.instrument_app(app, excluded_urls=",".join(UNMEASURED_PATHS))


def configure_metrics(app: FastAPI):
    # Request latency and status codes, scraped from /metrics next to the business counters
    Instrumentator(excluded_handlers=UNMEASURED_PATHS).instrument(app).expose(app, include_in_schema=False)


def setup_observability(app: FastAPI, service_name: str):
    """
    Bootstraps logging, tracing and metrics for the shop app.
    Call this once in main.py, before any router is included.
    """
    configure_logging()
    bind_request_context(app)
    configure_tracing(app, service_name)
    configure_metrics(app)
