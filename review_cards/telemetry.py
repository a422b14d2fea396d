import logging

from opentelemetry import trace as trace_api
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from review_cards.config import Settings

logger = logging.getLogger(__name__)


def setup_telemetry(app, settings: Settings) -> TracerProvider:
    resource = Resource(attributes={
        "service.name": settings.otel_service_name,
    })

    trace_provider = TracerProvider(resource=resource)
    # Ship spans to any OTLP/HTTP collector (Phoenix, Jaeger, Tempo, ...)
    exporter = OTLPSpanExporter(endpoint=settings.otel_endpoint)

    trace_provider.add_span_processor(BatchSpanProcessor(exporter))
    trace_api.set_tracer_provider(trace_provider)

    FastAPIInstrumentor().instrument_app(app, tracer_provider=trace_provider)

    logger.info("Tracing enabled, exporting to %s", settings.otel_endpoint)
    return trace_provider
