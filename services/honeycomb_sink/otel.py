from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from .src.config import ServiceSettings

def _span_exporter(settings: ServiceSettings) -> SpanExporter:
    if settings.use_cloud_trace:
        # pip: opentelemetry-exporter-gcp-trace
        from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter
        return CloudTraceSpanExporter()
    return ConsoleSpanExporter()

def init_tracing(app, settings: ServiceSettings, service_version: str = "v1"):
    provider = TracerProvider(resource=Resource.create({
        "service.name": settings.service_name,
        "service.version": service_version,
        "deployment.environment": settings.environment,
    }))
    provider.add_span_processor(BatchSpanProcessor(_span_exporter(settings)))
    trace.set_tracer_provider(provider)

    # Server spans for every Eventarc delivery; relay.handle nests honeycomb.forward under them
    FastAPIInstrumentor().instrument_app(app)

    return trace.get_tracer(settings.service_name)
