from typing import Optional

from opentelemetry import trace
from opentelemetry.trace import NoOpTracer

from nordnet.telemetry.config import TelemetryConfig, ExporterType


def _create_exporter(config: TelemetryConfig):
    if config.exporter_type == ExporterType.CONSOLE:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        return ConsoleSpanExporter()
    if config.exporter_type == ExporterType.OTLP:
        if not config.otlp_endpoint:
            raise ValueError("OTLP endpoint must be specified when using OTLP exporter")
        # Installed with the "otlp" extra
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        return OTLPSpanExporter(endpoint=config.otlp_endpoint, insecure=config.otlp_insecure)
    raise ValueError(f"Unsupported exporter type: {config.exporter_type}")


def create_tracer(config: Optional[TelemetryConfig] = None) -> trace.Tracer:
    """Build a tracer to hand to NordnetClient.create().

    Returns a NoOpTracer when no config is given or tracing is disabled. The
    provider is not installed globally, so several clients can export to
    different places.
    """
    if config is None or not config.enable_traces:
        return NoOpTracer()

    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    exporter = _create_exporter(config)
    provider = TracerProvider(resource=Resource.create({"service.name": config.service_name}))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider.get_tracer(config.service_name)
