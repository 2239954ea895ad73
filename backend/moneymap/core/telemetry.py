"""OpenTelemetry configuration helpers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.system_metrics import SystemMetricsInstrumentor
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes

from moneymap.config import AppSettings

logger = logging.getLogger(__name__)

_TELEMETRY_INITIALISED = False
_METRIC_EXPORT_INTERVAL_MS = 10000

# Proxy instrument; binds to the real meter provider once telemetry is configured.
_ACTION_OUTCOMES = metrics.get_meter("moneymap.actions").create_counter(
    "moneymap.action.outcomes",
    unit="1",
    description="ActionResult outcomes by error kind",
)
_ACTION_TRACER = trace.get_tracer("moneymap.actions")


def _build_resource(settings: AppSettings) -> Resource:
    attributes: dict[str, Any] = {
        ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
        ResourceAttributes.SERVICE_NAMESPACE: "moneymap",
        ResourceAttributes.SERVICE_VERSION: "0.1.0",
        "moneymap.base_currency": settings.base_currency,
        "moneymap.timezone": settings.timezone,
    }
    return Resource.create(attributes)


def setup_telemetry(app: FastAPI, settings: AppSettings) -> None:
    """Configure OTLP exporters and instrument FastAPI plus outbound httpx calls."""

    global _TELEMETRY_INITIALISED  # noqa: PLW0603 - single initialisation guard

    if _TELEMETRY_INITIALISED:
        return

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return

    resource = _build_resource(settings)
    sampler = ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio))
    exporter_options = _build_exporter_options(settings)

    tracer_provider = _configure_tracing(resource, sampler, exporter_options)
    meter_provider = _configure_metrics(resource, exporter_options)
    _configure_logging(resource, exporter_options)

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
    )
    # Outbound calls to the aggregator and enrichment providers get client spans
    HTTPXClientInstrumentor().instrument()
    SystemMetricsInstrumentor().instrument(meter_provider=meter_provider)

    _TELEMETRY_INITIALISED = True
    logger.info("Telemetry initialised and instrumentation enabled")


@contextmanager
def action_span(label: str) -> Iterator[trace.Span]:
    """Span around one dashboard action; MCP and provider calls nest under it."""

    with _ACTION_TRACER.start_as_current_span(f"action {label}", record_exception=False) as span:
        span.set_attribute("moneymap.action", label)
        yield span


def record_action_outcome(kind: str, span: trace.Span | None = None) -> None:
    """Count one action outcome; successes are recorded as ``ok``."""

    _ACTION_OUTCOMES.add(1, {"moneymap.outcome": kind})
    if span is not None:
        span.set_attribute("moneymap.outcome", kind)
        if kind != "ok":
            span.set_status(trace.Status(trace.StatusCode.ERROR, kind))


# Helpers

def _build_exporter_options(settings: AppSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        options["endpoint"] = settings.telemetry_otlp_endpoint
    return options


def _configure_tracing(
    resource: Resource,
    sampler: ParentBased,
    exporter_options: dict[str, Any],
) -> TracerProvider:
    tracer_provider = TracerProvider(resource=resource, sampler=sampler)
    span_processor = BatchSpanProcessor(OTLPSpanExporter(**exporter_options))
    tracer_provider.add_span_processor(span_processor)
    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def _configure_metrics(
    resource: Resource,
    exporter_options: dict[str, Any],
) -> MeterProvider:
    metric_exporter = OTLPMetricExporter(**exporter_options)
    metric_reader = PeriodicExportingMetricReader(
        metric_exporter,
        export_interval_millis=_METRIC_EXPORT_INTERVAL_MS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)
    return meter_provider


def _configure_logging(resource: Resource, exporter_options: dict[str, Any]) -> None:
    logger_provider = LoggerProvider(resource=resource)
    log_exporter = OTLPLogExporter(**exporter_options)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(log_exporter))
    set_logger_provider(logger_provider)
    LoggingInstrumentor().instrument(set_logging_format=False)


__all__ = ["action_span", "record_action_outcome", "setup_telemetry"]
