"""OpenTelemetry metrics instrumentation helpers."""

from __future__ import annotations

import logging

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from ai_readiness.core.config import settings

_logger = logging.getLogger(__name__)

_metrics_enabled = False
_meter = None
_provider: MeterProvider | None = None
_computation_duration_hist = None
_scan_ingestion_counter = None
_readiness_quests_counter = None
_manual_approval_counter = None


def configure_metrics() -> None:
    """Initialise the metrics provider if enabled via settings."""

    global _metrics_enabled, _meter, _provider
    global _computation_duration_hist, _scan_ingestion_counter, _readiness_quests_counter, _manual_approval_counter

    if not settings.otel_enabled:
        return
    if _metrics_enabled:
        return

    exporter_name = settings.otel_exporter.lower().strip()
    metric_readers = []

    if exporter_name == "console":
        metric_readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))
    elif exporter_name == "prometheus":
        try:
            from opentelemetry.exporter.prometheus import PrometheusMetricReader  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "Prometheus exporter selected but opentelemetry-exporter-prometheus is not installed."
            ) from exc
        metric_readers.append(PrometheusMetricReader())
    elif exporter_name == "otlp":
        try:
            from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "OTLP exporter selected but opentelemetry-exporter-otlp is not installed."
            ) from exc
        endpoint = settings.otel_otlp_endpoint
        exporter = OTLPMetricExporter(endpoint=endpoint) if endpoint else OTLPMetricExporter()
        metric_readers.append(PeriodicExportingMetricReader(exporter))
    else:
        _logger.warning("Unsupported OTEL exporter '%s'; defaulting to console", exporter_name)
        metric_readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))

    _provider = MeterProvider(metric_readers=metric_readers, resource=Resource.create({"service.name": "ai-readiness"}))
    metrics.set_meter_provider(_provider)
    _meter = metrics.get_meter("ai-readiness")
    _computation_duration_hist = _meter.create_histogram(
        name="readiness.computation.duration",
        unit="s",
        description="Time spent loading, computing and saving a readiness snapshot",
    )
    _scan_ingestion_counter = _meter.create_counter(
        name="readiness.scan.ingestions",
        unit="1",
        description="Total scan runs ingested",
    )
    _readiness_quests_counter = _meter.create_counter(
        name="readiness.quests.evaluated",
        unit="1",
        description="Quest entries written by readiness computations, by status",
    )
    _manual_approval_counter = _meter.create_counter(
        name="readiness.manual.approvals",
        unit="1",
        description="Manual approvals and revocations applied",
    )
    _metrics_enabled = True


def record_computation_duration(seconds: float) -> None:
    if _metrics_enabled and _computation_duration_hist is not None:
        _computation_duration_hist.record(max(seconds, 0.0))


def increment_scan_ingestion() -> None:
    if _metrics_enabled and _scan_ingestion_counter is not None:
        _scan_ingestion_counter.add(1)


def record_quest_statuses(counts: dict[str, int]) -> None:
    if not (_metrics_enabled and _readiness_quests_counter is not None):
        return
    for status, count in counts.items():
        if count:
            _readiness_quests_counter.add(count, {"status": status})


def increment_manual_approval(action: str) -> None:
    if _metrics_enabled and _manual_approval_counter is not None:
        _manual_approval_counter.add(1, {"action": action})


def collect_prometheus_metrics() -> tuple[bytes, str]:
    """Render the default Prometheus registry for the /metrics endpoint."""

    from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


def shutdown_metrics() -> None:
    global _metrics_enabled, _provider
    if _metrics_enabled and _provider is not None:
        try:
            _provider.shutdown()
        except Exception:  # pragma: no cover
            _logger.exception("Failed to shutdown metrics provider")
        finally:
            _metrics_enabled = False
            _provider = None
