"""Telemetry utilities for exporting readiness events and metrics."""

from .event_sink import ClickHouseEventSink, EventSink, FileEventSink, NullEventSink, sink_from_settings
from .metrics import (
    configure_metrics,
    record_computation_duration,
    increment_scan_ingestion,
    record_quest_statuses,
    increment_manual_approval,
    shutdown_metrics,
    collect_prometheus_metrics,
)

__all__ = [
    "EventSink",
    "ClickHouseEventSink",
    "FileEventSink",
    "NullEventSink",
    "sink_from_settings",
    "configure_metrics",
    "record_computation_duration",
    "increment_scan_ingestion",
    "record_quest_statuses",
    "increment_manual_approval",
    "shutdown_metrics",
    "collect_prometheus_metrics",
]
