import pytest

from ai_readiness.core.config import Settings
from ai_readiness.telemetry.event_sink import ClickHouseEventSink, FileEventSink, NullEventSink, sink_from_settings


def test_file_sink_configuration(monkeypatch, tmp_path):
    custom = Settings(event_sink_backend="file", event_sink_path=str(tmp_path / "out" / "events.jsonl"))
    monkeypatch.setattr("ai_readiness.telemetry.event_sink.settings", custom)
    sink = sink_from_settings()
    assert isinstance(sink, FileEventSink)
    assert (tmp_path / "out").is_dir()


def test_clickhouse_sink_configuration(monkeypatch):
    custom = Settings(
        event_sink_backend="clickhouse",
        clickhouse_url="http://clickhouse:8123",
        clickhouse_table="readiness_events",
        event_sink_batch_size=10,
    )
    monkeypatch.setattr("ai_readiness.telemetry.event_sink.settings", custom)
    sink = sink_from_settings()
    assert isinstance(sink, ClickHouseEventSink)
    sink.close()


def test_clickhouse_requires_config(monkeypatch):
    custom = Settings(event_sink_backend="clickhouse", clickhouse_url=None, clickhouse_table=None)
    monkeypatch.setattr("ai_readiness.telemetry.event_sink.settings", custom)
    with pytest.raises(ValueError):
        sink_from_settings()


def test_disabled_sink(monkeypatch):
    custom = Settings(event_sink_backend="off")
    monkeypatch.setattr("ai_readiness.telemetry.event_sink.settings", custom)
    sink = sink_from_settings()
    assert isinstance(sink, NullEventSink)


def test_unknown_backend(monkeypatch):
    custom = Settings(event_sink_backend="kafka")
    monkeypatch.setattr("ai_readiness.telemetry.event_sink.settings", custom)
    with pytest.raises(ValueError):
        sink_from_settings()
