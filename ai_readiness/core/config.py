"""Application configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service-wide configuration options."""

    api_v1_prefix: str = "/v1"
    service_base_url: str = "http://localhost:8000"
    redis_url: str = "redis://localhost:6379/0"
    default_manual_approval_level: int = 3
    event_sink_backend: str = "file"
    event_sink_path: str = "data/readiness_events.jsonl"
    event_sink_batch_size: int = 25
    clickhouse_url: str | None = None
    clickhouse_table: str | None = None
    clickhouse_database: str | None = None
    clickhouse_user: str | None = None
    clickhouse_password: str | None = None
    otel_enabled: bool = False
    otel_exporter: str = "console"
    otel_otlp_endpoint: str | None = None

    model_config = SettingsConfigDict(env_prefix="readiness_", env_file=".env", extra="ignore")


settings = Settings()
