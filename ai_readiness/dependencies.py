"""Application dependency wiring."""

from __future__ import annotations

from functools import lru_cache

from redis import Redis

from ai_readiness.core.config import settings
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.services.ingestion import IngestionService
from ai_readiness.services.readiness import ReadinessService
from ai_readiness.services.teams import TeamRepoResolver
from ai_readiness.telemetry import sink_from_settings, EventSink


@lru_cache
def get_redis_client() -> Redis:
    return Redis.from_url(settings.redis_url, decode_responses=True)


@lru_cache
def get_store() -> RedisWarehouse:
    return RedisWarehouse(get_redis_client())


@lru_cache
def get_event_sink() -> EventSink:
    return sink_from_settings()


@lru_cache
def get_readiness_service() -> ReadinessService:
    return ReadinessService(get_store(), sink=get_event_sink())


@lru_cache
def get_team_resolver() -> TeamRepoResolver:
    return TeamRepoResolver(get_store())


@lru_cache
def get_ingestion_service() -> IngestionService:
    return IngestionService(get_store(), get_team_resolver(), get_readiness_service())
