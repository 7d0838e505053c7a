"""API routes for the quest catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ai_readiness.core.config import settings
from ai_readiness.dependencies import get_store
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.schemas.quests import QuestResponse


router = APIRouter(prefix=settings.api_v1_prefix, tags=["quests"])


@router.get("/quests", response_model=list[QuestResponse])
def list_quests(store: RedisWarehouse = Depends(get_store)) -> list[QuestResponse]:
    quests = sorted(store.list_active_quests(), key=lambda quest: (quest.category, quest.key))
    return [QuestResponse(**quest.model_dump()) for quest in quests]
