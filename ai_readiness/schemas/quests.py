"""API schemas for the quest catalog."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ai_readiness.models.quest import DetectionType, ProgrammingLanguage, QuestLevel


class QuestResponse(BaseModel):
    id: str
    key: str
    title: str
    category: str
    description: str
    active: bool
    detection_type: DetectionType
    levels: list[QuestLevel] = Field(default_factory=list)
    languages: list[ProgrammingLanguage] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
