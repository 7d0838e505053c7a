"""Quest catalog data models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProgrammingLanguage(str, Enum):
    """Source languages a quest can be restricted to."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JAVA = "java"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["ProgrammingLanguage"]:
        """Parse a language tag, returning ``None`` for missing or unsupported values."""

        if value is None:
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


class DetectionType(str, Enum):
    """How a quest can be completed."""

    AUTO_ONLY = "auto-only"
    MANUAL_ONLY = "manual-only"
    BOTH = "both"

    def can_auto_detect(self) -> bool:
        return self in (DetectionType.AUTO_ONLY, DetectionType.BOTH)

    def can_manually_approve(self) -> bool:
        return self in (DetectionType.MANUAL_ONLY, DetectionType.BOTH)


class ConditionType(str, Enum):
    """Condition shapes understood by the readiness engine."""

    PASS = "pass"
    EXISTS = "exists"
    COUNT = "count"
    SCORE = "score"


class QuestCondition(BaseModel):
    """Satisfaction rule for a single quest level.

    Unrecognised ``type`` values, and ``count``/``score`` conditions without a
    ``min``, are kept as-is so catalog entries written by a newer scanner still
    load; the engine treats them as never satisfied.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str
    min: Optional[float] = None


class QuestLevel(BaseModel):
    """Achievement tier of a quest."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, description="Tier number, starting at 1.")
    description: str = ""
    condition: QuestCondition


class QuestDefinition(BaseModel):
    """Minimal projection of a quest needed to compute readiness."""

    model_config = ConfigDict(frozen=True)

    key: str
    levels: tuple[QuestLevel, ...] = ()


class Quest(BaseModel):
    """A named, categorised AI-readiness check."""

    model_config = ConfigDict(frozen=True)

    id: str
    key: str
    title: str
    category: str
    description: str
    active: bool = True
    detection_type: DetectionType = DetectionType.BOTH
    levels: tuple[QuestLevel, ...] = ()
    languages: tuple[ProgrammingLanguage, ...] = Field(
        default=(),
        description="Languages the quest applies to; empty means every repository.",
    )
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @field_validator("key", "title", "category", "description", mode="before")
    @classmethod
    def _strip_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        if not isinstance(value, str):
            return value
        trimmed = value.strip()
        if not trimmed:
            raise ValueError(f"Quest {info.field_name} cannot be empty")
        return trimmed

    @field_validator("title")
    @classmethod
    def _title_length(cls, value: str) -> str:
        if len(value) > MAX_TITLE_LENGTH:
            raise ValueError(f"Quest title must not exceed {MAX_TITLE_LENGTH} characters")
        return value

    @field_validator("description")
    @classmethod
    def _description_length(cls, value: str) -> str:
        if len(value) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(f"Quest description must not exceed {MAX_DESCRIPTION_LENGTH} characters")
        return value

    @field_validator("levels")
    @classmethod
    def _order_levels(cls, value: tuple[QuestLevel, ...]) -> tuple[QuestLevel, ...]:
        return tuple(sorted(value, key=lambda lvl: lvl.level))

    def applies_to_language(self, repo_language: Optional[ProgrammingLanguage]) -> bool:
        if not self.languages or repo_language is None:
            return True
        return repo_language in self.languages

    def can_be_auto_detected(self) -> bool:
        return self.detection_type.can_auto_detect()

    def can_be_manually_approved(self) -> bool:
        return self.detection_type.can_manually_approve()

    def definition(self) -> QuestDefinition:
        return QuestDefinition(key=self.key, levels=self.levels)

    def activate(self) -> "Quest":
        return self._replace(active=True)

    def deactivate(self) -> "Quest":
        return self._replace(active=False)

    def update_description(self, description: str) -> "Quest":
        return self._replace(description=description)

    def _replace(self, **changes: Any) -> "Quest":
        # Revalidate so mutators enforce the same rules as construction.
        payload = self.model_dump()
        payload.update(changes)
        payload["updated_at"] = _now()
        return Quest.model_validate(payload)
