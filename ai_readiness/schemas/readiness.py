"""API schemas for readiness snapshots and manual approvals."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ai_readiness.models.readiness import CompletionSource, ManualEntry, ReadinessStatus, RepoReadiness


class ManualApprovalPayload(BaseModel):
    approved_by: str
    approved_at: datetime
    revoked_at: Optional[datetime] = None


class QuestReadinessPayload(BaseModel):
    status: ReadinessStatus
    level: int
    last_seen_at: datetime
    completion_source: CompletionSource
    manual_approval: Optional[ManualApprovalPayload] = None


class ReadinessResponse(BaseModel):
    """Response body for GET /v1/repos/{repo_id}/readiness."""

    repo_id: str
    team_id: str
    computed_from_scan_run_id: str
    updated_at: datetime
    completion_percentage: int
    quests: dict[str, QuestReadinessPayload] = Field(default_factory=dict)

    @classmethod
    def from_readiness(cls, readiness: RepoReadiness) -> "ReadinessResponse":
        quests: dict[str, QuestReadinessPayload] = {}
        for key, entry in readiness.quests.items():
            approval = None
            if isinstance(entry, ManualEntry):
                approval = ManualApprovalPayload(**entry.manual_approval.model_dump())
            quests[key] = QuestReadinessPayload(
                status=entry.status,
                level=entry.level,
                last_seen_at=entry.last_seen_at,
                completion_source=entry.completion_source,
                manual_approval=approval,
            )
        return cls(
            repo_id=readiness.repo_id,
            team_id=readiness.team_id,
            computed_from_scan_run_id=readiness.computed_from_scan_run_id,
            updated_at=readiness.updated_at,
            completion_percentage=readiness.completion_percentage(),
            quests=quests,
        )


class ApproveQuestRequest(BaseModel):
    """Request body for POST /v1/repos/{repo_id}/quests/approve."""

    team_id: str = Field(..., min_length=1)
    quest_key: str = Field(..., min_length=1)
    approved_by: str = Field(..., min_length=1)
    level: Optional[int] = Field(None, ge=1, description="Defaults to the configured manual approval level.")


class ApproveQuestResponse(BaseModel):
    repo_id: str
    team_id: str
    quest_key: str
    level: int
    approved_by: str
    approved_at: datetime
