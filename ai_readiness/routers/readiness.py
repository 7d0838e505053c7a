"""API routes for readiness snapshots and manual quest approval."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from ai_readiness.core.config import settings
from ai_readiness.core.errors import BusinessRuleViolation, EntityNotFoundError
from ai_readiness.dependencies import get_readiness_service
from ai_readiness.models.readiness import ManualEntry
from ai_readiness.schemas.readiness import (
    ApproveQuestRequest,
    ApproveQuestResponse,
    ReadinessResponse,
)
from ai_readiness.services.readiness import ReadinessService


router = APIRouter(prefix=f"{settings.api_v1_prefix}/repos", tags=["readiness"])


@router.get("/{repo_id}/readiness", response_model=ReadinessResponse)
def get_repo_readiness(
    repo_id: str,
    readiness_service: ReadinessService = Depends(get_readiness_service),
) -> ReadinessResponse:
    readiness = readiness_service.get_readiness(repo_id)
    if not readiness:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No readiness data found for repository: {repo_id}",
        )
    return ReadinessResponse.from_readiness(readiness)


@router.post("/{repo_id}/quests/approve", response_model=ApproveQuestResponse)
def approve_quest(
    repo_id: str,
    payload: ApproveQuestRequest,
    readiness_service: ReadinessService = Depends(get_readiness_service),
) -> ApproveQuestResponse:
    try:
        readiness = readiness_service.approve_quest(
            repo_id=repo_id,
            team_id=payload.team_id,
            quest_key=payload.quest_key,
            approved_by=payload.approved_by,
            level=payload.level,
        )
    except EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BusinessRuleViolation as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    entry = readiness.get_quest_status(payload.quest_key)
    if not isinstance(entry, ManualEntry):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to approve quest")
    return ApproveQuestResponse(
        repo_id=readiness.repo_id,
        team_id=readiness.team_id,
        quest_key=payload.quest_key,
        level=entry.level,
        approved_by=entry.manual_approval.approved_by,
        approved_at=entry.manual_approval.approved_at,
    )


@router.delete("/{repo_id}/quests/{quest_key}/approval", response_model=ReadinessResponse)
def revoke_quest_approval(
    repo_id: str,
    quest_key: str,
    team_id: str = Query(..., min_length=1),
    readiness_service: ReadinessService = Depends(get_readiness_service),
) -> ReadinessResponse:
    try:
        readiness = readiness_service.revoke_quest_approval(repo_id=repo_id, team_id=team_id, quest_key=quest_key)
    except EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BusinessRuleViolation as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ReadinessResponse.from_readiness(readiness)
