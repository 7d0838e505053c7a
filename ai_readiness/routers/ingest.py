"""API routes for scan report ingestion."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from ai_readiness.core.config import settings
from ai_readiness.dependencies import get_ingestion_service
from ai_readiness.schemas.ingest import IngestScanRequest, IngestScanResponse
from ai_readiness.services.ingestion import IngestionService

_logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.api_v1_prefix, tags=["ingest"])


@router.post("/ingest-scan", response_model=IngestScanResponse)
def ingest_scan(
    payload: IngestScanRequest,
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> IngestScanResponse:
    try:
        result = ingestion_service.ingest_report(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    repo_id = result.scan_run.repo_id
    return IngestScanResponse(
        scan_run_id=result.scan_run.id,
        team_id=result.scan_run.team_id,
        repo_id=repo_id,
        summary=result.summary,
        readiness_url=f"{settings.service_base_url}{settings.api_v1_prefix}/repos/{repo_id}/readiness",
    )
