"""Service orchestration for scan report ingestion."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from ai_readiness.core.identifiers import new_scan_run_id
from ai_readiness.models.readiness import RepoReadiness
from ai_readiness.models.scan import ScanRun
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.schemas.ingest import IngestScanRequest, IngestionSummary
from ai_readiness.services.readiness import ReadinessService
from ai_readiness.services.report_mapper import extract_quest_results, extract_repo_metadata
from ai_readiness.services.teams import TeamRepoResolver
from ai_readiness.telemetry import increment_scan_ingestion

_logger = logging.getLogger(__name__)


class IngestionResult(BaseModel):
    scan_run: ScanRun
    readiness: RepoReadiness
    summary: IngestionSummary


class IngestionService:
    """Turns a scanner report into a stored scan run and an updated readiness snapshot."""

    def __init__(
        self,
        store: RedisWarehouse,
        resolver: TeamRepoResolver,
        readiness_service: ReadinessService,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._readiness = readiness_service

    def ingest_report(self, report: IngestScanRequest) -> IngestionResult:
        metadata = extract_repo_metadata(report)
        quest_results = extract_quest_results(report.checks)
        team, repo = self._resolver.resolve(metadata)

        scan_run = ScanRun(
            id=new_scan_run_id(metadata.provider_run_id),
            team_id=team.id,
            repo_id=repo.id,
            commit_sha=metadata.commit_sha,
            ref_name=metadata.ref_name,
            provider_run_id=metadata.provider_run_id,
            run_url=metadata.run_url,
            workflow_version=metadata.workflow_version,
            scanned_at=metadata.scanned_at,
            quest_results=quest_results,
        )
        self._store.save_scan_run(scan_run)
        increment_scan_ingestion()
        _logger.info(
            "Ingested scan run %s for %s at %s with %d quest results",
            scan_run.id,
            repo.full_name,
            scan_run.commit_sha,
            scan_run.total_quests(),
        )

        readiness = self._readiness.compute_for_scan_run(scan_run, repo.primary_language)
        summary = IngestionSummary(
            total_quests=scan_run.total_quests(),
            passed_quests=len(scan_run.passed_quests()),
            failed_quests=len(scan_run.failed_quests()),
        )
        return IngestionResult(scan_run=scan_run, readiness=readiness, summary=summary)
