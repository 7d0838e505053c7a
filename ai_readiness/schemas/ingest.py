"""API schemas for scan report ingestion.

The request body mirrors the JSON report written by the AI-readiness scanner
action, so field names follow the scanner's snake_case layout.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RepositoryPayload(BaseModel):
    name: str = Field(..., description="Repository identifier in {owner}/{repo} form.")
    url: str
    commit_sha: str
    branch: str
    run_id: str
    run_url: str


class LanguagesPayload(BaseModel):
    primary: Optional[str] = None


class ReportMetadataPayload(BaseModel):
    repository: RepositoryPayload
    timestamp: datetime
    workflow_version: str
    languages: Optional[LanguagesPayload] = None


class PresencePayload(BaseModel):
    present: bool


class CountPayload(BaseModel):
    count: int


class DocumentationChecks(BaseModel):
    agents_md: Optional[PresencePayload] = None
    skill_md: Optional[CountPayload] = None


class JavascriptFormatters(BaseModel):
    prettier: Optional[PresencePayload] = None


class FormatterChecks(BaseModel):
    javascript: Optional[JavascriptFormatters] = None


class JavascriptLinters(BaseModel):
    eslint: Optional[PresencePayload] = None


class LintingChecks(BaseModel):
    javascript: Optional[JavascriptLinters] = None


class SastChecks(BaseModel):
    codeql: Optional[PresencePayload] = None
    semgrep: Optional[PresencePayload] = None


class CoverageLines(BaseModel):
    percentage: float


class CoverageDetail(BaseModel):
    lines: Optional[CoverageLines] = None


class TestCoverageChecks(BaseModel):
    available: Optional[bool] = None
    meets_threshold: Optional[bool] = None
    coverage: Optional[CoverageDetail] = None


class ReportChecks(BaseModel):
    documentation: Optional[DocumentationChecks] = None
    formatters: Optional[FormatterChecks] = None
    linting: Optional[LintingChecks] = None
    sast: Optional[SastChecks] = None
    test_coverage: Optional[TestCoverageChecks] = None


class IngestScanRequest(BaseModel):
    """Request body for POST /v1/ingest-scan."""

    metadata: ReportMetadataPayload
    checks: ReportChecks = Field(default_factory=ReportChecks)


class IngestionSummary(BaseModel):
    total_quests: int
    passed_quests: int
    failed_quests: int


class IngestScanResponse(BaseModel):
    """Response body acknowledging a scan ingestion."""

    scan_run_id: str
    team_id: str
    repo_id: str
    summary: IngestionSummary
    readiness_url: str
