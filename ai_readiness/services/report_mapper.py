"""Maps scanner reports onto repository metadata and quest-keyed measurements."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from ai_readiness.models.quest import ProgrammingLanguage
from ai_readiness.models.scan import ScanResult
from ai_readiness.schemas.ingest import IngestScanRequest, ReportChecks

BRANCH_PREFIX = "refs/heads/"


class RepoMetadata(BaseModel):
    """Repository and run context extracted from a scanner report."""

    owner: str
    name: str
    full_name: str
    url: str
    commit_sha: str
    ref_name: str
    provider_run_id: str
    run_url: str
    workflow_version: str
    scanned_at: datetime
    primary_language: Optional[ProgrammingLanguage] = None

    @property
    def default_branch(self) -> str:
        if self.ref_name.startswith(BRANCH_PREFIX):
            return self.ref_name[len(BRANCH_PREFIX):]
        return self.ref_name


def extract_repo_metadata(report: IngestScanRequest) -> RepoMetadata:
    repository = report.metadata.repository
    parts = repository.name.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError('Invalid repository name format: expected "owner/repo-name"')

    scanned_at = report.metadata.timestamp
    if scanned_at.tzinfo is None:
        scanned_at = scanned_at.replace(tzinfo=timezone.utc)

    languages = report.metadata.languages
    return RepoMetadata(
        owner=parts[0],
        name=parts[1],
        full_name=repository.name,
        url=repository.url,
        commit_sha=repository.commit_sha,
        ref_name=repository.branch,
        provider_run_id=repository.run_id,
        run_url=repository.run_url,
        workflow_version=report.metadata.workflow_version,
        scanned_at=scanned_at,
        primary_language=ProgrammingLanguage.from_string(languages.primary if languages else None),
    )


def extract_quest_results(checks: ReportChecks) -> dict[str, ScanResult]:
    """Flatten the nested report checks into quest-keyed measurements.

    Only checks present in the report produce a measurement; absent sections
    leave their quests unknown.
    """

    results: dict[str, ScanResult] = {}

    documentation = checks.documentation
    if documentation is not None:
        if documentation.agents_md is not None:
            results["docs.agents_md_present"] = ScanResult(data={"present": documentation.agents_md.present})
        if documentation.skill_md is not None:
            results["docs.skill_md_count"] = ScanResult(data={"count": documentation.skill_md.count})

    if checks.formatters is not None and checks.formatters.javascript is not None:
        prettier = checks.formatters.javascript.prettier
        if prettier is not None:
            results["formatters.javascript.prettier_present"] = ScanResult(data={"present": prettier.present})

    if checks.linting is not None and checks.linting.javascript is not None:
        eslint = checks.linting.javascript.eslint
        if eslint is not None:
            results["linting.javascript.eslint_present"] = ScanResult(data={"present": eslint.present})

    sast = checks.sast
    if sast is not None:
        if sast.codeql is not None:
            results["sast.codeql_present"] = ScanResult(data={"present": sast.codeql.present})
        if sast.semgrep is not None:
            results["sast.semgrep_present"] = ScanResult(data={"present": sast.semgrep.present})

    coverage = checks.test_coverage
    if coverage is not None:
        if coverage.available is not None:
            results["quality.coverage_available"] = ScanResult(data={"available": coverage.available})
        if coverage.meets_threshold is not None:
            # Mirrored into "passed" for the pass condition.
            data: dict = {"meets_threshold": coverage.meets_threshold, "passed": coverage.meets_threshold}
            if coverage.coverage is not None and coverage.coverage.lines is not None:
                data["score"] = coverage.coverage.lines.percentage
            results["quality.coverage_threshold_met"] = ScanResult(data=data)

    return results
