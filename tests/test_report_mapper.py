from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ai_readiness.models.quest import ProgrammingLanguage
from ai_readiness.schemas.ingest import IngestScanRequest
from ai_readiness.services.report_mapper import extract_quest_results, extract_repo_metadata
from tests.reports import sample_report


def test_repo_metadata_extraction():
    report = IngestScanRequest.model_validate(sample_report())

    metadata = extract_repo_metadata(report)

    assert metadata.owner == "Acme"
    assert metadata.name == "shop"
    assert metadata.full_name == "Acme/shop"
    assert metadata.default_branch == "main"
    assert metadata.provider_run_id == "9876"
    assert metadata.primary_language is ProgrammingLanguage.TYPESCRIPT
    assert metadata.scanned_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_naive_timestamp_is_treated_as_utc():
    report = IngestScanRequest.model_validate(sample_report(timestamp="2024-05-01T12:00:00"))

    assert extract_repo_metadata(report).scanned_at.tzinfo is timezone.utc


def test_unsupported_language_is_dropped():
    report = IngestScanRequest.model_validate(sample_report(languages={"primary": "rust"}))

    assert extract_repo_metadata(report).primary_language is None


@pytest.mark.parametrize("name", ["shop", "acme/shop/extra", "/shop", "acme/"])
def test_malformed_repository_name_is_rejected(name):
    report = sample_report()
    report["metadata"]["repository"]["name"] = name

    with pytest.raises(ValueError):
        extract_repo_metadata(IngestScanRequest.model_validate(report))


def test_checks_map_to_quest_keys():
    report = IngestScanRequest.model_validate(sample_report())

    results = extract_quest_results(report.checks)

    assert {key: result.data for key, result in results.items()} == {
        "docs.agents_md_present": {"present": True},
        "docs.skill_md_count": {"count": 2},
        "formatters.javascript.prettier_present": {"present": True},
        "linting.javascript.eslint_present": {"present": False},
        "sast.codeql_present": {"present": True},
        "sast.semgrep_present": {"present": False},
        "quality.coverage_available": {"available": True},
        "quality.coverage_threshold_met": {"meets_threshold": False, "passed": False, "score": 61.5},
    }


def test_absent_sections_produce_no_results():
    report = sample_report()
    report["checks"] = {"sast": {"codeql": {"present": True}}}

    results = extract_quest_results(IngestScanRequest.model_validate(report).checks)

    assert list(results) == ["sast.codeql_present"]
