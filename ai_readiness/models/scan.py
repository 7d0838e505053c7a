"""Scan run data models."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

MIN_SHA_LENGTH = 7
MAX_SHA_LENGTH = 40
_HEX_PATTERN = re.compile(r"^[0-9a-fA-F]+$")


def validate_commit_sha(value: str) -> str:
    """Return the trimmed SHA or raise ``ValueError`` when it is not 7-40 hex characters."""

    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Commit SHA cannot be empty")
    if len(trimmed) < MIN_SHA_LENGTH:
        raise ValueError(f"Commit SHA must be at least {MIN_SHA_LENGTH} characters")
    if len(trimmed) > MAX_SHA_LENGTH:
        raise ValueError(f"Commit SHA must not exceed {MAX_SHA_LENGTH} characters")
    if not _HEX_PATTERN.match(trimmed):
        raise ValueError("Commit SHA must contain only hexadecimal characters")
    return trimmed


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ScanResult(BaseModel):
    """Raw measurement reported by the scanner for one quest key."""

    model_config = ConfigDict(frozen=True)

    data: dict[str, Any] = Field(default_factory=dict)

    def indicates_pass(self) -> bool:
        """Legacy pass heuristic used for quests that define no levels."""

        data = self.data
        if data.get("passed") is True or data.get("present") is True or data.get("available") is True:
            return True
        count = data.get("count")
        return is_number(count) and count > 0


class ScanRunSummary(BaseModel):
    """The part of a scan run the readiness engine reads."""

    model_config = ConfigDict(frozen=True)

    id: str
    repo_id: str
    team_id: str
    scanned_at: datetime
    quest_results: dict[str, ScanResult] = Field(default_factory=dict)

    def get_scan_result(self, quest_key: str) -> Optional[ScanResult]:
        return self.quest_results.get(quest_key)

    def total_quests(self) -> int:
        return len(self.quest_results)

    def passed_quests(self) -> list[str]:
        return [key for key, result in self.quest_results.items() if result.indicates_pass()]

    def failed_quests(self) -> list[str]:
        return [key for key, result in self.quest_results.items() if not result.indicates_pass()]


class ScanRun(ScanRunSummary):
    """One ingestion event with its provenance; immutable once created."""

    commit_sha: str
    ref_name: str
    provider_run_id: str
    run_url: str
    workflow_version: str

    @field_validator("id", "ref_name", "provider_run_id", "run_url", "workflow_version", mode="before")
    @classmethod
    def _strip_required_text(cls, value: Any, info: ValidationInfo) -> Any:
        if not isinstance(value, str):
            return value
        trimmed = value.strip()
        if not trimmed:
            raise ValueError(f"{info.field_name} cannot be empty")
        return trimmed

    @field_validator("commit_sha", mode="before")
    @classmethod
    def _commit_sha(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return validate_commit_sha(value)
