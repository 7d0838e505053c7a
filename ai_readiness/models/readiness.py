"""Readiness snapshot model and the computation engine.

A snapshot is the latest per-repository view of quest completion. It is
rebuilt from every scan run, but entries a person approved by hand survive
scans until the approval is revoked. All operations return new snapshots; a
snapshot is never modified in place.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ai_readiness.core.errors import BusinessRuleViolation
from ai_readiness.models.quest import ConditionType, QuestCondition, QuestDefinition
from ai_readiness.models.scan import ScanResult, ScanRunSummary, is_number

MANUAL_APPROVAL_SCAN_RUN_ID = "manual_approval"
PERCENTAGE_FACTOR = 100


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ReadinessStatus(str, Enum):
    """Completion state of a single quest for a repository."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    UNKNOWN = "unknown"


class CompletionSource(str, Enum):
    """Where a quest entry's completion came from."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ManualApproval(_SnapshotModel):
    """Who approved a quest by hand, and when."""

    approved_by: str
    approved_at: datetime
    revoked_at: Optional[datetime] = None


class _EntryBase(_SnapshotModel):
    status: ReadinessStatus
    level: int = Field(..., ge=1)
    last_seen_at: datetime


class AutomaticEntry(_EntryBase):
    """Entry derived from a scan run."""

    model_config = ConfigDict(extra="forbid")

    completion_source: Literal["automatic"] = "automatic"


class ManualEntry(_EntryBase):
    """Entry asserted by a person; carries the approval metadata."""

    completion_source: Literal["manual"] = "manual"
    manual_approval: ManualApproval

    def is_active(self) -> bool:
        return self.manual_approval.revoked_at is None


QuestReadinessEntry = Annotated[
    Union[AutomaticEntry, ManualEntry],
    Field(discriminator="completion_source"),
]


def condition_satisfied(condition: QuestCondition, result: ScanResult) -> bool:
    """Evaluate one level condition against a scan measurement.

    Unknown condition types are never satisfied.
    """

    data = result.data
    if condition.type == ConditionType.PASS.value:
        return data.get("passed") is True or data.get("present") is True or data.get("available") is True
    if condition.type == ConditionType.EXISTS.value:
        return data.get("present") is True
    if condition.type == ConditionType.COUNT.value:
        count = data.get("count")
        return condition.min is not None and is_number(count) and count >= condition.min
    if condition.type == ConditionType.SCORE.value:
        score = data.get("score")
        return condition.min is not None and is_number(score) and score >= condition.min
    return False


def achieved_level(quest: QuestDefinition, result: ScanResult) -> int:
    """Highest level whose condition holds, or 0 when none does."""

    if quest.levels:
        best = 0
        for level in quest.levels:
            if condition_satisfied(level.condition, result):
                best = max(best, level.level)
        return best
    # Quests without levels predate the level model.
    return 1 if result.indicates_pass() else 0


def _automatic_entry(quest: QuestDefinition, result: ScanResult, scanned_at: datetime) -> AutomaticEntry:
    level = achieved_level(quest, result)
    if level > 0:
        return AutomaticEntry(status=ReadinessStatus.COMPLETE, level=level, last_seen_at=scanned_at)
    # Incomplete entries still need a level; 1 is a placeholder.
    return AutomaticEntry(status=ReadinessStatus.INCOMPLETE, level=1, last_seen_at=scanned_at)


class RepoReadiness(_SnapshotModel):
    """Latest readiness snapshot for a repository."""

    repo_id: str
    team_id: str
    computed_from_scan_run_id: str
    updated_at: datetime
    quests: dict[str, QuestReadinessEntry] = Field(default_factory=dict)

    @classmethod
    def compute_from_scan_run(
        cls,
        scan_run: ScanRunSummary,
        quest_catalog: Mapping[str, QuestDefinition],
        existing: Optional["RepoReadiness"] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "RepoReadiness":
        """Merge a scan run into a new snapshot.

        ``quest_catalog`` must already be restricted to quests that can be
        auto-detected for the repository's language. Unrevoked manual entries
        from ``existing`` are carried forward and win over scan results.
        """

        quests: dict[str, QuestReadinessEntry] = {}
        if existing is not None:
            for key, entry in existing.quests.items():
                if isinstance(entry, ManualEntry) and entry.is_active():
                    quests[key] = entry

        for key, result in scan_run.quest_results.items():
            quest = quest_catalog.get(key)
            if quest is None:
                continue
            if key in quests:
                continue
            quests[key] = _automatic_entry(quest, result, scan_run.scanned_at)

        return cls(
            repo_id=scan_run.repo_id,
            team_id=scan_run.team_id,
            computed_from_scan_run_id=scan_run.id,
            updated_at=now or _now(),
            quests=quests,
        )

    @classmethod
    def create_empty(cls, repo_id: str, team_id: str, *, now: Optional[datetime] = None) -> "RepoReadiness":
        return cls(
            repo_id=repo_id,
            team_id=team_id,
            computed_from_scan_run_id=MANUAL_APPROVAL_SCAN_RUN_ID,
            updated_at=now or _now(),
            quests={},
        )

    def approve_quest_manually(
        self,
        quest_key: str,
        approved_by: str,
        level: int = 1,
        *,
        now: Optional[datetime] = None,
    ) -> "RepoReadiness":
        """Return a snapshot where ``quest_key`` is complete by manual approval.

        Any existing entry for the key, automatic or manual, is replaced.
        """

        timestamp = now or _now()
        entry = ManualEntry(
            status=ReadinessStatus.COMPLETE,
            level=level,
            last_seen_at=timestamp,
            manual_approval=ManualApproval(approved_by=approved_by, approved_at=timestamp),
        )
        quests = dict(self.quests)
        quests[quest_key] = entry
        return self.model_copy(update={"quests": quests, "updated_at": timestamp})

    def revoke_manual_approval(self, quest_key: str, *, now: Optional[datetime] = None) -> "RepoReadiness":
        """Return a snapshot without the manual entry for ``quest_key``.

        The entry is removed outright, so the quest reads as unknown until a
        later scan reports it.
        """

        entry = self.quests.get(quest_key)
        if not isinstance(entry, ManualEntry):
            raise BusinessRuleViolation("Cannot revoke non-manually approved quest")
        quests = {key: value for key, value in self.quests.items() if key != quest_key}
        return self.model_copy(update={"quests": quests, "updated_at": now or _now()})

    def get_quest_status(self, quest_key: str) -> Optional[QuestReadinessEntry]:
        return self.quests.get(quest_key)

    def completed_quests(self) -> list[str]:
        return [key for key, entry in self.quests.items() if entry.status == ReadinessStatus.COMPLETE]

    def incomplete_quests(self) -> list[str]:
        return [key for key, entry in self.quests.items() if entry.status == ReadinessStatus.INCOMPLETE]

    def total_quests(self) -> int:
        return len(self.quests)

    def completion_percentage(self) -> int:
        total = self.total_quests()
        if total == 0:
            return 0
        return math.floor(len(self.completed_quests()) / total * PERCENTAGE_FACTOR + 0.5)

    def to_document(self) -> dict:
        """Serialise to the persisted camelCase document shape."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
