"""Service orchestration for readiness computation and manual approvals."""

from __future__ import annotations

import logging
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Optional

from ai_readiness.core.config import settings
from ai_readiness.core.errors import BusinessRuleViolation, EntityNotFoundError
from ai_readiness.core.identifiers import new_event_id
from ai_readiness.models.quest import ProgrammingLanguage, QuestDefinition
from ai_readiness.models.readiness import ManualEntry, RepoReadiness
from ai_readiness.models.scan import ScanRunSummary
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.telemetry import (
    EventSink,
    NullEventSink,
    increment_manual_approval,
    record_computation_duration,
    record_quest_statuses,
)

_logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ReadinessService:
    """Loads, computes and persists readiness snapshots.

    Each operation is a read-modify-write of the repository's latest snapshot
    with no concurrency guard; the last save wins.
    """

    def __init__(self, store: RedisWarehouse, sink: EventSink | None = None) -> None:
        self._store = store
        self._sink = sink or NullEventSink()

    def auto_detectable_catalog(self, language: Optional[ProgrammingLanguage]) -> dict[str, QuestDefinition]:
        """Active quests the scanner may complete for a repository in ``language``."""

        return {
            quest.key: quest.definition()
            for quest in self._store.find_active_quests_for_language(language)
            if quest.can_be_auto_detected()
        }

    def compute_for_scan_run(
        self,
        scan_run: ScanRunSummary,
        language: Optional[ProgrammingLanguage] = None,
    ) -> RepoReadiness:
        started = time.perf_counter()
        catalog = self.auto_detectable_catalog(language)
        existing = self._store.get_readiness(scan_run.repo_id)

        ignored = [key for key in scan_run.quest_results if key not in catalog]
        if ignored:
            _logger.warning(
                "Scan run %s reported %d quest(s) outside the applicable catalog: %s",
                scan_run.id,
                len(ignored),
                ", ".join(sorted(ignored)),
            )

        readiness = RepoReadiness.compute_from_scan_run(scan_run, catalog, existing)
        self._store.save_readiness(readiness)
        _logger.info(
            "Saved readiness for %s from scan run %s (%d quests, %d%% complete)",
            readiness.repo_id,
            scan_run.id,
            readiness.total_quests(),
            readiness.completion_percentage(),
        )

        statuses = Counter(entry.status.value for entry in readiness.quests.values())
        record_quest_statuses(dict(statuses))
        record_computation_duration(time.perf_counter() - started)
        self._publish(
            {
                "event_type": "readiness_computed",
                "repo_id": readiness.repo_id,
                "team_id": readiness.team_id,
                "scan_run_id": scan_run.id,
                "total_quests": readiness.total_quests(),
                "completed_quests": len(readiness.completed_quests()),
                "completion_percentage": readiness.completion_percentage(),
            }
        )
        return readiness

    def get_readiness(self, repo_id: str) -> RepoReadiness | None:
        return self._store.get_readiness(repo_id)

    def approve_quest(
        self,
        *,
        repo_id: str,
        team_id: str,
        quest_key: str,
        approved_by: str,
        level: int | None = None,
    ) -> RepoReadiness:
        self._require_team_repo(team_id, repo_id)

        quest = self._store.get_quest(quest_key)
        if quest is None:
            raise EntityNotFoundError("Quest", quest_key)
        if not quest.can_be_manually_approved():
            raise BusinessRuleViolation("Quest does not allow manual approval")

        readiness = self._store.get_readiness(repo_id) or RepoReadiness.create_empty(repo_id, team_id)
        approval_level = level if level is not None else settings.default_manual_approval_level
        readiness = readiness.approve_quest_manually(quest_key, approved_by, approval_level)
        self._store.save_readiness(readiness)
        _logger.info("Quest %s approved for %s by %s at level %d", quest_key, repo_id, approved_by, approval_level)

        increment_manual_approval("approve")
        self._publish(
            {
                "event_type": "quest_approved",
                "repo_id": repo_id,
                "team_id": team_id,
                "quest_key": quest_key,
                "approved_by": approved_by,
                "level": approval_level,
            }
        )
        return readiness

    def revoke_quest_approval(self, *, repo_id: str, team_id: str, quest_key: str) -> RepoReadiness:
        self._require_team_repo(team_id, repo_id)

        readiness = self._store.get_readiness(repo_id)
        if readiness is None:
            raise EntityNotFoundError("Readiness", repo_id)
        entry = readiness.get_quest_status(quest_key)
        readiness = readiness.revoke_manual_approval(quest_key)
        self._store.save_readiness(readiness)
        _logger.info("Manual approval of %s revoked for %s", quest_key, repo_id)

        increment_manual_approval("revoke")
        self._publish(
            {
                "event_type": "quest_approval_revoked",
                "repo_id": repo_id,
                "team_id": team_id,
                "quest_key": quest_key,
                "approved_by": entry.manual_approval.approved_by if isinstance(entry, ManualEntry) else None,
            }
        )
        return readiness

    def _require_team_repo(self, team_id: str, repo_id: str) -> None:
        team = self._store.get_team(team_id)
        if team is None:
            raise EntityNotFoundError("Team", team_id)
        if not team.has_repo(repo_id):
            raise EntityNotFoundError("Repo", repo_id)

    def _publish(self, event: dict) -> None:
        event = {"event_id": new_event_id(), "timestamp": _now().isoformat(), **event}
        try:
            self._sink.publish(event)
        except Exception:  # pragma: no cover
            _logger.warning("Failed to publish %s event", event["event_type"], exc_info=True)
