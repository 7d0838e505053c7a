"""Redis-backed persistence layer for quests, scan runs, teams and readiness."""

from __future__ import annotations

import json
import logging
from typing import Iterable, Optional

from redis import Redis

from ai_readiness.models.quest import ProgrammingLanguage, Quest
from ai_readiness.models.readiness import CompletionSource, RepoReadiness
from ai_readiness.models.scan import ScanRun
from ai_readiness.models.team import Team

_logger = logging.getLogger(__name__)


class RedisWarehouse:
    """Stores the quest catalog, scan runs, teams and readiness snapshots in Redis.

    Readiness is kept as a single "latest" document per repository and every
    save replaces it whole. There is no version check, so two concurrent
    ingestions for the same repository resolve as last writer wins.
    """

    def __init__(self, client: Redis) -> None:
        self._client = client

    # Quest catalog

    def save_quest(self, quest: Quest) -> None:
        self._client.set(self._quest_key(quest.key), quest.model_dump_json())
        self._client.sadd("quest:index", quest.key)

    def save_quests(self, quests: Iterable[Quest]) -> None:
        pipeline = self._client.pipeline()
        for quest in quests:
            pipeline.set(self._quest_key(quest.key), quest.model_dump_json())
            pipeline.sadd("quest:index", quest.key)
        pipeline.execute()

    def get_quest(self, key: str) -> Optional[Quest]:
        data = self._client.get(self._quest_key(key))
        if not data:
            return None
        return Quest.model_validate_json(data)

    def list_quests(self) -> list[Quest]:
        keys = sorted(self._client.smembers("quest:index"))
        if not keys:
            return []
        pipeline = self._client.pipeline()
        for key in keys:
            pipeline.get(self._quest_key(key))
        quests: list[Quest] = []
        for blob in pipeline.execute():
            if blob:
                quests.append(Quest.model_validate_json(blob))
        return quests

    def list_active_quests(self) -> list[Quest]:
        return [quest for quest in self.list_quests() if quest.active]

    def find_active_quests_for_language(self, language: Optional[ProgrammingLanguage]) -> list[Quest]:
        return [quest for quest in self.list_active_quests() if quest.applies_to_language(language)]

    # Scan runs

    def save_scan_run(self, scan_run: ScanRun) -> None:
        self._client.set(self._scan_run_key(scan_run.id), scan_run.model_dump_json())
        self._client.zadd(
            self._repo_scan_index_key(scan_run.repo_id),
            {scan_run.id: scan_run.scanned_at.timestamp()},
        )

    def get_scan_run(self, scan_run_id: str) -> Optional[ScanRun]:
        data = self._client.get(self._scan_run_key(scan_run_id))
        if not data:
            return None
        return ScanRun.model_validate_json(data)

    def list_scan_runs(self, repo_id: str, limit: Optional[int] = None) -> list[ScanRun]:
        if limit is not None and limit <= 0:
            return []
        end = -1 if limit is None else limit - 1
        ids = self._client.zrevrange(self._repo_scan_index_key(repo_id), 0, end)
        runs = [self.get_scan_run(scan_run_id) for scan_run_id in ids]
        return [run for run in runs if run is not None]

    def get_latest_scan_run(self, repo_id: str) -> Optional[ScanRun]:
        runs = self.list_scan_runs(repo_id, limit=1)
        return runs[0] if runs else None

    # Teams

    def save_team(self, team: Team) -> None:
        self._client.set(self._team_key(team.id), team.model_dump_json())
        self._client.set(self._team_slug_key(team.slug), team.id)

    def get_team(self, team_id: str) -> Optional[Team]:
        data = self._client.get(self._team_key(team_id))
        if not data:
            return None
        return Team.model_validate_json(data)

    def find_team_by_slug(self, slug: str) -> Optional[Team]:
        team_id = self._client.get(self._team_slug_key(slug))
        if not team_id:
            return None
        return self.get_team(team_id)

    # Readiness snapshots

    def save_readiness(self, readiness: RepoReadiness) -> None:
        document = readiness.to_document()
        self._client.set(self._readiness_key(readiness.repo_id), json.dumps(document, sort_keys=True))

    def get_readiness(self, repo_id: str) -> Optional[RepoReadiness]:
        data = self._client.get(self._readiness_key(repo_id))
        if not data:
            return None
        return self._readiness_from_document(json.loads(data))

    @staticmethod
    def _readiness_from_document(document: dict) -> RepoReadiness:
        quests = document.get("quests") or {}
        for key, entry in quests.items():
            # Documents written before manual approvals existed have no source.
            if "completionSource" not in entry:
                _logger.debug("Defaulting completion source for legacy entry %s", key)
                entry["completionSource"] = CompletionSource.AUTOMATIC.value
        return RepoReadiness.model_validate(document)

    @staticmethod
    def _quest_key(key: str) -> str:
        return f"quest:{key}"

    @staticmethod
    def _scan_run_key(scan_run_id: str) -> str:
        return f"scanrun:{scan_run_id}"

    @staticmethod
    def _repo_scan_index_key(repo_id: str) -> str:
        return f"repo:{repo_id}:scanruns"

    @staticmethod
    def _team_key(team_id: str) -> str:
        return f"team:{team_id}"

    @staticmethod
    def _team_slug_key(slug: str) -> str:
        return f"team:slug:{slug}"

    @staticmethod
    def _readiness_key(repo_id: str) -> str:
        return f"repo:{repo_id}:readiness:latest"
