from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import fakeredis

from ai_readiness.models.quest import ProgrammingLanguage, QuestCondition, QuestLevel
from ai_readiness.models.readiness import AutomaticEntry, RepoReadiness
from ai_readiness.models.scan import ScanResult, ScanRun
from ai_readiness.models.team import RepoRecord, Team
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.services.catalog import build_seed_quests, seed_catalog

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _store() -> RedisWarehouse:
    return RedisWarehouse(fakeredis.FakeRedis(decode_responses=True))


def _scan_run(run_id: str, scanned_at: datetime) -> ScanRun:
    return ScanRun(
        id=run_id,
        repo_id="repo_acme_shop",
        team_id="team_acme",
        commit_sha="a1b2c3d",
        ref_name="refs/heads/main",
        provider_run_id=run_id,
        run_url=f"https://ci.example.com/{run_id}",
        workflow_version="1.0.0",
        scanned_at=scanned_at,
        quest_results={"docs.agents_md_present": ScanResult(data={"present": True})},
    )


def test_quest_round_trip_and_language_filter():
    store = _store()
    store.save_quests(build_seed_quests())
    store.save_quest(store.get_quest("sast.semgrep_present").deactivate())

    assert len(store.list_quests()) == 8
    active = {quest.key for quest in store.list_active_quests()}
    assert "sast.semgrep_present" not in active
    java = {quest.key for quest in store.find_active_quests_for_language(ProgrammingLanguage.JAVA)}
    assert "formatters.javascript.prettier_present" not in java
    assert "docs.agents_md_present" in java
    assert store.get_quest("missing") is None


def test_seed_catalog_is_idempotent():
    store = _store()

    assert seed_catalog(store) == (8, 0)
    assert seed_catalog(store) == (0, 8)


def test_scan_runs_are_listed_newest_first():
    store = _store()
    store.save_scan_run(_scan_run("old", NOW))
    store.save_scan_run(_scan_run("new", NOW + timedelta(hours=1)))

    assert [run.id for run in store.list_scan_runs("repo_acme_shop")] == ["new", "old"]
    assert store.get_latest_scan_run("repo_acme_shop").id == "new"
    assert store.get_scan_run("old").commit_sha == "a1b2c3d"
    assert store.get_latest_scan_run("repo_other") is None


def test_non_positive_limit_lists_no_scan_runs():
    store = _store()
    store.save_scan_run(_scan_run("only", NOW))

    assert store.list_scan_runs("repo_acme_shop", limit=0) == []
    assert store.list_scan_runs("repo_acme_shop", limit=-1) == []
    assert [run.id for run in store.list_scan_runs("repo_acme_shop", limit=1)] == ["only"]


def test_team_lookup_by_slug():
    store = _store()
    repo = RepoRecord(
        id="repo_acme_shop",
        team_id="team_acme",
        full_name="acme/shop",
        url="https://github.com/acme/shop",
        default_branch="main",
    )
    store.save_team(Team(id="team_acme", name="Acme", slug="acme").with_repo(repo))

    team = store.find_team_by_slug("acme")
    assert team is not None
    assert team.get_repo("repo_acme_shop") == repo
    assert store.find_team_by_slug("globex") is None


def test_readiness_round_trip():
    store = _store()
    readiness = RepoReadiness.create_empty("repo_acme_shop", "team_acme", now=NOW).approve_quest_manually(
        "sast.codeql_present", "alice", now=NOW
    )

    store.save_readiness(readiness)

    assert store.get_readiness("repo_acme_shop") == readiness
    assert store.get_readiness("repo_other") is None


def test_legacy_documents_default_to_automatic_source():
    client = fakeredis.FakeRedis(decode_responses=True)
    document = {
        "repoId": "repo_acme_shop",
        "teamId": "team_acme",
        "computedFromScanRunId": "scanrun_1",
        "updatedAt": NOW.isoformat(),
        "quests": {"docs.agents_md_present": {"status": "complete", "level": 1, "lastSeenAt": NOW.isoformat()}},
    }
    client.set("repo:repo_acme_shop:readiness:latest", json.dumps(document))

    readiness = RedisWarehouse(client).get_readiness("repo_acme_shop")

    assert isinstance(readiness.get_quest_status("docs.agents_md_present"), AutomaticEntry)


def test_catalog_with_threshold_free_condition_still_loads():
    store = _store()
    seed_catalog(store)
    quest = store.get_quest("docs.skill_md_count")
    broken = quest.model_copy(update={"levels": (QuestLevel(level=1, condition=QuestCondition(type="count")),)})
    store.save_quest(broken)

    assert store.get_quest("docs.skill_md_count").levels[0].condition.min is None
    assert len(store.list_active_quests()) == 8
