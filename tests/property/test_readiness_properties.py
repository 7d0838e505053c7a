from datetime import datetime, timezone

from hypothesis import given, strategies as st

from ai_readiness.models.quest import QuestCondition, QuestDefinition, QuestLevel
from ai_readiness.models.readiness import ManualApproval, ManualEntry, ReadinessStatus, RepoReadiness, achieved_level
from ai_readiness.models.scan import ScanResult, ScanRunSummary

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)
QUEST_KEYS = ["docs.agents_md_present", "docs.skill_md_count", "sast.codeql_present", "quality.coverage_available"]

conditions = st.one_of(
    st.just({"type": "pass"}),
    st.just({"type": "exists"}),
    st.builds(lambda threshold: {"type": "count", "min": threshold}, st.integers(min_value=0, max_value=10)),
    st.builds(lambda threshold: {"type": "score", "min": threshold}, st.integers(min_value=0, max_value=100)),
    st.just({"type": "unsupported"}),
    st.just({"type": "count"}),
)

measurements = st.fixed_dictionaries(
    {},
    optional={
        "passed": st.booleans(),
        "present": st.booleans(),
        "available": st.booleans(),
        "count": st.one_of(st.integers(min_value=0, max_value=12), st.booleans()),
        "score": st.floats(min_value=0, max_value=100, allow_nan=False),
    },
)


@st.composite
def quest_definitions(draw, key: str = "quest.under_test"):
    level_numbers = draw(st.lists(st.integers(min_value=1, max_value=5), max_size=4, unique=True))
    levels = tuple(
        QuestLevel(level=number, condition=QuestCondition(**draw(conditions))) for number in sorted(level_numbers)
    )
    return QuestDefinition(key=key, levels=levels)


@st.composite
def scan_runs(draw):
    keys = draw(st.lists(st.sampled_from(QUEST_KEYS + ["unknown.quest"]), unique=True))
    return ScanRunSummary(
        id="scanrun_property",
        repo_id="repo_acme_property",
        team_id="team_acme",
        scanned_at=NOW,
        quest_results={key: ScanResult(data=draw(measurements)) for key in keys},
    )


@st.composite
def catalogs(draw):
    keys = draw(st.lists(st.sampled_from(QUEST_KEYS), unique=True))
    return {key: draw(quest_definitions(key)) for key in keys}


@given(quest_definitions(), measurements)
def test_achieved_level_is_a_declared_level_or_zero(quest, data):
    level = achieved_level(quest, ScanResult(data=data))

    if quest.levels:
        assert level == 0 or level in {lvl.level for lvl in quest.levels}
    else:
        assert level in (0, 1)


@given(scan_runs(), catalogs())
def test_snapshot_only_contains_scanned_catalog_quests(scan_run, catalog):
    readiness = RepoReadiness.compute_from_scan_run(scan_run, catalog, now=NOW)

    assert set(readiness.quests) == set(scan_run.quest_results) & set(catalog)
    for entry in readiness.quests.values():
        assert entry.level >= 1
        assert entry.status in (ReadinessStatus.COMPLETE, ReadinessStatus.INCOMPLETE)
    assert 0 <= readiness.completion_percentage() <= 100


@given(scan_runs(), catalogs())
def test_computation_is_deterministic(scan_run, catalog):
    first = RepoReadiness.compute_from_scan_run(scan_run, catalog, now=NOW)
    second = RepoReadiness.compute_from_scan_run(scan_run, catalog, now=NOW)

    assert first.to_document() == second.to_document()


@given(scan_runs(), catalogs(), st.lists(st.sampled_from(QUEST_KEYS), unique=True))
def test_manual_approvals_always_survive_scans(scan_run, catalog, approved_keys):
    existing = RepoReadiness.create_empty("repo_acme_property", "team_acme", now=NOW)
    for key in approved_keys:
        existing = existing.approve_quest_manually(key, "reviewer", level=2, now=NOW)

    readiness = RepoReadiness.compute_from_scan_run(scan_run, catalog, existing, now=NOW)

    for key in approved_keys:
        entry = readiness.get_quest_status(key)
        assert isinstance(entry, ManualEntry)
        assert entry.status == ReadinessStatus.COMPLETE
        assert entry.level == 2


@given(scan_runs(), catalogs(), st.lists(st.sampled_from(QUEST_KEYS), unique=True))
def test_revoked_manual_entries_never_survive(scan_run, catalog, revoked_keys):
    entries = {
        key: ManualEntry(
            status=ReadinessStatus.COMPLETE,
            level=2,
            last_seen_at=NOW,
            manual_approval=ManualApproval(approved_by="reviewer", approved_at=NOW, revoked_at=NOW),
        )
        for key in revoked_keys
    }
    existing = RepoReadiness(
        repo_id="repo_acme_property",
        team_id="team_acme",
        computed_from_scan_run_id="scanrun_previous",
        updated_at=NOW,
        quests=entries,
    )

    readiness = RepoReadiness.compute_from_scan_run(scan_run, catalog, existing, now=NOW)

    for key in revoked_keys:
        assert not isinstance(readiness.get_quest_status(key), ManualEntry)
        if key not in scan_run.quest_results or key not in catalog:
            assert key not in readiness.quests
