from datetime import datetime, timezone
from pathlib import Path
import json

import fakeredis

from ai_readiness.models.scan import ScanResult, ScanRunSummary
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.services.catalog import seed_catalog
from ai_readiness.services.readiness import ReadinessService
from ai_readiness.telemetry import ClickHouseEventSink, FileEventSink


def test_file_event_sink_writes_readiness_events(tmp_path: Path):
    sink_path = tmp_path / "events.jsonl"
    sink = FileEventSink(sink_path)
    store = RedisWarehouse(fakeredis.FakeRedis(decode_responses=True))
    seed_catalog(store)
    service = ReadinessService(store, sink=sink)

    scan_run = ScanRunSummary(
        id="scanrun_sink",
        repo_id="repo_acme_api",
        team_id="team_acme",
        scanned_at=datetime.now(timezone.utc),
        quest_results={
            "docs.agents_md_present": ScanResult(data={"present": True}),
            "sast.codeql_present": ScanResult(data={"present": False}),
        },
    )
    service.compute_for_scan_run(scan_run)

    payloads = sink_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(payloads) == 1
    event = json.loads(payloads[0])
    assert event["event_type"] == "readiness_computed"
    assert event["event_id"].startswith("ev_")
    assert event["scan_run_id"] == "scanrun_sink"
    assert event["total_quests"] == 2
    assert event["completed_quests"] == 1
    assert event["completion_percentage"] == 50


class _FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


class _FakeSession:
    def __init__(self) -> None:
        self.posts: list[dict] = []
        self.closed = False

    def post(self, url, **kwargs):
        self.posts.append({"url": url, **kwargs})
        return _FakeResponse()

    def close(self) -> None:
        self.closed = True


def test_clickhouse_sink_batches_rows():
    session = _FakeSession()
    sink = ClickHouseEventSink(
        "http://clickhouse:8123/",
        "readiness_events",
        database="analytics",
        user="svc",
        password="secret",
        batch_size=2,
        session=session,
    )

    sink.publish({"event_type": "quest_approved", "repo_id": "repo_a"})
    assert session.posts == []
    sink.publish({"event_type": "quest_approved", "repo_id": "repo_b"})
    sink.publish({"event_type": "quest_approval_revoked", "repo_id": "repo_c"})
    sink.close()

    assert len(session.posts) == 2
    first = session.posts[0]
    assert first["url"] == "http://clickhouse:8123"
    assert first["auth"] == ("svc", "secret")
    query = first["data"].decode("utf-8")
    assert query.startswith("INSERT INTO analytics.readiness_events FORMAT JSONEachRow\n")
    assert '"repo_id":"repo_a"' in query and '"repo_id":"repo_b"' in query
    assert "repo_c" in session.posts[1]["data"].decode("utf-8")
    assert session.closed
