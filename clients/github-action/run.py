from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

import httpx


def load_report(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Scan report not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def submit_report(api_url: str, api_token: str | None, report: dict) -> dict:
    headers = {"Content-Type": "application/json"}
    if api_token:
        headers["Authorization"] = f"Bearer {api_token}"
    resp = httpx.post(f"{api_url.rstrip('/')}/v1/ingest-scan", json=report, headers=headers, timeout=30.0)
    resp.raise_for_status()
    return resp.json()


def fetch_readiness(api_url: str, api_token: str | None, readiness_url: str) -> dict:
    headers = {"Authorization": f"Bearer {api_token}"} if api_token else {}
    if not readiness_url.startswith("http"):
        readiness_url = f"{api_url.rstrip('/')}{readiness_url}"
    resp = httpx.get(readiness_url, headers=headers, timeout=15.0)
    resp.raise_for_status()
    return resp.json()


def main() -> None:
    parser = argparse.ArgumentParser(description="Submit an AI readiness scan report")
    parser.add_argument("--api-url", required=True)
    parser.add_argument("--api-token", default=os.getenv("READINESS_API_TOKEN"))
    parser.add_argument("--report", default="ai-readiness-report.json")
    parser.add_argument("--min-completion", type=int, default=0, help="Fail when completion drops below this percentage")
    args = parser.parse_args()

    report = load_report(Path(args.report))
    ingestion = submit_report(args.api_url, args.api_token, report)
    readiness = fetch_readiness(args.api_url, args.api_token, ingestion["readiness_url"])

    write_response_path = os.getenv("READINESS_WRITE_RESPONSE_PATH")
    if write_response_path:
        out_path = Path(write_response_path)
        if not out_path.parent.exists():
            out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(readiness, indent=2) + "\n", encoding="utf-8")
    print(json.dumps({"ingestion": ingestion, "readiness": readiness}, indent=2))

    completion = readiness.get("completion_percentage", 0)
    if completion < args.min_completion:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
