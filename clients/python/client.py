from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

import httpx


@dataclass
class ApprovalRequest:
    """Convenience wrapper for POST /v1/repos/{repo_id}/quests/approve payloads."""

    team_id: str
    quest_key: str
    approved_by: str
    level: int | None = None

    def to_payload(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


class ReadinessClient:
    """Lightweight synchronous client for the readiness API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        headers: Dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        normalized_base = base_url.rstrip("/") + "/"
        self._client = httpx.Client(
            base_url=normalized_base,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    def __enter__(self) -> "ReadinessClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def ingest_scan(self, report: Dict[str, Any]) -> dict:
        response = self._client.post("v1/ingest-scan", json=report)
        response.raise_for_status()
        return response.json()

    def list_quests(self) -> list[dict]:
        response = self._client.get("v1/quests")
        response.raise_for_status()
        return response.json()

    def get_readiness(self, repo_id: str) -> dict:
        response = self._client.get(f"v1/repos/{repo_id}/readiness")
        response.raise_for_status()
        return response.json()

    def approve_quest(self, repo_id: str, request: ApprovalRequest) -> dict:
        response = self._client.post(f"v1/repos/{repo_id}/quests/approve", json=request.to_payload())
        response.raise_for_status()
        return response.json()

    def revoke_approval(self, repo_id: str, quest_key: str, *, team_id: str) -> dict:
        response = self._client.delete(
            f"v1/repos/{repo_id}/quests/{quest_key}/approval",
            params={"team_id": team_id},
        )
        response.raise_for_status()
        return response.json()

    def healthcheck(self) -> dict:
        response = self._client.get("healthz")
        response.raise_for_status()
        return response.json()
