from __future__ import annotations

from typing import Any, Dict

import httpx

from .client import ApprovalRequest


class AsyncReadinessClient:
    """Async variant of the readiness API client."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        headers: Dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        normalized_base = base_url.rstrip("/") + "/"
        self._client = httpx.AsyncClient(
            base_url=normalized_base,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> "AsyncReadinessClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def ingest_scan(self, report: Dict[str, Any]) -> dict:
        response = await self._client.post("v1/ingest-scan", json=report)
        response.raise_for_status()
        return response.json()

    async def list_quests(self) -> list[dict]:
        response = await self._client.get("v1/quests")
        response.raise_for_status()
        return response.json()

    async def get_readiness(self, repo_id: str) -> dict:
        response = await self._client.get(f"v1/repos/{repo_id}/readiness")
        response.raise_for_status()
        return response.json()

    async def approve_quest(self, repo_id: str, request: ApprovalRequest) -> dict:
        response = await self._client.post(f"v1/repos/{repo_id}/quests/approve", json=request.to_payload())
        response.raise_for_status()
        return response.json()

    async def revoke_approval(self, repo_id: str, quest_key: str, *, team_id: str) -> dict:
        response = await self._client.delete(
            f"v1/repos/{repo_id}/quests/{quest_key}/approval",
            params={"team_id": team_id},
        )
        response.raise_for_status()
        return response.json()

    async def healthcheck(self) -> dict:
        response = await self._client.get("healthz")
        response.raise_for_status()
        return response.json()
