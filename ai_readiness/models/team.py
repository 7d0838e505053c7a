"""Teams and the repositories they own."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ai_readiness.models.quest import ProgrammingLanguage


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RepoRecord(BaseModel):
    """A source repository registered under a team."""

    model_config = ConfigDict(frozen=True)

    id: str
    team_id: str
    full_name: str = Field(..., description="Repository identifier in {owner}/{name} form.")
    url: str
    default_branch: str
    provider: str = "github"
    primary_language: Optional[ProgrammingLanguage] = None
    archived: bool = False


class Team(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str
    repos: tuple[RepoRecord, ...] = ()
    created_at: datetime = Field(default_factory=_now)

    def has_repo(self, repo_id: str) -> bool:
        return any(repo.id == repo_id for repo in self.repos)

    def get_repo(self, repo_id: str) -> Optional[RepoRecord]:
        return next((repo for repo in self.repos if repo.id == repo_id), None)

    def get_repo_by_full_name(self, full_name: str) -> Optional[RepoRecord]:
        return next((repo for repo in self.repos if repo.full_name == full_name), None)

    def with_repo(self, repo: RepoRecord) -> "Team":
        """Return a copy with ``repo`` added, replacing any record with the same id."""

        repos = tuple(existing for existing in self.repos if existing.id != repo.id) + (repo,)
        return self.model_copy(update={"repos": repos})
