"""Resolves or registers the team and repository named in a scan report."""

from __future__ import annotations

import logging

from ai_readiness.core.identifiers import repo_id_for, team_id_for_owner
from ai_readiness.models.team import RepoRecord, Team
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.services.report_mapper import RepoMetadata

_logger = logging.getLogger(__name__)


class TeamRepoResolver:
    """Finds the team and repo for report metadata, creating them on first sight."""

    def __init__(self, store: RedisWarehouse) -> None:
        self._store = store

    def resolve(self, metadata: RepoMetadata) -> tuple[Team, RepoRecord]:
        slug = metadata.owner.lower()
        team = self._store.find_team_by_slug(slug)
        if team is None:
            team = Team(id=team_id_for_owner(metadata.owner), name=metadata.owner, slug=slug)
            self._store.save_team(team)
            _logger.info("Registered team %s", team.id)

        repo = team.get_repo_by_full_name(metadata.full_name)
        if repo is None:
            repo = RepoRecord(
                id=repo_id_for(metadata.owner, metadata.name),
                team_id=team.id,
                full_name=metadata.full_name,
                url=metadata.url,
                default_branch=metadata.default_branch,
                primary_language=metadata.primary_language,
            )
            team = team.with_repo(repo)
            self._store.save_team(team)
            _logger.info("Registered repository %s under team %s", repo.id, team.id)
        elif metadata.primary_language is not None and repo.primary_language != metadata.primary_language:
            repo = repo.model_copy(update={"primary_language": metadata.primary_language})
            team = team.with_repo(repo)
            self._store.save_team(team)

        return team, repo
