"""Built-in quest catalog and idempotent seeding."""

from __future__ import annotations

import logging

from ai_readiness.core.identifiers import quest_id_for_key
from ai_readiness.models.quest import Quest
from ai_readiness.repositories.redis_store import RedisWarehouse

_logger = logging.getLogger(__name__)

_PRESENT = [{"level": 1, "description": "Present", "condition": {"type": "pass"}}]
_JS_LANGUAGES = ["javascript", "typescript"]

SEED_QUESTS: list[dict] = [
    {
        "key": "docs.agents_md_present",
        "title": "AGENTS.md exists",
        "category": "documentation",
        "description": "Checks if AGENTS.md file is present in repository",
        "levels": _PRESENT,
    },
    {
        "key": "docs.skill_md_count",
        "title": "Skills documented",
        "category": "documentation",
        "description": "Checks if skill markdown files exist (count > 0)",
        "levels": [{"level": 1, "description": "Count > 0", "condition": {"type": "count", "min": 1}}],
    },
    {
        "key": "formatters.javascript.prettier_present",
        "title": "Prettier configured",
        "category": "formatters",
        "description": "Checks if Prettier formatter is configured",
        "levels": _PRESENT,
        "languages": _JS_LANGUAGES,
    },
    {
        "key": "linting.javascript.eslint_present",
        "title": "ESLint configured",
        "category": "linting",
        "description": "Checks if ESLint linter is configured",
        "levels": _PRESENT,
        "languages": _JS_LANGUAGES,
    },
    {
        "key": "sast.codeql_present",
        "title": "CodeQL enabled",
        "category": "sast",
        "description": "Checks if CodeQL SAST scanning is configured",
        "levels": _PRESENT,
    },
    {
        "key": "sast.semgrep_present",
        "title": "Semgrep enabled",
        "category": "sast",
        "description": "Checks if Semgrep SAST scanning is configured",
        "levels": _PRESENT,
    },
    {
        "key": "quality.coverage_available",
        "title": "Coverage reporting",
        "category": "quality",
        "description": "Checks if test coverage data is available",
        "levels": [{"level": 1, "description": "Available", "condition": {"type": "pass"}}],
    },
    {
        "key": "quality.coverage_threshold_met",
        "title": "Coverage threshold met",
        "category": "quality",
        "description": "Checks if test coverage meets defined threshold",
        "levels": [{"level": 1, "description": "Threshold met", "condition": {"type": "pass"}}],
    },
]


def build_seed_quests() -> list[Quest]:
    return [Quest(id=quest_id_for_key(seed["key"]), active=True, **seed) for seed in SEED_QUESTS]


def seed_catalog(store: RedisWarehouse) -> tuple[int, int]:
    """Save every built-in quest whose key is not yet stored.

    Returns ``(created, skipped)`` counts.
    """

    pending = []
    skipped = 0
    for quest in build_seed_quests():
        if store.get_quest(quest.key) is not None:
            _logger.info("Skipped %s (already exists)", quest.key)
            skipped += 1
            continue
        pending.append(quest)
        _logger.info("Created %s", quest.key)
    if pending:
        store.save_quests(pending)
    return len(pending), skipped
