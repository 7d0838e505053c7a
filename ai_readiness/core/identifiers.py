"""Utilities for generating identifiers used across the service."""

from __future__ import annotations

import time
import uuid


def new_scan_run_id(provider_run_id: str) -> str:
    return f"scanrun_{provider_run_id}_{int(time.time() * 1000)}"


def quest_id_for_key(key: str) -> str:
    return f"quest_{key.replace('.', '_')}"


def team_id_for_owner(owner: str) -> str:
    return f"team_{owner.lower()}"


def repo_id_for(owner: str, name: str) -> str:
    return f"repo_{owner.lower()}_{name.lower()}"


def new_event_id() -> str:
    return f"ev_{uuid.uuid4().hex}"
