"""Seed the built-in quest catalog into Redis.

Existing quests are left untouched, so the script can be re-run safely.
"""

from __future__ import annotations

import argparse
import logging

from redis import Redis

from ai_readiness.core.config import settings
from ai_readiness.repositories.redis_store import RedisWarehouse
from ai_readiness.services.catalog import seed_catalog


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the AI readiness quest catalog")
    parser.add_argument(
        "--redis-url",
        default=settings.redis_url,
        help=f"Redis connection URL (default: {settings.redis_url})",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    client = Redis.from_url(args.redis_url, decode_responses=True)
    created, skipped = seed_catalog(RedisWarehouse(client))
    print(f"Seeded quest catalog: {created} created, {skipped} skipped")


if __name__ == "__main__":
    main()
