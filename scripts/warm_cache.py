#!/usr/bin/env python3
"""Rebuild the Redis leaderboard from PostgreSQL.

Useful after a Redis flush or before a traffic spike: instead of letting the
first requests hit a cold cache, scan every player once and write them all
into the ranked set.

Each player is written on its own; failures are counted and reported, never
retried.

Usage:
    python -m scripts.warm_cache
"""

import asyncio
import os
import sys

# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from leaderboard_api.errors import CacheError  # noqa: E402
from leaderboard_api.ports import LeaderboardCache, ScoreStore  # noqa: E402
from leaderboard_api.settings import get_settings  # noqa: E402
from leaderboard_api.stores.players import PostgresScoreStore  # noqa: E402
from leaderboard_api.stores.postgres import close_db, init_db, ping_db  # noqa: E402
from leaderboard_api.stores.redis import RedisLeaderboardCache, close_redis, init_redis  # noqa: E402

load_dotenv()


async def warm_cache(store: ScoreStore, cache: LeaderboardCache, rank_key: str) -> dict[str, int]:
    """Copy every stored player into the cache. Returns counters."""
    players = await store.scan_top_players()
    stats = {"scanned": len(players), "cached": 0, "failed": 0}
    for player in players:
        try:
            await cache.insert_one(rank_key, player.player_id, player.player_name, player.score)
        except CacheError as e:
            print(f"  failed {player.player_id}: {e}")
            stats["failed"] += 1
            continue
        stats["cached"] += 1
    return stats


async def main() -> None:
    settings = get_settings()

    await init_db()
    await ping_db()
    await init_redis()

    try:
        stats = await warm_cache(PostgresScoreStore(), RedisLeaderboardCache(), settings.leaderboard_key)
    finally:
        await close_redis()
        await close_db()

    print(
        f"Warmed '{settings.leaderboard_key}': "
        f"scanned={stats['scanned']} cached={stats['cached']} failed={stats['failed']}"
    )
    if stats["failed"]:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
