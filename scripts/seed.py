#!/usr/bin/env python3
"""Seed the leaderboard with demo players.

Writes go through the score service, so each player lands in PostgreSQL and
then in the Redis leaderboard. Redis is optional: if it cannot be reached the
players are still stored and the cache fills on the first read.

The script is idempotent (scores are upserted by player_id).

Usage:
    python -m scripts.seed
    python -m scripts.seed --create-tables   # fresh dev database, no Alembic
"""

import argparse
import asyncio
import logging
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from leaderboard_api.ports import PlayerScore  # noqa: E402
from leaderboard_api.services.background import InlineExecutor  # noqa: E402
from leaderboard_api.services.scores import ScoreService  # noqa: E402
from leaderboard_api.settings import get_settings  # noqa: E402
from leaderboard_api.stores.players import PostgresScoreStore  # noqa: E402
from leaderboard_api.stores.postgres import close_db, create_tables, init_db, ping_db  # noqa: E402
from leaderboard_api.stores.redis import RedisLeaderboardCache, close_redis, init_redis  # noqa: E402

load_dotenv()
logger = logging.getLogger("uvicorn.error")

DEMO_PLAYERS = [
    PlayerScore(player_id="p1", player_name="Alice", score=100),
    PlayerScore(player_id="p2", player_name="Bob", score=150),
    PlayerScore(player_id="p3", player_name="Cara", score=90),
    PlayerScore(player_id="p4", player_name="Dmitri", score=120),
    PlayerScore(player_id="p5", player_name="Eun-ji", score=75),
]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the leaderboard with demo players.")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables from the ORM models before seeding",
    )
    return parser.parse_args(argv)


async def main(args: argparse.Namespace) -> None:
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()

    await init_db()
    await ping_db()
    if args.create_tables:
        await create_tables()
        logger.info("Tables created")
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed; seeding PostgreSQL only")

    service = ScoreService(
        store=PostgresScoreStore(),
        cache=RedisLeaderboardCache(),
        executor=InlineExecutor(),
        rank_key=settings.leaderboard_key,
    )

    try:
        for player in DEMO_PLAYERS:
            await service.submit_score(player)
            print(f"  {player.player_id:<6} {player.player_name:<10} {player.score}")
        print(f"Seeded {len(DEMO_PLAYERS)} players into '{settings.leaderboard_key}'")
    finally:
        await close_redis()
        await close_db()


if __name__ == "__main__":
    asyncio.run(main(parse_args()))
