"""Redis store for the cached leaderboard.

Handles:
- Connection lifecycle
- Ranked set of player ids (ZSET, one per rank key)
- Player detail records (HASH per player)

Layout:
- <rank_key>             ZSET   member=player_id, score=score
- player:<player_id>     HASH   player_id, player_name, score

No TTLs and no eviction: entries live until overwritten.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from leaderboard_api.errors import CacheError, CacheMissError
from leaderboard_api.ports import PlayerScore
from leaderboard_api.settings import PLAYER_KEY_PREFIX, get_settings

# Key prefixes
PREFIX_PLAYER = PLAYER_KEY_PREFIX

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise CacheError("Redis not initialized. Call init_redis() first.")
    return _redis


def player_key(player_id: str) -> str:
    return f"{PREFIX_PLAYER}{player_id}"


class RedisLeaderboardCache:
    """LeaderboardCache on a Redis sorted set plus per-player hashes.

    Args:
        client: Redis client to use. Defaults to the module client set up by
            init_redis(), resolved on every call so the cache can be built
            before Redis is connected.
    """

    def __init__(self, client: redis.Redis | None = None) -> None:
        self._client = client

    def _redis(self) -> redis.Redis:
        return self._client if self._client is not None else _get_redis()

    async def upsert_entry(self, rank_key: str, player: PlayerScore) -> None:
        await self._write(rank_key, player.player_id, player.player_name, player.score)

    async def insert_one(self, rank_key: str, player_id: str, player_name: str, score: int) -> None:
        await self._write(rank_key, player_id, player_name, score)

    async def _write(self, rank_key: str, player_id: str, player_name: str, score: int) -> None:
        # ZADD and HSET go out in one MULTI/EXEC so readers never see half an entry.
        try:
            async with self._redis().pipeline(transaction=True) as pipe:
                pipe.zadd(rank_key, {player_id: score})
                pipe.hset(
                    player_key(player_id),
                    mapping={"player_id": player_id, "player_name": player_name, "score": score},
                )
                await pipe.execute()
        except RedisError as e:
            raise CacheError(f"Failed to cache player {player_id} in {rank_key}: {e}") from e

    async def read_ranked(self, rank_key: str) -> list[PlayerScore]:
        """Read the whole ranked set, highest score first.

        A missing key reads as an empty list; callers treat that as a miss.
        """
        try:
            client = self._redis()
            members = await client.zrevrange(rank_key, 0, -1, withscores=True)
            if not members:
                return []

            async with client.pipeline(transaction=False) as pipe:
                for player_id, _ in members:
                    pipe.hget(player_key(player_id), "player_name")
                names = await pipe.execute()
        except RedisError as e:
            raise CacheError(f"Failed to read ranked set {rank_key}: {e}") from e

        players: list[PlayerScore] = []
        for (player_id, score), name in zip(members, names):
            if name is None:
                raise CacheError(f"Ranked member {player_id} has no detail record")
            players.append(PlayerScore(player_id=player_id, player_name=name, score=int(score)))
        return players

    async def read_one(self, player_id: str) -> PlayerScore:
        try:
            record = await self._redis().hgetall(player_key(player_id))
        except RedisError as e:
            raise CacheError(f"Failed to read player {player_id}: {e}") from e

        if not record:
            raise CacheMissError(f"Player {player_id} not cached")
        try:
            return PlayerScore(
                player_id=record.get("player_id", player_id),
                player_name=record["player_name"],
                score=int(record["score"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CacheError(f"Malformed cache record for player {player_id}") from e
