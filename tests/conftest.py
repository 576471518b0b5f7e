"""Shared test doubles.

- MemoryScoreStore / MemoryLeaderboardCache: in-memory ScoreStore and
  LeaderboardCache for service and route tests.
- FakeRedis: the slice of the redis.asyncio client RedisLeaderboardCache uses.
"""

from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from leaderboard_api.errors import CacheError, CacheMissError, PlayerNotFoundError, StoreUnavailableError
from leaderboard_api.ports import PlayerScore
from leaderboard_api.services.background import InlineExecutor
from leaderboard_api.services.scores import ScoreService

RANK_KEY = "leaderboard"


class MemoryScoreStore:
    def __init__(self, players: list[PlayerScore] | None = None) -> None:
        self.records: dict[str, PlayerScore] = {p.player_id: p for p in players or []}
        self.scans = 0
        self.unavailable = False

    def _check(self) -> None:
        if self.unavailable:
            raise StoreUnavailableError("database unavailable")

    async def upsert_score(self, player: PlayerScore) -> None:
        self._check()
        self.records[player.player_id] = player

    async def scan_top_players(self) -> list[PlayerScore]:
        self._check()
        self.scans += 1
        return sorted(self.records.values(), key=lambda p: p.score, reverse=True)

    async def lookup_score(self, player_id: str) -> int:
        self._check()
        if player_id not in self.records:
            raise PlayerNotFoundError(player_id)
        return self.records[player_id].score


class MemoryLeaderboardCache:
    def __init__(self) -> None:
        self.ranked: dict[str, dict[str, int]] = {}
        self.details: dict[str, PlayerScore] = {}
        self.unreachable = False
        self.failing_ids: set[str] = set()
        self.reads = 0

    def _check(self, player_id: str | None = None) -> None:
        if self.unreachable:
            raise CacheError("cache unreachable")
        if player_id is not None and player_id in self.failing_ids:
            raise CacheError(f"write rejected for {player_id}")

    async def upsert_entry(self, rank_key: str, player: PlayerScore) -> None:
        await self.insert_one(rank_key, player.player_id, player.player_name, player.score)

    async def insert_one(self, rank_key: str, player_id: str, player_name: str, score: int) -> None:
        self._check(player_id)
        self.ranked.setdefault(rank_key, {})[player_id] = score
        self.details[player_id] = PlayerScore(player_id=player_id, player_name=player_name, score=score)

    async def read_ranked(self, rank_key: str) -> list[PlayerScore]:
        self.reads += 1
        self._check()
        members = sorted(self.ranked.get(rank_key, {}).items(), key=lambda kv: kv[1], reverse=True)
        return [
            PlayerScore(player_id=pid, player_name=self.details[pid].player_name, score=score)
            for pid, score in members
        ]

    async def read_one(self, player_id: str) -> PlayerScore:
        self.reads += 1
        self._check()
        if player_id not in self.details:
            raise CacheMissError(player_id)
        return self.details[player_id]


class FakePipeline:
    def __init__(self, redis: "FakeRedis") -> None:
        self._redis = redis
        self._calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self._calls.clear()

    def __getattr__(self, name: str):
        def queue(*args: Any, **kwargs: Any) -> "FakePipeline":
            self._calls.append((name, args, kwargs))
            return self

        return queue

    async def execute(self) -> list[Any]:
        self._redis._check()
        results = []
        for name, args, kwargs in self._calls:
            results.append(await getattr(self._redis, name)(*args, **kwargs))
        return results


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis(decode_responses=True)."""

    def __init__(self) -> None:
        self.zsets: dict[str, dict[str, float]] = {}
        self.hashes: dict[str, dict[str, str]] = {}
        self.down = False

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("Connection refused")

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    async def ping(self) -> bool:
        self._check()
        return True

    async def zadd(self, name: str, mapping: dict[str, float]) -> int:
        self._check()
        zset = self.zsets.setdefault(name, {})
        added = sum(1 for member in mapping if member not in zset)
        zset.update({member: float(score) for member, score in mapping.items()})
        return added

    async def zrevrange(self, name: str, start: int, end: int, withscores: bool = False) -> list[Any]:
        self._check()
        items = sorted(self.zsets.get(name, {}).items(), key=lambda kv: (kv[1], kv[0]), reverse=True)
        items = items[start:] if end == -1 else items[start : end + 1]
        return items if withscores else [member for member, _ in items]

    async def hset(self, name: str, mapping: dict[str, Any]) -> int:
        self._check()
        record = self.hashes.setdefault(name, {})
        added = sum(1 for field in mapping if field not in record)
        record.update({field: str(value) for field, value in mapping.items()})
        return added

    async def hget(self, name: str, key: str) -> str | None:
        self._check()
        return self.hashes.get(name, {}).get(key)

    async def hgetall(self, name: str) -> dict[str, str]:
        self._check()
        return dict(self.hashes.get(name, {}))


@pytest.fixture
def store() -> MemoryScoreStore:
    return MemoryScoreStore()


@pytest.fixture
def cache() -> MemoryLeaderboardCache:
    return MemoryLeaderboardCache()


@pytest.fixture
def service(store: MemoryScoreStore, cache: MemoryLeaderboardCache) -> ScoreService:
    return ScoreService(store=store, cache=cache, executor=InlineExecutor(), rank_key=RANK_KEY)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
