"""Tests for the Redis-backed leaderboard cache."""

import pytest

from leaderboard_api.errors import CacheError, CacheMissError
from leaderboard_api.ports import PlayerScore
from leaderboard_api.stores.redis import RedisLeaderboardCache, player_key

from tests.conftest import RANK_KEY, FakeRedis


@pytest.fixture
def lb_cache(fake_redis: FakeRedis) -> RedisLeaderboardCache:
    return RedisLeaderboardCache(client=fake_redis)


async def test_upsert_entry_writes_ranked_member_and_hash(lb_cache: RedisLeaderboardCache, fake_redis: FakeRedis):
    await lb_cache.upsert_entry(RANK_KEY, PlayerScore("p1", "Alice", 100))

    assert fake_redis.zsets[RANK_KEY] == {"p1": 100.0}
    assert fake_redis.hashes[player_key("p1")] == {"player_id": "p1", "player_name": "Alice", "score": "100"}


async def test_read_ranked_orders_by_score_with_names(lb_cache: RedisLeaderboardCache):
    await lb_cache.upsert_entry(RANK_KEY, PlayerScore("p1", "Alice", 100))
    await lb_cache.upsert_entry(RANK_KEY, PlayerScore("p2", "Bob", 150))
    await lb_cache.insert_one(RANK_KEY, "p3", "Cara", 90)

    ranked = await lb_cache.read_ranked(RANK_KEY)

    assert ranked == [
        PlayerScore("p2", "Bob", 150),
        PlayerScore("p1", "Alice", 100),
        PlayerScore("p3", "Cara", 90),
    ]


async def test_update_replaces_existing_entry(lb_cache: RedisLeaderboardCache, fake_redis: FakeRedis):
    await lb_cache.upsert_entry(RANK_KEY, PlayerScore("p1", "A", 10))
    await lb_cache.upsert_entry(RANK_KEY, PlayerScore("p1", "B", 20))

    assert await lb_cache.read_ranked(RANK_KEY) == [PlayerScore("p1", "B", 20)]
    assert len(fake_redis.zsets[RANK_KEY]) == 1


async def test_missing_ranked_set_reads_as_empty(lb_cache: RedisLeaderboardCache):
    assert await lb_cache.read_ranked("no-such-board") == []


async def test_member_without_detail_record_is_an_error(lb_cache: RedisLeaderboardCache, fake_redis: FakeRedis):
    await fake_redis.zadd(RANK_KEY, {"orphan": 5})

    with pytest.raises(CacheError):
        await lb_cache.read_ranked(RANK_KEY)


async def test_read_one(lb_cache: RedisLeaderboardCache):
    await lb_cache.insert_one(RANK_KEY, "p1", "Alice", 100)

    assert await lb_cache.read_one("p1") == PlayerScore("p1", "Alice", 100)


async def test_read_one_missing_player(lb_cache: RedisLeaderboardCache):
    with pytest.raises(CacheMissError):
        await lb_cache.read_one("ghost")


async def test_read_one_malformed_record(lb_cache: RedisLeaderboardCache, fake_redis: FakeRedis):
    await fake_redis.hset(player_key("p1"), mapping={"player_name": "Alice", "score": "lots"})

    with pytest.raises(CacheError):
        await lb_cache.read_one("p1")


async def test_connection_errors_become_cache_errors(lb_cache: RedisLeaderboardCache, fake_redis: FakeRedis):
    fake_redis.down = True

    with pytest.raises(CacheError):
        await lb_cache.upsert_entry(RANK_KEY, PlayerScore("p1", "Alice", 100))
    with pytest.raises(CacheError):
        await lb_cache.read_ranked(RANK_KEY)
    with pytest.raises(CacheError):
        await lb_cache.read_one("p1")


async def test_uninitialized_client_is_a_cache_error():
    with pytest.raises(CacheError):
        await RedisLeaderboardCache().read_ranked(RANK_KEY)


async def test_boundary_scores_survive_the_sorted_set(lb_cache: RedisLeaderboardCache):
    await lb_cache.upsert_entry(RANK_KEY, PlayerScore("hi", "High", 2**53))
    await lb_cache.upsert_entry(RANK_KEY, PlayerScore("lo", "Low", -(2**53)))

    ranked = await lb_cache.read_ranked(RANK_KEY)

    assert [(p.player_id, p.score) for p in ranked] == [("hi", 2**53), ("lo", -(2**53))]
