"""Score service: cache-aside access to the leaderboard.

Flow:
- Submit: write PostgreSQL synchronously, then update Redis in the background.
- Top players: read Redis; on an empty set read PostgreSQL, answer right
  away and refill Redis in the background one player at a time.
- Single score: PostgreSQL only.

Consistency:
- PostgreSQL is the source of truth. Redis may lag or be empty.
- Cache failures are logged and never fail a request.
- Store failures always fail the request.

Known limitations:
- An empty leaderboard looks exactly like a cold cache, so it triggers a
  store scan on every read.
- Concurrent misses each rescan and refill (no refill dedup).
- get_player_score ignores the cached player hash.
"""

import logging

from leaderboard_api.errors import CacheError
from leaderboard_api.ports import BackgroundExecutor, LeaderboardCache, PlayerScore, ScoreStore

logger = logging.getLogger("uvicorn.error")


class ScoreService:
    """Cache-aside orchestration over a ScoreStore and a LeaderboardCache.

    Args:
        store: Authoritative score store.
        cache: Ranked cache of the same data.
        executor: Runs cache writes detached from the request.
        rank_key: Cache key of the leaderboard (settings.leaderboard_key).
    """

    def __init__(
        self,
        store: ScoreStore,
        cache: LeaderboardCache,
        executor: BackgroundExecutor,
        rank_key: str,
    ) -> None:
        self.store = store
        self.cache = cache
        self.executor = executor
        self.rank_key = rank_key

    async def submit_score(self, player: PlayerScore) -> None:
        """Persist a player's score, then refresh the cache in the background.

        Raises:
            StoreError: The durable write failed. The cache is left untouched.
        """
        logger.info(f"Submit score called for player {player.player_id}")

        await self.store.upsert_score(player)
        logger.info(f"Player {player.player_id} score stored ({player.score})")

        await self.executor.schedule(
            self._cache_player,
            player,
            name=f"cache-player-{player.player_id}",
        )

    async def get_top_players(self) -> list[PlayerScore]:
        """Ranked players, highest score first.

        Raises:
            StoreError: Cache missed and the store scan failed.
        """
        try:
            cached = await self.cache.read_ranked(self.rank_key)
        except CacheError as e:
            logger.warning(f"Leaderboard cache read failed, falling back to store: {e}")
            cached = []

        if cached:
            logger.info(f"Leaderboard served from cache: {len(cached)} players")
            return cached

        logger.info("Leaderboard cache miss, reading from store")
        players = await self.store.scan_top_players()
        logger.info(f"Leaderboard served from store: {len(players)} players")

        if players:
            await self.executor.schedule(
                self._repopulate,
                players,
                name=f"repopulate-{self.rank_key}",
            )
        return players

    async def get_player_score(self, player_id: str) -> int:
        """Score of one player, read from the store.

        Raises:
            PlayerNotFoundError: No record for `player_id`.
            StoreError: Store lookup failed.
        """
        logger.info(f"Get score called for player {player_id}")
        score = await self.store.lookup_score(player_id)
        logger.info(f"Player {player_id} score retrieved ({score})")
        return score

    # ============================================================
    # Background jobs
    # ============================================================

    async def _cache_player(self, player: PlayerScore) -> None:
        try:
            await self.cache.upsert_entry(self.rank_key, player)
        except CacheError as e:
            logger.error(f"Failed to update cache for player {player.player_id}: {e}")
            return
        logger.info(f"Player {player.player_id} cache updated")

    async def _repopulate(self, players: list[PlayerScore]) -> None:
        # Each player stands alone: a failure skips that player only.
        cached = 0
        for player in players:
            try:
                await self.cache.insert_one(
                    self.rank_key,
                    player.player_id,
                    player.player_name,
                    player.score,
                )
            except CacheError as e:
                logger.error(f"Failed to repopulate cache for player {player.player_id}: {e}")
                continue
            cached += 1
        logger.info(f"Leaderboard cache repopulated: {cached}/{len(players)} players")
