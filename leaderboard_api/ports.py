"""Contracts the score service is built against.

One production implementation each:
- ScoreStore -> stores.postgres.PostgresScoreStore
- LeaderboardCache -> stores.redis.RedisLeaderboardCache
- BackgroundExecutor -> services.background.AsyncioTaskExecutor

Tests substitute in-memory implementations.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class PlayerScore:
    player_id: str
    player_name: str
    score: int


class ScoreStore(Protocol):
    """Authoritative player -> score mapping."""

    async def upsert_score(self, player: PlayerScore) -> None:
        """Create or replace the record for `player.player_id`."""

    async def scan_top_players(self) -> list[PlayerScore]:
        """All records, highest score first."""

    async def lookup_score(self, player_id: str) -> int:
        """Score for one player. Raises PlayerNotFoundError if absent."""


class LeaderboardCache(Protocol):
    """Ranked set of player ids plus a detail record per player."""

    async def upsert_entry(self, rank_key: str, player: PlayerScore) -> None:
        """Move the player within `rank_key` and refresh its detail record."""

    async def read_ranked(self, rank_key: str) -> list[PlayerScore]:
        """Members of `rank_key`, highest score first. Empty if the set does not exist."""

    async def read_one(self, player_id: str) -> PlayerScore:
        """Detail record for one player. Raises CacheMissError if absent."""

    async def insert_one(self, rank_key: str, player_id: str, player_name: str, score: int) -> None:
        """Add or overwrite one ranked member plus its detail record."""


class BackgroundExecutor(Protocol):
    """Runs work detached from the caller; no result is reported back."""

    async def schedule(
        self,
        fn: Callable[..., Awaitable[Any]],
        *args: Any,
        name: str | None = None,
    ) -> None:
        ...
