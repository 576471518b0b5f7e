"""Player score repository on PostgreSQL.

Durable, authoritative side of the leaderboard:
- upsert by player_id (INSERT ... ON CONFLICT DO UPDATE)
- full scan ordered by score (highest first)
- point lookup of a single score

SQLAlchemy errors are translated into leaderboard_api.errors so that callers
never depend on driver exceptions.
"""

from collections.abc import Callable, Iterator
from contextlib import AbstractAsyncContextManager, contextmanager

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import Insert, insert as pg_insert
from sqlalchemy.exc import DBAPIError, DisconnectionError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboard_api.errors import PlayerNotFoundError, StoreError, StoreUnavailableError, StoreWriteError
from leaderboard_api.models import Player
from leaderboard_api.ports import PlayerScore
from leaderboard_api.stores.postgres import get_session

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def build_upsert_statement(player: PlayerScore) -> Insert:
    """INSERT for a player that overwrites name and score on player_id conflict."""
    stmt = pg_insert(Player).values(
        player_id=player.player_id,
        player_name=player.player_name,
        score=player.score,
    )
    return stmt.on_conflict_do_update(
        index_elements=[Player.player_id],
        set_={
            "player_name": stmt.excluded.player_name,
            "score": stmt.excluded.score,
            "updated_at": func.now(),
        },
    )


@contextmanager
def _translate_errors(action: str, *, write: bool = False) -> Iterator[None]:
    try:
        yield
    except (OperationalError, InterfaceError, DisconnectionError, OSError) as e:
        raise StoreUnavailableError(f"{action}: database unavailable") from e
    except (DBAPIError, SQLAlchemyError) as e:
        if write:
            raise StoreWriteError(f"{action}: {e}") from e
        raise StoreError(f"{action}: {e}") from e


class PostgresScoreStore:
    """ScoreStore backed by the `players` table."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session = session_factory

    async def upsert_score(self, player: PlayerScore) -> None:
        with _translate_errors(f"Upsert of player {player.player_id}", write=True):
            async with self._session() as session:
                await session.execute(build_upsert_statement(player))

    async def scan_top_players(self) -> list[PlayerScore]:
        # Ties fall back to insertion order.
        query = select(Player).order_by(Player.score.desc(), Player.id.asc())
        with _translate_errors("Top players scan"):
            async with self._session() as session:
                result = await session.execute(query)
                rows = result.scalars().all()

        return [
            PlayerScore(player_id=row.player_id, player_name=row.player_name, score=row.score)
            for row in rows
        ]

    async def lookup_score(self, player_id: str) -> int:
        query = select(Player.score).where(Player.player_id == player_id)
        with _translate_errors(f"Score lookup for player {player_id}"):
            async with self._session() as session:
                result = await session.execute(query)
                score = result.scalar_one_or_none()

        if score is None:
            raise PlayerNotFoundError(player_id)
        return int(score)
