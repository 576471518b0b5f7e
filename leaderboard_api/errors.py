"""Error taxonomy shared by stores, services and routes.

- StoreError: durable store (PostgreSQL) failures. Fatal to the request.
- PlayerNotFoundError: no durable record for the requested player.
- CacheError: Redis failures. Never fatal; callers log and move on.

Request validation errors are raised by FastAPI/pydantic, not here.
"""


class LeaderboardError(RuntimeError):
    pass


class StoreError(LeaderboardError):
    pass


class StoreUnavailableError(StoreError):
    """Database could not be reached (connection refused, pool closed, ...)."""


class StoreWriteError(StoreError):
    """Database was reachable but rejected the write."""


class PlayerNotFoundError(LeaderboardError):
    def __init__(self, player_id: str) -> None:
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class CacheError(LeaderboardError):
    pass


class CacheMissError(CacheError):
    """Requested key is absent from the cache."""
