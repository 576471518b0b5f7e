"""SQLAlchemy ORM models.

Models represent database tables:
- players: authoritative player scores (source of truth for the leaderboard)
"""

from leaderboard_api.models.player import Player

__all__ = ["Player"]
