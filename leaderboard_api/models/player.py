"""Player model.

Authoritative record of a player's display name and current score.
One row per player_id; writes replace name and score.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from leaderboard_api.stores.postgres import Base


class Player(Base):
    """Player with their latest score."""

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Opaque client-assigned identifier, immutable once written
    player_id: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    player_name: Mapped[str] = mapped_column(String(200))
    score: Mapped[int] = mapped_column(BigInteger, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Player {self.player_id} ({self.score})>"
