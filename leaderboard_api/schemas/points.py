"""Schemas for the points endpoints (/points/*)."""

from pydantic import BaseModel, Field

from leaderboard_api.ports import PlayerScore

# Redis keeps ZSET scores as doubles; integers beyond 2**53 lose precision there.
MAX_SCORE = 2**53
MIN_SCORE = -(2**53)


class ScoreUpdateRequest(BaseModel):
    """Body of POST /points/add_or_update."""

    player_id: str = Field(min_length=1, max_length=100)
    player_name: str = Field(max_length=200)
    score: int = Field(strict=True, ge=MIN_SCORE, le=MAX_SCORE)

    def to_player_score(self) -> PlayerScore:
        return PlayerScore(player_id=self.player_id, player_name=self.player_name, score=self.score)


class ScoreUpdateResponse(BaseModel):
    message: str = "Player score added or updated"


class PlayerScoreOut(BaseModel):
    """A single leaderboard entry."""

    player_id: str
    player_name: str
    score: int

    @classmethod
    def from_player_score(cls, player: PlayerScore) -> "PlayerScoreOut":
        return cls(player_id=player.player_id, player_name=player.player_name, score=player.score)


class TopPlayersResponse(BaseModel):
    """Response payload for GET /points/top_players (highest score first)."""

    top_players: list[PlayerScoreOut]


class PlayerPointsResponse(BaseModel):
    """Response payload for GET /points/get_points/{player_id}."""

    player_id: str
    score: int
