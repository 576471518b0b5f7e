"""Pydantic schemas for API request/response validation."""

from leaderboard_api.schemas.common import ErrorDetail, ErrorResponse
from leaderboard_api.schemas.points import (
    PlayerPointsResponse,
    PlayerScoreOut,
    ScoreUpdateRequest,
    ScoreUpdateResponse,
    TopPlayersResponse,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "PlayerPointsResponse",
    "PlayerScoreOut",
    "ScoreUpdateRequest",
    "ScoreUpdateResponse",
    "TopPlayersResponse",
]
