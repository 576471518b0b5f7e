"""Points endpoints.

POST /points/add_or_update       - Create or update a player's score
GET  /points/top_players         - Ranked players, highest score first
GET  /points/get_points/{id}     - Score of a single player

Routers are thin: call services for business logic.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Request

from leaderboard_api.errors import PlayerNotFoundError, StoreError
from leaderboard_api.schemas import (
    PlayerPointsResponse,
    PlayerScoreOut,
    ScoreUpdateRequest,
    ScoreUpdateResponse,
    TopPlayersResponse,
)
from leaderboard_api.schemas.common import error_body
from leaderboard_api.services.scores import ScoreService

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


def get_score_service(request: Request) -> ScoreService:
    """Score service built during application startup."""
    return request.app.state.score_service


@router.post("/add_or_update", response_model=ScoreUpdateResponse)
async def add_or_update(
    body: ScoreUpdateRequest,
    service: ScoreService = Depends(get_score_service),
) -> ScoreUpdateResponse:
    """Insert or update a player's score.

    Returns as soon as the score is stored; the cached leaderboard catches up
    in the background.

    Raises:
        HTTPException 500: If the score could not be stored.
    """
    try:
        await service.submit_score(body.to_player_score())
    except StoreError as e:
        logger.error(f"Score update failed for player {body.player_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail=error_body(
                "SCORE_UPDATE_FAILED",
                "Failed to update player score",
                {"player_id": body.player_id},
            ),
        ) from e

    return ScoreUpdateResponse()


@router.get("/top_players", response_model=TopPlayersResponse)
async def top_players(
    service: ScoreService = Depends(get_score_service),
) -> TopPlayersResponse:
    """Get every ranked player, highest score first.

    Raises:
        HTTPException 500: If neither the cache nor the store could answer.
    """
    try:
        players = await service.get_top_players()
    except StoreError as e:
        logger.error(f"Top players lookup failed: {e}")
        raise HTTPException(
            status_code=500,
            detail=error_body("TOP_PLAYERS_FAILED", "Failed to retrieve top players"),
        ) from e

    return TopPlayersResponse(top_players=[PlayerScoreOut.from_player_score(p) for p in players])


@router.get("/get_points/{player_id}", response_model=PlayerPointsResponse)
async def get_points(
    player_id: str = Path(
        description="Player ID to look up",
        min_length=1,
    ),
    service: ScoreService = Depends(get_score_service),
) -> PlayerPointsResponse:
    """Get the score of one player.

    Raises:
        HTTPException 404: If the player has no stored score.
        HTTPException 500: If the store lookup failed.
    """
    try:
        score = await service.get_player_score(player_id)
    except PlayerNotFoundError as e:
        raise HTTPException(
            status_code=404,
            detail=error_body(
                "PLAYER_NOT_FOUND",
                f"Player {player_id} not found",
                {"player_id": player_id},
            ),
        ) from e
    except StoreError as e:
        logger.error(f"Score lookup failed for player {player_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail=error_body(
                "SCORE_LOOKUP_FAILED",
                "Failed to retrieve player score",
                {"player_id": player_id},
            ),
        ) from e

    return PlayerPointsResponse(player_id=player_id, score=score)
