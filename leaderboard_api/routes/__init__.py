"""API routes."""

from fastapi import APIRouter

from leaderboard_api.routes import points

api_router = APIRouter()

# Leaderboard endpoints (submit, top players, single score)
api_router.include_router(points.router, prefix="/points", tags=["points"])
