"""FastAPI application entry point.

Leaderboard API - player scores with a Redis-cached ranking.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from leaderboard_api.routes import api_router
from leaderboard_api.schemas.common import error_body
from leaderboard_api.services.background import AsyncioTaskExecutor
from leaderboard_api.services.scores import ScoreService
from leaderboard_api.settings import get_settings
from leaderboard_api.stores.players import PostgresScoreStore
from leaderboard_api.stores.postgres import init_db, close_db, ping_db
from leaderboard_api.stores.redis import RedisLeaderboardCache, init_redis, close_redis

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()

    # Requests fail with StoreUnavailableError until Postgres is reachable
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    # Without Redis every read falls back to Postgres
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    yield

    # Shutdown
    await app.state.executor.aclose(grace=settings.background_shutdown_grace)
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Player scores and leaderboard API",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Store and cache resolve their connections per call, so the service can
    # be wired before lifespan startup runs.
    app.state.executor = AsyncioTaskExecutor()
    app.state.score_service = ScoreService(
        store=PostgresScoreStore(),
        cache=RedisLeaderboardCache(),
        executor=app.state.executor,
        rank_key=settings.leaderboard_key,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Return route errors in the structured format without FastAPI's `detail` wrapper."""
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            content = exc.detail
        else:
            content = error_body("HTTP_ERROR", str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed input is a client error (400), reported in the structured format."""
        return JSONResponse(
            status_code=400,
            content=error_body("INVALID_INPUT", "Invalid input", jsonable_encoder(exc.errors())),
        )

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_body(
                "INTERNAL_ERROR",
                str(exc) if settings.debug else "Internal server error",
            ),
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "leaderboard_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
