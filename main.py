from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import AppException
from core.handlers import app_exception_handler
from core.init_db import init_db
from core.logging_config import configure_logging
from game_management.game import router as game_router
from stats.main import router as stats_router

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(lifespan=lifespan) -> FastAPI:
    app = FastAPI(title="Chess Game Store API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], # In production, replace with frontend URL
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppException, app_exception_handler)

    app.include_router(game_router, prefix="/api/games")
    app.include_router(stats_router)

    @app.get("/")
    def health_check():
        return {"status": "healthy", "version": "1.0.0"}

    return app


app = create_app()
