"""
api/main.py — punkt wejścia FastAPI.

Lifespan:
  - Buduje Session (gramatyka lark + ewaluator) raz na proces
  - Session jest bezstanowa między liniami, więc współdzielą ją wszystkie żądania
  - Parser API ma limit zagnieżdżenia (api_max_depth): drzewo w odpowiedzi JSON
    nie może być dowolnie głębokie
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.shell.session import Session
from api.routers import evaluate, parse
from api.schemas import HealthResponse
from config import Settings

logger = logging.getLogger("vinlisp.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    logger.info(
        "Building VinLisp session (int_bits=%d, overflow=%s, max_depth=%d)...",
        settings.int_bits,
        settings.overflow,
        settings.api_max_depth,
    )
    app.state.session = Session.from_settings(settings, max_depth=settings.api_max_depth)

    logger.info("VinLisp API ready.")
    yield

    logger.info("Shutting down.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(evaluate.router)
    app.include_router(parse.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version)

    return app


app = create_app()
