from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from review_cards.api.v1.api_configs import router as api_configs_router
from review_cards.api.v1.auth import router as auth_router
from review_cards.api.v1.cards import router as cards_router
from review_cards.api.v1.metrics import router as metrics_router
from review_cards.api.v1.options import router as options_router
from review_cards.api.v1.reviews import router as reviews_router
from review_cards.config import Settings
from review_cards.core.uniqueness import UniquenessTracker
from review_cards.services.auth import AdminAuth
from review_cards.services.exceptions import RepoError
from review_cards.services.repo.store import build_card_store

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # Ensure data dir exists so the local cache and metrics can write
    os.makedirs(settings.data_dir, exist_ok=True)
    if settings.supabase_configured:
        try:
            result = build_card_store(settings).migrate_from_local()
            logger.info("Startup migration: %s", result.model_dump())
        except RepoError as e:
            logger.error("Startup migration failed, keeping local cache: %s", e)
    else:
        logger.info("Supabase not configured, cards are kept in %s", settings.cards_file)
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(title="Review Cards API", version="1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.auth = AdminAuth(settings)
    app.state.tracker = UniquenessTracker(phrase_threshold=settings.phrase_overlap_threshold)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)
    app.include_router(cards_router)
    app.include_router(reviews_router)
    app.include_router(api_configs_router)
    app.include_router(options_router)
    app.include_router(metrics_router)

    if settings.otel_enabled:
        from review_cards.telemetry import setup_telemetry
        setup_telemetry(app, settings)

    if not settings.admin_configured:
        logger.warning("ADMIN_MOBILE/ADMIN_PASSWORD not set; admin routes are unreachable")

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/readyz")
    def readyz():
        return {"status": "ready", "supabase": settings.supabase_configured}

    return app


app = create_app()
