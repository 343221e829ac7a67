from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.scraping.logging_utils import configure_logging

logger = logging.getLogger(__name__)

_DATABASE_URL_VARS = ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")


def _validate_env() -> None:
    """
    Fail fast on configuration the API cannot run without.

    Collects every problem before raising so one restart fixes them all:
    a result-store URL, a usable LLM adapter/key, and a loadable games file.
    """

    from app.config import ConfigurationError, get_llm_settings, validate_llm_settings
    from app.scraping.config import GameConfigError, get_profile_scraping_settings, load_game_profiles
    from db.config import load_env_files

    load_env_files()
    errors: list[str] = []

    if not any(os.getenv(name, "").strip() for name in _DATABASE_URL_VARS):
        errors.append(f"No database URL configured. Set one of: {', '.join(_DATABASE_URL_VARS)}.")

    try:
        validate_llm_settings(get_llm_settings())
    except ConfigurationError as exc:
        errors.append(str(exc))

    try:
        load_game_profiles(config_path=get_profile_scraping_settings().games_config_path)
    except GameConfigError as exc:
        errors.append(str(exc))

    if errors:
        raise RuntimeError(
            "Startup validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
        )


def _check_db() -> None:
    """SELECT 1 against the result store."""
    from sqlalchemy import text

    from db.session import session_scope

    try:
        with session_scope() as session:
            session.execute(text("SELECT 1"))
    except Exception as exc:
        raise RuntimeError("Result store database unavailable.") from exc


def _check_schema() -> None:
    """
    Refuse to serve until migrations created every ORM table. Never migrates.
    """

    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 registers ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    missing = sorted(set(Base.metadata.tables) - set(sa_inspect(get_engine()).get_table_names()))
    if missing:
        logger.critical(
            "Missing table(s) %s. Run 'alembic upgrade head' and restart.",
            ", ".join(missing),
        )
        raise RuntimeError(f"Schema mismatch: missing table(s) {', '.join(missing)}.")


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _check_db()
    _check_schema()
    logger.info("Result store reachable and migrated")

    from app.services.profile_scraping_service import get_profile_scraping_service

    service = get_profile_scraping_service()
    logger.info(
        "Profile scraping ready for %d game(s): %s",
        len(service.profiles),
        ", ".join(sorted(service.profiles)),
    )
    yield


def create_app() -> FastAPI:
    configure_logging()
    _validate_env()

    application = FastAPI(
        title="Profile Stats Scraper API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import profile_scraping_router

    application.include_router(profile_scraping_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
