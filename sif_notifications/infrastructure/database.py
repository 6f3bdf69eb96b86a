"""Database configuration and session management."""

from __future__ import annotations

from functools import lru_cache

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from sif_notifications.config import Settings, get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings | None = None) -> Engine:
    """Build an engine for ``DATABASE_URL``."""

    settings = settings or get_settings()
    url = settings.database_url
    connect_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        # Sessions are used from anyio worker threads.
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_engine_from_settings()


def make_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine or get_engine())


def initialize_database(engine: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from sif_notifications.infrastructure import models  # noqa: F401  # ensure models are imported

    target = engine or get_engine()
    Base.metadata.create_all(bind=target, checkfirst=True)
    logger.info("Notification tables ready on %s", target.url.render_as_string(hide_password=True))


__all__ = [
    "Base",
    "create_engine_from_settings",
    "get_engine",
    "initialize_database",
    "make_session_factory",
]
