# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database engine and session helpers."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from authbackend.infrastructure.db.lifecycle import CLOCK_KEY
from authbackend.shared.clock import Clock, utcnow
from authbackend.shared.config import load_config
from authbackend.shared.config.settings import DatabaseConfig
from authbackend.shared.logging import logger


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


def _set_sqlite_pragmas(dbapi_conn, _) -> None:
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA busy_timeout=30000;")
    except Exception:
        logger.exception("Failed to apply SQLite PRAGMAs")
    finally:
        cur.close()


def build_engine(config: DatabaseConfig) -> Engine:
    kwargs: dict[str, object] = {"echo": config.echo, "pool_pre_ping": True}
    if config.is_sqlite:
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )

    engine = create_engine(config.url, **kwargs)
    if config.is_sqlite:
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def build_session_factory(engine: Engine, clock: Clock = utcnow) -> sessionmaker[Session]:
    """Session factory whose sessions stamp lifecycle columns with ``clock``."""

    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        info={CLOCK_KEY: clock},
    )


ENGINE: Engine = build_engine(load_config().database)


def init_db(engine: Engine = ENGINE) -> None:
    """Ensure database schema exists."""

    from authbackend.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")
