from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from authbackend.app import create_app
from authbackend.infrastructure.container import Container
from authbackend.infrastructure.db import Base, build_session_factory
from authbackend.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyTokenRepository,
    SqlAlchemyUserRepository,
)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _foreign_keys(dbapi_conn, _) -> None:
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture()
def session_factory(engine: Engine, clock: FrozenClock) -> sessionmaker[Session]:
    return build_session_factory(engine, clock=clock)


@pytest.fixture()
def users(session_factory: sessionmaker[Session]) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(session_factory)


@pytest.fixture()
def tokens(session_factory: sessionmaker[Session]) -> SqlAlchemyTokenRepository:
    return SqlAlchemyTokenRepository(session_factory)


@pytest.fixture()
def container(engine: Engine, clock: FrozenClock) -> Container:
    return Container(engine, clock=clock)


@pytest.fixture()
def app(container: Container) -> Flask:
    app = create_app(container)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(app: Flask) -> Iterator[FlaskClient]:
    with app.test_client() as client:
        yield client
