from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from authbackend.infrastructure.db import build_session_factory
from authbackend.infrastructure.db.lifecycle import live, select_live
from authbackend.infrastructure.db.models import User
from authbackend.shared.clock import utcnow

from conftest import FrozenClock


def _create(factory: sessionmaker[Session], username: str = "alice") -> User:
    with factory() as session:
        row = User(username=username, password="secret")
        session.add(row)
        session.commit()
        return row


def test_insert_stamps_created_and_updated(
    session_factory: sessionmaker[Session], clock: FrozenClock
) -> None:
    row = _create(session_factory)

    assert row.created_at == clock.now
    assert row.updated_at == clock.now
    assert row.deleted_at is None
    assert row.is_live


def test_update_advances_updated_at_only(
    session_factory: sessionmaker[Session], clock: FrozenClock
) -> None:
    created = _create(session_factory)
    later = clock.advance(minutes=5)

    with session_factory() as session:
        row = session.get(User, created.id)
        row.password = "changed"
        session.commit()

    assert row.created_at == created.created_at
    assert row.updated_at == later


def test_update_is_strictly_monotonic_when_clock_stalls(
    session_factory: sessionmaker[Session], clock: FrozenClock
) -> None:
    created = _create(session_factory)

    with session_factory() as session:
        row = session.get(User, created.id)
        row.password = "changed"
        session.commit()

    assert row.updated_at == created.updated_at + timedelta(microseconds=1)


def test_untouched_row_keeps_updated_at(
    session_factory: sessionmaker[Session], clock: FrozenClock
) -> None:
    created = _create(session_factory)
    clock.advance(minutes=1)

    with session_factory() as session:
        row = session.get(User, created.id)
        row.password = row.password
        session.commit()

    assert row.updated_at == created.updated_at


def test_session_delete_becomes_soft_delete(
    session_factory: sessionmaker[Session], clock: FrozenClock
) -> None:
    created = _create(session_factory)
    deleted_at = clock.advance(hours=1)

    with session_factory() as session:
        session.delete(session.get(User, created.id))
        session.commit()

    with session_factory() as session:
        assert session.scalar(select(func.count()).select_from(User)) == 1
        assert session.scalars(select_live(User)).first() is None
        row = session.get(User, created.id)
        assert row is not None
        assert row.deleted_at == deleted_at
        assert row.updated_at == created.updated_at
        assert not row.is_live


def test_soft_deleted_username_can_be_reused(
    session_factory: sessionmaker[Session], clock: FrozenClock
) -> None:
    created = _create(session_factory)
    with session_factory() as session:
        session.delete(session.get(User, created.id))
        session.commit()

    again = _create(session_factory)

    assert again.id != created.id
    with session_factory() as session:
        live_rows = session.scalars(select_live(User)).all()
        assert [row.id for row in live_rows] == [again.id]


def test_failed_commit_leaves_no_row(
    session_factory: sessionmaker[Session], clock: FrozenClock
) -> None:
    _create(session_factory)

    with session_factory() as session:
        session.add(User(username="alice", password="other"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    with session_factory() as session:
        assert session.scalar(select(func.count()).select_from(User)) == 1


def test_live_predicate_is_part_of_the_query() -> None:
    compiled = str(select_live(User))

    assert "users.deleted_at IS NULL" in compiled
    assert str(live(User)) == "users.deleted_at IS NULL"
    assert str(User.live()) == str(live(User))



def test_each_factory_stamps_with_its_own_clock(engine: Engine) -> None:
    early = FrozenClock(datetime(2020, 1, 1, tzinfo=UTC))
    late = FrozenClock(datetime(2030, 1, 1, tzinfo=UTC))

    first = _create(build_session_factory(engine, clock=early), "alice")
    second = _create(build_session_factory(engine, clock=late), "bobby")

    assert first.created_at == early.now
    assert second.created_at == late.now


def test_factory_without_clock_uses_wall_time(engine: Engine) -> None:
    before = utcnow()
    row = _create(sessionmaker(bind=engine, expire_on_commit=False))

    assert before <= row.created_at <= utcnow()
