# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Entity lifecycle: audit timestamps and soft deletes.

Every model that mixes in :class:`LifecycleMixin` gets ``created_at``,
``updated_at`` and ``deleted_at`` columns that only this module writes. A
``before_flush`` listener on :class:`~sqlalchemy.orm.Session` runs the mixin's
hooks inside the same flush as the change itself, so a failed commit leaves
no stamped row behind:

* pending rows are stamped with ``mark_created``;
* rows passed to ``Session.delete`` are stamped with ``mark_deleted`` and put
  back into the session, turning the DELETE into an UPDATE;
* any other row with changed column values is stamped with ``mark_updated``.

Reads are filtered explicitly: repositories compose :func:`live` (or use
:func:`select_live`) into every query so a soft-deleted row never reaches the
rest of the system while it stays in the table as an audit trail.

The stamping clock is read from ``Session.info`` (see :func:`session_clock`),
so every session built by one factory shares the clock that factory was given.

Bulk ``DELETE`` statements bypass the unit of work and therefore remove rows
physically. That is how token rows are destroyed.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, Select, event, select
from sqlalchemy.orm import Mapped, Session, UOWTransaction, mapped_column

from authbackend.infrastructure.db.types import UtcDateTime
from authbackend.shared.clock import Clock, utcnow
from authbackend.shared.logging import logger

_TICK = timedelta(microseconds=1)

ModelT = TypeVar("ModelT", bound="LifecycleMixin")

CLOCK_KEY = "lifecycle_clock"


def _advance(previous: datetime | None, now: datetime) -> datetime:
    if previous is not None and now <= previous:
        return previous + _TICK
    return now


class LifecycleMixin:
    """Lifecycle columns and the hooks the flush listener calls on them."""

    created_at: Mapped[datetime] = mapped_column(UtcDateTime(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UtcDateTime(), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(
        UtcDateTime(), nullable=True, default=None, index=True
    )

    def mark_created(self, now: datetime) -> None:
        self.created_at = now
        self.updated_at = now
        self.deleted_at = None

    def mark_updated(self, now: datetime) -> None:
        self.updated_at = _advance(self.updated_at, now)

    def mark_deleted(self, now: datetime) -> None:
        if self.deleted_at is None:
            self.deleted_at = _advance(self.updated_at, now)

    @property
    def is_live(self) -> bool:
        return self.deleted_at is None

    @classmethod
    def live(cls) -> ColumnElement[bool]:
        return live(cls)


def live(model: Any) -> ColumnElement[bool]:
    """The standing ``deleted_at IS NULL`` predicate for ``model``."""

    return model.deleted_at.is_(None)


def select_live(model: type[ModelT]) -> Select[tuple[ModelT]]:
    return select(model).where(live(model))


def session_clock(session: Session) -> Clock:
    """The clock installed on ``session`` by its factory, or wall-clock UTC."""

    return session.info.get(CLOCK_KEY, utcnow)


@event.listens_for(Session, "before_flush")
def _apply_lifecycle(session: Session, flush_context: UOWTransaction, instances: Any) -> None:
    now = session_clock(session)()

    deleted: set[int] = set()
    for obj in list(session.deleted):
        if not isinstance(obj, LifecycleMixin):
            continue
        obj.mark_deleted(now)
        session.add(obj)
        deleted.add(id(obj))
        logger.debug(f"lifecycle: soft delete {type(obj).__name__} id={getattr(obj, 'id', None)}")

    for obj in session.new:
        if isinstance(obj, LifecycleMixin):
            obj.mark_created(now)

    for obj in session.dirty:
        if not isinstance(obj, LifecycleMixin) or id(obj) in deleted:
            continue
        if session.is_modified(obj, include_collections=False):
            obj.mark_updated(now)


__all__ = ["CLOCK_KEY", "LifecycleMixin", "live", "select_live", "session_clock"]
