# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager

from authbackend.domain.users.entities import Page, TokenGrant
from authbackend.domain.users.entities import Token as DomainToken
from authbackend.domain.users.entities import User as DomainUser
from authbackend.domain.users.exceptions import UsernameConflictError, UserNotFoundError
from authbackend.domain.users.repositories import TokenRepository, UserRepository
from authbackend.infrastructure.db.lifecycle import live, select_live
from authbackend.infrastructure.db.models import Token, User
from authbackend.infrastructure.unit_of_work import unit_of_work_scope
from authbackend.shared.logging import logger


def _to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password=row.password,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _to_domain_token(row: Token) -> DomainToken:
    return DomainToken(
        id=row.id,
        user=_to_domain_user(row.user),
        access_token=row.access_token,
        refresh_token=row.refresh_token,
        expires_in_ms=row.expires_in,
        token_type=row.token_type,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _is_username_conflict(exc: IntegrityError) -> bool:
    detail = str(exc.orig).lower()
    return "username" in detail or "uq_users_username_live" in detail


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @staticmethod
    def _live_by_username(session: Session, username: str) -> User | None:
        return session.scalars(select_live(User).where(User.username == username)).first()

    @staticmethod
    def _live_by_id(session: Session, user_id: int) -> User | None:
        return session.scalars(select_live(User).where(User.id == user_id)).first()

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._live_by_username(session, username)
            return _to_domain_user(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._live_by_id(session, user_id)
            return _to_domain_user(row) if row else None

    def list_page(self, page: int, page_size: int) -> Page[DomainUser]:
        with unit_of_work_scope(self._session_factory) as session:
            total = session.scalar(select(func.count()).select_from(User).where(live(User))) or 0
            rows = session.scalars(
                select_live(User)
                .order_by(User.created_at.asc(), User.id.asc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            ).all()
            return Page(
                items=[_to_domain_user(row) for row in rows],
                page=page,
                page_size=page_size,
                total_items=int(total),
            )

    def add(self, username: str, password: str) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                if self._live_by_username(session, username) is not None:
                    raise UsernameConflictError()
                row = User(username=username, password=password)
                session.add(row)
                session.flush()
                user = _to_domain_user(row)
        except IntegrityError as exc:
            if _is_username_conflict(exc):
                raise UsernameConflictError() from exc
            raise
        logger.info(f"users.add: user_id={user.id}")
        return user

    def update(self, user_id: int, *, username: str, password: str) -> DomainUser | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = self._live_by_id(session, user_id)
                if row is None:
                    return None
                if username != row.username:
                    holder = self._live_by_username(session, username)
                    if holder is not None:
                        raise UsernameConflictError()
                row.username = username
                row.password = password
                session.flush()
                user = _to_domain_user(row)
        except IntegrityError as exc:
            if _is_username_conflict(exc):
                raise UsernameConflictError() from exc
            raise
        logger.info(f"users.update: user_id={user.id}")
        return user

    def delete(self, user_id: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._live_by_id(session, user_id)
            if row is None:
                return False
            session.delete(row)
        logger.info(f"users.delete: soft-deleted user_id={user_id}")
        return True


class SqlAlchemyTokenRepository(TokenRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @staticmethod
    def _live_tokens() -> Select[tuple[Token]]:
        # A token is only visible while both it and its owner are live.
        return (
            select(Token)
            .join(Token.user)
            .where(live(Token), live(User))
            .options(contains_eager(Token.user))
        )

    def find_by_access_token(self, access_token: str) -> DomainToken | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                self._live_tokens().where(Token.access_token == access_token)
            ).first()
            return _to_domain_token(row) if row else None

    def find_by_refresh_token(self, refresh_token: str) -> DomainToken | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                self._live_tokens().where(Token.refresh_token == refresh_token)
            ).first()
            return _to_domain_token(row) if row else None

    @staticmethod
    def _insert(session: Session, owner: User, grant: TokenGrant) -> Token:
        row = Token(
            user=owner,
            access_token=grant.access_token,
            refresh_token=grant.refresh_token,
            expires_in=grant.expires_in_ms,
            token_type=grant.token_type,
        )
        session.add(row)
        session.flush()
        return row

    def add(self, grant: TokenGrant) -> DomainToken:
        with unit_of_work_scope(self._session_factory) as session:
            owner = session.scalars(select_live(User).where(User.id == grant.user_id)).first()
            if owner is None:
                raise UserNotFoundError(context={"user_id": grant.user_id})
            token = _to_domain_token(self._insert(session, owner, grant))
        logger.debug(f"tokens.add: token_id={token.id} user_id={token.user_id}")
        return token

    def remove(self, token: DomainToken) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                delete(Token).where(
                    Token.id == token.id,
                    Token.access_token == token.access_token,
                )
            )
            removed = bool(result.rowcount)
        logger.debug(f"tokens.remove: token_id={token.id} removed={removed}")
        return removed

    def rotate(self, old: DomainToken, grant: TokenGrant) -> DomainToken | None:
        with unit_of_work_scope(self._session_factory) as session:
            owner = session.scalars(select_live(User).where(User.id == grant.user_id)).first()
            if owner is None:
                return None
            result = session.execute(
                delete(Token).where(
                    Token.id == old.id,
                    Token.refresh_token == old.refresh_token,
                )
            )
            if not result.rowcount:
                return None
            token = _to_domain_token(self._insert(session, owner, grant))
        logger.debug(f"tokens.rotate: token_id={old.id} -> {token.id}")
        return token


__all__ = ["SqlAlchemyTokenRepository", "SqlAlchemyUserRepository"]
