from __future__ import annotations

from dataclasses import replace

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from authbackend.domain.users.entities import TokenGrant
from authbackend.domain.users.exceptions import UsernameConflictError, UserNotFoundError
from authbackend.infrastructure.db.models import Token, User
from authbackend.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyTokenRepository,
    SqlAlchemyUserRepository,
)

from conftest import FrozenClock


def _grant(user_id: int, suffix: str = "1") -> TokenGrant:
    return TokenGrant(
        user_id=user_id, access_token=f"access-{suffix}", refresh_token=f"refresh-{suffix}"
    )


def _count(factory: sessionmaker[Session], model: type) -> int:
    with factory() as session:
        return session.scalar(select(func.count()).select_from(model)) or 0


def test_add_and_find_user(users: SqlAlchemyUserRepository) -> None:
    created = users.add("alice", "secret")

    assert created.id > 0
    assert users.find_by_username("alice") == created
    assert users.find_by_id(created.id) == created
    assert users.find_by_username("ALICE") is None


def test_add_duplicate_username_conflicts(users: SqlAlchemyUserRepository) -> None:
    users.add("alice", "secret")

    with pytest.raises(UsernameConflictError):
        users.add("alice", "other")


def test_deleted_user_is_invisible_and_name_is_free(
    users: SqlAlchemyUserRepository, session_factory: sessionmaker[Session]
) -> None:
    alice = users.add("alice", "secret")

    assert users.delete(alice.id) is True
    assert users.find_by_id(alice.id) is None
    assert users.find_by_username("alice") is None
    assert users.delete(alice.id) is False
    assert _count(session_factory, User) == 1

    again = users.add("alice", "fresh")
    assert again.id != alice.id


def test_list_page_counts_only_live_users(
    users: SqlAlchemyUserRepository, clock: FrozenClock
) -> None:
    created = []
    for name in ("alice", "bobby", "carol", "david"):
        created.append(users.add(name, "secret"))
        clock.advance(seconds=1)
    users.delete(created[1].id)

    first = users.list_page(1, 2)
    second = users.list_page(2, 2)

    assert [user.username for user in first.items] == ["alice", "carol"]
    assert [user.username for user in second.items] == ["david"]
    assert first.total_items == 3
    assert first.total_pages == 2


def test_update_user(users: SqlAlchemyUserRepository) -> None:
    alice = users.add("alice", "secret")
    users.add("bobby", "secret")

    updated = users.update(alice.id, username="alicia", password="changed")

    assert updated is not None
    assert updated.username == "alicia"
    assert users.find_by_username("alicia").password == "changed"
    assert users.update(9999, username="nobody", password="x") is None
    with pytest.raises(UsernameConflictError):
        users.update(alice.id, username="bobby", password="x")


def test_token_lookup_resolves_owner(
    users: SqlAlchemyUserRepository, tokens: SqlAlchemyTokenRepository
) -> None:
    alice = users.add("alice", "secret")
    token = tokens.add(_grant(alice.id))

    by_access = tokens.find_by_access_token("access-1")
    by_refresh = tokens.find_by_refresh_token("refresh-1")

    assert by_access == token
    assert by_refresh == token
    assert token.user.username == "alice"
    assert token.expires_in_ms == 900000
    assert token.token_type == "Bearer"
    assert tokens.find_by_access_token("refresh-1") is None


def test_add_token_for_missing_user(tokens: SqlAlchemyTokenRepository) -> None:
    with pytest.raises(UserNotFoundError):
        tokens.add(_grant(42))


def test_remove_token_is_physical(
    users: SqlAlchemyUserRepository,
    tokens: SqlAlchemyTokenRepository,
    session_factory: sessionmaker[Session],
) -> None:
    alice = users.add("alice", "secret")
    token = tokens.add(_grant(alice.id))

    assert tokens.remove(token) is True
    assert tokens.remove(token) is False
    assert tokens.find_by_access_token("access-1") is None
    assert _count(session_factory, Token) == 0


def test_token_ids_are_never_reused_by_a_later_login(
    users: SqlAlchemyUserRepository, tokens: SqlAlchemyTokenRepository
) -> None:
    alice = users.add("alice", "secret")
    bobby = users.add("bobby", "secret")
    stale = tokens.add(_grant(alice.id, "alice"))
    assert tokens.remove(stale) is True

    fresh = tokens.add(_grant(bobby.id, "bobby"))

    assert fresh.id != stale.id
    assert tokens.remove(stale) is False
    assert tokens.find_by_access_token("access-bobby") == fresh


def test_remove_requires_matching_access_token(
    users: SqlAlchemyUserRepository, tokens: SqlAlchemyTokenRepository
) -> None:
    alice = users.add("alice", "secret")
    token = tokens.add(_grant(alice.id))
    impostor = replace(token, access_token="access-other")

    assert tokens.remove(impostor) is False
    assert tokens.find_by_access_token("access-1") == token


def test_rotate_replaces_token_once(
    users: SqlAlchemyUserRepository,
    tokens: SqlAlchemyTokenRepository,
    session_factory: sessionmaker[Session],
) -> None:
    alice = users.add("alice", "secret")
    old = tokens.add(_grant(alice.id, "old"))

    new = tokens.rotate(old, _grant(alice.id, "new"))

    assert new is not None
    assert new.id != old.id
    assert new.user_id == alice.id
    assert tokens.find_by_refresh_token("refresh-old") is None
    assert tokens.find_by_access_token("access-new") == new
    assert tokens.rotate(old, _grant(alice.id, "again")) is None
    assert tokens.find_by_access_token("access-again") is None
    assert _count(session_factory, Token) == 1


def test_tokens_of_deleted_user_are_invisible(
    users: SqlAlchemyUserRepository, tokens: SqlAlchemyTokenRepository
) -> None:
    alice = users.add("alice", "secret")
    token = tokens.add(_grant(alice.id))
    users.delete(alice.id)

    assert tokens.find_by_access_token("access-1") is None
    assert tokens.find_by_refresh_token("refresh-1") is None
    assert tokens.rotate(token, _grant(alice.id, "new")) is None
