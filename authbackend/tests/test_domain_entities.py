from datetime import UTC, datetime, timedelta

import pytest

from authbackend.domain.exceptions import InvariantViolation
from authbackend.domain.users.entities import (
    ACCESS_TOKEN_TTL_MS,
    Page,
    Token,
    TokenGrant,
    User,
)

NOW = datetime(2025, 1, 1, tzinfo=UTC)


def _user(**overrides) -> User:
    fields = {"id": 1, "username": "alice", "password": "secret", "created_at": NOW, "updated_at": NOW}
    fields.update(overrides)
    return User(**fields)


def test_user_requires_username_length() -> None:
    assert _user(username="abcd").username == "abcd"
    with pytest.raises(InvariantViolation):
        _user(username="abc")
    with pytest.raises(InvariantViolation):
        _user(username="a" * 256)
    with pytest.raises(InvariantViolation):
        _user(username="    ")


def test_user_requires_password() -> None:
    with pytest.raises(InvariantViolation) as excinfo:
        _user(password="")
    assert excinfo.value.field == "password"


def test_token_grant_issue_uses_generator() -> None:
    values = iter(["a" * 36, "b" * 36])

    grant = TokenGrant.issue(5, lambda: next(values))

    assert grant.access_token == "a" * 36
    assert grant.refresh_token == "b" * 36
    assert grant.expires_in_ms == ACCESS_TOKEN_TTL_MS == 900000
    assert grant.token_type == "Bearer"


def test_token_grant_rejects_bad_tokens() -> None:
    with pytest.raises(InvariantViolation):
        TokenGrant(user_id=1, access_token="", refresh_token="r")
    with pytest.raises(InvariantViolation):
        TokenGrant(user_id=1, access_token="a", refresh_token="r" * 501)
    with pytest.raises(InvariantViolation):
        TokenGrant(user_id=1, access_token="a", refresh_token="r", expires_in_ms=0)


def test_token_expiry() -> None:
    token = Token(
        id=1,
        user=_user(),
        access_token="a",
        refresh_token="r",
        expires_in_ms=1000,
        token_type="Bearer",
        created_at=NOW,
        updated_at=NOW,
    )

    assert token.user_id == 1
    assert token.expires_at == NOW + timedelta(seconds=1)
    assert not token.is_expired(NOW + timedelta(seconds=1))
    assert token.is_expired(NOW + timedelta(seconds=1, microseconds=1))


def test_page_total_pages() -> None:
    assert Page(items=[], page=1, page_size=10, total_items=0).total_pages == 0
    assert Page(items=[], page=1, page_size=10, total_items=10).total_pages == 1
    assert Page(items=[], page=1, page_size=10, total_items=11).total_pages == 2
