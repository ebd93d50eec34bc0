from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from authbackend.domain.users.authentication import (
    AuthFailure,
    AuthFailureReason,
    AuthSuccess,
    SchemeCredential,
    authenticate,
    parse_authorization,
)
from authbackend.domain.users.entities import Token, User

ISSUED_AT = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


class DictTokenLookup:
    def __init__(self, *tokens: Token) -> None:
        self._tokens = {token.access_token: token for token in tokens}
        self.calls: list[str] = []

    def find_by_access_token(self, access_token: str) -> Token | None:
        self.calls.append(access_token)
        return self._tokens.get(access_token)


@pytest.fixture()
def lookup() -> DictTokenLookup:
    user = User(id=7, username="alice", password="secret", created_at=ISSUED_AT, updated_at=ISSUED_AT)
    token = Token(
        id=3,
        user=user,
        access_token="good-token",
        refresh_token="refresh-token",
        expires_in_ms=900000,
        token_type="Bearer",
        created_at=ISSUED_AT,
        updated_at=ISSUED_AT,
    )
    return DictTokenLookup(token)


@pytest.mark.parametrize(
    ("header", "reason"),
    [
        (None, AuthFailureReason.MISSING_AUTHORIZATION_HEADER),
        ("", AuthFailureReason.MISSING_AUTHORIZATION_HEADER),
        ("Basic YWxpY2U6c2VjcmV0", AuthFailureReason.INVALID_HEADER_FORMAT),
        ("Bearergood-token", AuthFailureReason.INVALID_HEADER_FORMAT),
        ("Bearer", AuthFailureReason.MISSING_ACCESS_TOKEN),
        ("Bearer ", AuthFailureReason.MISSING_ACCESS_TOKEN),
        ("Bearer    ", AuthFailureReason.MISSING_ACCESS_TOKEN),
        ("Bearer unknown", AuthFailureReason.INVALID_ACCESS_TOKEN),
    ],
)
def test_authenticate_failures(
    lookup: DictTokenLookup, header: str | None, reason: AuthFailureReason
) -> None:
    result = authenticate(header, lookup, ISSUED_AT)

    assert result == AuthFailure(reason)


def test_authenticate_success(lookup: DictTokenLookup) -> None:
    result = authenticate("Bearer good-token", lookup, ISSUED_AT + timedelta(minutes=1))

    assert isinstance(result, AuthSuccess)
    assert result.identity.user_id == 7
    assert result.identity.username == "alice"
    assert result.identity.token_id == 3


def test_scheme_is_case_insensitive(lookup: DictTokenLookup) -> None:
    assert isinstance(authenticate("bearer good-token", lookup, ISSUED_AT), AuthSuccess)
    assert isinstance(authenticate("BEARER good-token", lookup, ISSUED_AT), AuthSuccess)


def test_expiry_boundary(lookup: DictTokenLookup) -> None:
    at_expiry = ISSUED_AT + timedelta(milliseconds=900000)

    assert isinstance(authenticate("Bearer good-token", lookup, at_expiry), AuthSuccess)
    assert authenticate(
        "Bearer good-token", lookup, at_expiry + timedelta(microseconds=1)
    ) == AuthFailure(AuthFailureReason.TOKEN_EXPIRED)


def test_lookup_skipped_for_malformed_headers(lookup: DictTokenLookup) -> None:
    authenticate(None, lookup, ISSUED_AT)
    authenticate("Token abc", lookup, ISSUED_AT)
    authenticate("Bearer ", lookup, ISSUED_AT)

    assert lookup.calls == []


def test_authenticate_is_repeatable(lookup: DictTokenLookup) -> None:
    first = authenticate("Bearer good-token", lookup, ISSUED_AT)
    second = authenticate("Bearer good-token", lookup, ISSUED_AT)

    assert first == second


def test_parse_authorization_other_scheme() -> None:
    assert parse_authorization("Refresh abc", "Refresh") == SchemeCredential("Refresh", "abc")
    assert parse_authorization("Bearer abc", "Refresh") == AuthFailure(
        AuthFailureReason.INVALID_HEADER_FORMAT
    )


def test_bare_scheme_is_an_empty_credential() -> None:
    assert parse_authorization("Bearer", "Bearer") == SchemeCredential("Bearer", "")
    assert parse_authorization(" refresh ", "Refresh") == SchemeCredential("Refresh", "")


def test_failure_messages() -> None:
    assert AuthFailureReason.TOKEN_EXPIRED.message == "Token has expired"
    assert AuthFailureReason.MISSING_AUTHORIZATION_HEADER.message == "Missing authorization header"
