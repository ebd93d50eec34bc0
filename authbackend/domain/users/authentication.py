# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-token authentication decisions.

Everything in this module is pure: callers hand in the raw ``Authorization``
header, a read-only token lookup and the current time, and get back a tagged
result. Nothing here raises for an authentication outcome and nothing writes
to the token store, so a decision can be repeated with the same input as often
as needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from .entities import AuthIdentity, Token

BEARER_SCHEME = "Bearer"
REFRESH_SCHEME = "Refresh"


class AuthFailureReason(str, Enum):
    MISSING_AUTHORIZATION_HEADER = "missing_authorization_header"
    INVALID_HEADER_FORMAT = "invalid_header_format"
    MISSING_ACCESS_TOKEN = "missing_access_token"
    INVALID_ACCESS_TOKEN = "invalid_access_token"
    TOKEN_EXPIRED = "token_expired"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[AuthFailureReason, str] = {
    AuthFailureReason.MISSING_AUTHORIZATION_HEADER: "Missing authorization header",
    AuthFailureReason.INVALID_HEADER_FORMAT: "Invalid authorization header format",
    AuthFailureReason.MISSING_ACCESS_TOKEN: "Missing access token",
    AuthFailureReason.INVALID_ACCESS_TOKEN: "Invalid access token",
    AuthFailureReason.TOKEN_EXPIRED: "Token has expired",
    AuthFailureReason.INVALID_CREDENTIALS: "Invalid username or password",
    AuthFailureReason.INVALID_REFRESH_TOKEN: "Invalid refresh token",
}


@dataclass(slots=True, frozen=True)
class AuthSuccess:
    identity: AuthIdentity


@dataclass(slots=True, frozen=True)
class AuthFailure:
    reason: AuthFailureReason


AuthResult = AuthSuccess | AuthFailure


@dataclass(slots=True, frozen=True)
class SchemeCredential:
    """The credential part of an ``Authorization: <scheme> <credential>`` header."""

    scheme: str
    credential: str


class AccessTokenLookup(Protocol):
    def find_by_access_token(self, access_token: str) -> Token | None: ...


def parse_authorization(header: str | None, scheme: str) -> SchemeCredential | AuthFailure:
    """Split ``header`` on the expected ``scheme``.

    The scheme match is case-insensitive and requires the separating space.
    A header consisting of the bare scheme name is accepted with an empty
    credential since HTTP servers strip the trailing whitespace of
    ``"Bearer "``. An empty credential is left for the caller to judge.
    """

    if not header:
        return AuthFailure(AuthFailureReason.MISSING_AUTHORIZATION_HEADER)

    prefix = f"{scheme} "
    if header[: len(prefix)].lower() == prefix.lower():
        return SchemeCredential(scheme=scheme, credential=header[len(prefix) :].strip())
    if header.strip().lower() == scheme.lower():
        return SchemeCredential(scheme=scheme, credential="")
    return AuthFailure(AuthFailureReason.INVALID_HEADER_FORMAT)


def authenticate(header: str | None, tokens: AccessTokenLookup, now: datetime) -> AuthResult:
    """Decide whether ``header`` carries a live, unexpired bearer token.

    Checks run in a fixed order and the first failing one wins: header
    present, ``Bearer`` scheme, non-empty token, known token, not expired.
    """

    parsed = parse_authorization(header, BEARER_SCHEME)
    if isinstance(parsed, AuthFailure):
        return parsed
    if not parsed.credential:
        return AuthFailure(AuthFailureReason.MISSING_ACCESS_TOKEN)

    token = tokens.find_by_access_token(parsed.credential)
    if token is None:
        return AuthFailure(AuthFailureReason.INVALID_ACCESS_TOKEN)
    if token.is_expired(now):
        return AuthFailure(AuthFailureReason.TOKEN_EXPIRED)

    return AuthSuccess(
        AuthIdentity(user_id=token.user.id, username=token.user.username, token_id=token.id)
    )


__all__ = [
    "AccessTokenLookup",
    "AuthFailure",
    "AuthFailureReason",
    "AuthResult",
    "AuthSuccess",
    "BEARER_SCHEME",
    "REFRESH_SCHEME",
    "SchemeCredential",
    "authenticate",
    "parse_authorization",
]
