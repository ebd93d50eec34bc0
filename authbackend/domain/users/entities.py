# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Domain entities for user accounts and their bearer-token sessions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from math import ceil
from typing import Generic, TypeVar

from authbackend.domain.exceptions import InvariantViolation

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 255
TOKEN_MAX_LENGTH = 500

T = TypeVar("T")

TOKEN_TYPE_BEARER = "Bearer"
ACCESS_TOKEN_TTL_MS = 15 * 60 * 1000


def validate_username(username: str) -> str:
    if not username or not username.strip():
        raise InvariantViolation("username must not be empty", field="username")
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise InvariantViolation(
            f"username length must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH}",
            field="username",
        )
    return username


def validate_password(password: str) -> str:
    if not password:
        raise InvariantViolation("password must not be empty", field="password")
    return password


@dataclass(slots=True, frozen=True)
class User:
    """A live user row as exposed by the credential store."""

    id: int
    username: str
    password: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        validate_username(self.username)
        validate_password(self.password)

    @property
    def is_live(self) -> bool:
        return self.deleted_at is None


@dataclass(slots=True, frozen=True)
class TokenGrant:
    """A freshly minted token pair that has not been persisted yet."""

    user_id: int
    access_token: str
    refresh_token: str
    expires_in_ms: int = ACCESS_TOKEN_TTL_MS
    token_type: str = TOKEN_TYPE_BEARER

    def __post_init__(self) -> None:
        for fld in ("access_token", "refresh_token"):
            value = getattr(self, fld)
            if not value:
                raise InvariantViolation("token must not be empty", field=fld)
            if len(value) > TOKEN_MAX_LENGTH:
                raise InvariantViolation(
                    f"token must be at most {TOKEN_MAX_LENGTH} characters", field=fld
                )
        if self.expires_in_ms <= 0:
            raise InvariantViolation("expiry must be positive", field="expires_in_ms")

    @classmethod
    def issue(
        cls,
        user_id: int,
        generate: Callable[[], str],
        *,
        expires_in_ms: int = ACCESS_TOKEN_TTL_MS,
    ) -> TokenGrant:
        return cls(
            user_id=user_id,
            access_token=generate(),
            refresh_token=generate(),
            expires_in_ms=expires_in_ms,
        )


@dataclass(slots=True, frozen=True)
class Token:
    """A persisted token pair together with its owning user."""

    id: int
    user: User
    access_token: str
    refresh_token: str
    expires_in_ms: int
    token_type: str
    created_at: datetime
    updated_at: datetime

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(milliseconds=self.expires_in_ms)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(slots=True, frozen=True)
class AuthIdentity:
    """Identity assertion attached to an authenticated request."""

    user_id: int
    username: str
    token_id: int


@dataclass(slots=True, frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    page: int
    page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return ceil(self.total_items / self.page_size)
