# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import Page, Token, TokenGrant, User


class UserRepository(Protocol):
    """Credential store. Only live (not soft-deleted) users are ever returned."""

    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def list_page(self, page: int, page_size: int) -> Page[User]: ...
    def add(self, username: str, password: str) -> User: ...
    def update(self, user_id: int, *, username: str, password: str) -> User | None: ...
    def delete(self, user_id: int) -> bool: ...


class TokenRepository(Protocol):
    """Token store. Lookups resolve the owning user."""

    def find_by_access_token(self, access_token: str) -> Token | None: ...
    def find_by_refresh_token(self, refresh_token: str) -> Token | None: ...
    def add(self, grant: TokenGrant) -> Token: ...
    def remove(self, token: Token) -> bool: ...
    def rotate(self, old: Token, grant: TokenGrant) -> Token | None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
