# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authbackend.domain.users.entities import User, validate_password, validate_username
from authbackend.domain.users.exceptions import UsernameConflictError
from authbackend.domain.users.repositories import PasswordHasher, UserRepository


class CreateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str) -> User:
        validate_username(username)
        validate_password(password)
        if self._users.find_by_username(username):
            raise UsernameConflictError()
        return self._users.add(username, self._password_hasher.hash(password))
