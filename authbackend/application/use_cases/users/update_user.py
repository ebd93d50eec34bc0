# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authbackend.domain.users.entities import User, validate_password, validate_username
from authbackend.domain.users.exceptions import UsernameConflictError, UserNotFoundError
from authbackend.domain.users.repositories import PasswordHasher, UserRepository


class UpdateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: int, username: str, password: str) -> User:
        validate_username(username)
        validate_password(password)
        holder = self._users.find_by_username(username)
        if holder is not None and holder.id != user_id:
            raise UsernameConflictError()

        updated = self._users.update(
            user_id, username=username, password=self._password_hasher.hash(password)
        )
        if updated is None:
            raise UserNotFoundError(context={"user_id": user_id})
        return updated
