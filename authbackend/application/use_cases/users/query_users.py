# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authbackend.domain.users.entities import Page, User
from authbackend.domain.users.exceptions import UserNotFoundError
from authbackend.domain.users.repositories import UserRepository


class GetUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(context={"user_id": user_id})
        return user


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, page: int = 1, page_size: int = 10) -> Page[User]:
        return self._users.list_page(max(page, 1), max(page_size, 1))
