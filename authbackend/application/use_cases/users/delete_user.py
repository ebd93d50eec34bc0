# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authbackend.domain.users.exceptions import UserNotFoundError
from authbackend.domain.users.repositories import UserRepository


class DeleteUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> None:
        if not self._users.delete(user_id):
            raise UserNotFoundError(context={"user_id": user_id})
