# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from authbackend.application.services.token_generator import TokenGenerator, uuid_token
from authbackend.domain.users.entities import Token, TokenGrant, User
from authbackend.domain.users.exceptions import InvalidCredentialsError
from authbackend.domain.users.repositories import PasswordHasher, TokenRepository, UserRepository
from authbackend.shared.logging import logger


@dataclass(slots=True, frozen=True)
class SessionResult:
    user: User
    token: Token


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenRepository,
        password_hasher: PasswordHasher,
        generate_token: TokenGenerator = uuid_token,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._generate_token = generate_token

    def execute(self, username: str, password: str) -> SessionResult:
        user = self._users.find_by_username(username)
        password_valid = user is not None and self._password_hasher.verify(password, user.password)

        if not password_valid:
            logger.info("auth.login: rejected")
            raise InvalidCredentialsError()

        token = self._tokens.add(TokenGrant.issue(user.id, self._generate_token))
        logger.info(f"auth.login: issued token_id={token.id} user_id={user.id}")
        return SessionResult(user=user, token=token)
