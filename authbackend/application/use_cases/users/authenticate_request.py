# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authbackend.domain.users.authentication import AuthFailure, AuthResult, authenticate
from authbackend.domain.users.repositories import TokenRepository
from authbackend.shared.clock import Clock, utcnow
from authbackend.shared.logging import logger


class AuthenticateRequestUseCase:
    def __init__(self, *, tokens: TokenRepository, clock: Clock = utcnow) -> None:
        self._tokens = tokens
        self._clock = clock

    def execute(self, authorization: str | None) -> AuthResult:
        result = authenticate(authorization, self._tokens, self._clock())
        if isinstance(result, AuthFailure):
            logger.debug(f"auth.authenticate: rejected reason={result.reason.value}")
        else:
            logger.debug(
                f"auth.authenticate: ok user_id={result.identity.user_id} "
                f"token_id={result.identity.token_id}"
            )
        return result
