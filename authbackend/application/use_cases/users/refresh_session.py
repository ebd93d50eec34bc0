# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authbackend.application.services.token_generator import TokenGenerator, uuid_token
from authbackend.application.use_cases.users.login_user import SessionResult
from authbackend.domain.users.authentication import (
    REFRESH_SCHEME,
    AuthFailure,
    AuthFailureReason,
    parse_authorization,
)
from authbackend.domain.users.entities import TokenGrant
from authbackend.domain.users.exceptions import SessionRequestError
from authbackend.domain.users.repositories import TokenRepository
from authbackend.shared.logging import logger


class RefreshSessionUseCase:
    """Exchange a refresh token for a brand-new token pair.

    The old row is removed and the new one inserted in a single transaction,
    so two requests racing on the same refresh token cannot both succeed.
    """

    def __init__(
        self,
        *,
        tokens: TokenRepository,
        generate_token: TokenGenerator = uuid_token,
    ) -> None:
        self._tokens = tokens
        self._generate_token = generate_token

    def execute(self, authorization: str | None) -> SessionResult:
        parsed = parse_authorization(authorization, REFRESH_SCHEME)
        if isinstance(parsed, AuthFailure):
            raise SessionRequestError(parsed.reason)

        old = self._tokens.find_by_refresh_token(parsed.credential) if parsed.credential else None
        if old is None:
            raise SessionRequestError(AuthFailureReason.INVALID_REFRESH_TOKEN)

        grant = TokenGrant.issue(old.user_id, self._generate_token)
        new = self._tokens.rotate(old, grant)
        if new is None:
            logger.warning(f"auth.refresh: token_id={old.id} already rotated")
            raise SessionRequestError(AuthFailureReason.INVALID_REFRESH_TOKEN)

        logger.info(
            f"auth.refresh: rotated token_id={old.id} -> {new.id} user_id={new.user_id}"
        )
        return SessionResult(user=new.user, token=new)
