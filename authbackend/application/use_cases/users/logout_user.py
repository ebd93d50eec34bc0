"""Use-case for revoking access tokens."""

from __future__ import annotations

from authbackend.domain.users.authentication import (
    BEARER_SCHEME,
    AuthFailure,
    AuthFailureReason,
    parse_authorization,
)
from authbackend.domain.users.exceptions import SessionRequestError
from authbackend.domain.users.repositories import TokenRepository
from authbackend.shared.logging import logger


class LogoutUserUseCase:
    def __init__(self, *, tokens: TokenRepository) -> None:
        self._tokens = tokens

    def execute(self, authorization: str | None) -> int:
        """Hard-remove the token named by ``authorization`` and return its owner's id."""

        parsed = parse_authorization(authorization, BEARER_SCHEME)
        if isinstance(parsed, AuthFailure):
            raise SessionRequestError(parsed.reason)

        token = self._tokens.find_by_access_token(parsed.credential) if parsed.credential else None
        if token is None or not self._tokens.remove(token):
            raise SessionRequestError(AuthFailureReason.INVALID_ACCESS_TOKEN)

        logger.info(f"auth.logout: removed token_id={token.id} user_id={token.user_id}")
        return token.user_id
