# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from authbackend.application.use_cases.users.authenticate_request import (
    AuthenticateRequestUseCase,
)
from authbackend.domain.users.authentication import AuthFailure
from authbackend.domain.users.entities import AuthIdentity
from authbackend.domain.users.exceptions import AuthenticationError
from authbackend.shared.logging import logger


def require_auth(
    authenticate: AuthenticateRequestUseCase,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Build a view decorator that rejects requests without a valid bearer token.

    On success the identity is attached to ``flask.g`` as ``identity``,
    ``user_id``, ``username`` and ``token_id``.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = authenticate.execute(request.headers.get("Authorization"))
            if isinstance(result, AuthFailure):
                logger.warning(
                    f"Auth failed ({result.reason.value}) on {request.method} {request.path}"
                )
                raise AuthenticationError(result.reason)

            identity = result.identity
            g.identity = identity
            g.user_id = identity.user_id
            g.username = identity.username
            g.token_id = identity.token_id
            return func(*args, **kwargs)

        return wrapper

    return decorator


def current_identity() -> AuthIdentity:
    identity = getattr(g, "identity", None)
    if identity is None:
        raise RuntimeError("current_identity() called outside an authenticated request")
    return identity


__all__ = ["current_identity", "require_auth"]
