# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authbackend.shared.errors.base import DomainError

from .authentication import AuthFailureReason


class AuthenticationError(DomainError):
    """A protected request presented no usable bearer token."""

    status = HTTPStatus.UNAUTHORIZED

    def __init__(self, reason: AuthFailureReason) -> None:
        super().__init__(code=reason.value, message=reason.message)
        self.reason = reason


class SessionRequestError(DomainError):
    """A logout or refresh request carried a malformed or unknown token."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(self, reason: AuthFailureReason) -> None:
        super().__init__(code=reason.value, message=reason.message)
        self.reason = reason


class InvalidCredentialsError(DomainError):
    # One message for unknown username and wrong password alike.
    code = AuthFailureReason.INVALID_CREDENTIALS.value
    status = HTTPStatus.UNAUTHORIZED
    message = AuthFailureReason.INVALID_CREDENTIALS.message


class UsernameConflictError(DomainError):
    code = "username_conflict"
    status = HTTPStatus.CONFLICT
    message = "Username already exists"


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "User not found"
