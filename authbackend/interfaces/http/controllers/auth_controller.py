# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from authbackend.application.use_cases.users.authenticate_request import (
    AuthenticateRequestUseCase,
)
from authbackend.application.use_cases.users.login_user import LoginUserUseCase
from authbackend.application.use_cases.users.logout_user import LogoutUserUseCase
from authbackend.application.use_cases.users.refresh_session import RefreshSessionUseCase
from authbackend.domain.users.exceptions import InvalidCredentialsError, SessionRequestError
from authbackend.infrastructure.audit import AuditAction, audit_log
from authbackend.infrastructure.auth_middleware import current_identity, require_auth
from authbackend.interfaces.http.dto.auth import (
    IdentityResponseDTO,
    LoginRequestDTO,
    LoginResponseDTO,
)
from authbackend.shared.errors.validation import parse_payload
from authbackend.shared.logging import logger
from authbackend.shared.middleware.request_logger import get_client_ip


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        refresh_use_case: RefreshSessionUseCase,
        authenticate_use_case: AuthenticateRequestUseCase,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._refresh_use_case = refresh_use_case
        self._authenticate_use_case = authenticate_use_case

    def login(self) -> tuple[Response, int]:
        dto = parse_payload(LoginRequestDTO, request.get_json(silent=True))
        ip_address = get_client_ip()

        try:
            session = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=session.user.id,
            ip_address=ip_address,
            details={"session_id": session.token.id},
        )
        logger.info(f"auth.login: ok user_id={session.user.id}")
        return jsonify(LoginResponseDTO.from_session(session).to_json()), HTTPStatus.OK

    def logout(self) -> Response:
        try:
            user_id = self._logout_use_case.execute(request.headers.get("Authorization"))
        except SessionRequestError as exc:
            audit_log(
                AuditAction.LOGOUT,
                ip_address=get_client_ip(),
                details={"reason": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.LOGOUT, user_id=user_id, ip_address=get_client_ip())
        return Response(status=HTTPStatus.OK)

    def refresh(self) -> tuple[Response, int]:
        try:
            session = self._refresh_use_case.execute(request.headers.get("Authorization"))
        except SessionRequestError as exc:
            audit_log(
                AuditAction.TOKEN_REFRESHED,
                ip_address=get_client_ip(),
                details={"reason": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.TOKEN_REFRESHED,
            user_id=session.user.id,
            ip_address=get_client_ip(),
            details={"session_id": session.token.id},
        )
        return jsonify(LoginResponseDTO.from_session(session).to_json()), HTTPStatus.OK

    def me(self) -> tuple[Response, int]:
        payload = IdentityResponseDTO.from_identity(current_identity()).to_json()
        return jsonify(payload), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        guard = require_auth(self._authenticate_use_case)
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/me", view_func=guard(self.me), methods=["GET"])
        return bp
