# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request, url_for

from authbackend.application.use_cases.users.authenticate_request import (
    AuthenticateRequestUseCase,
)
from authbackend.application.use_cases.users.create_user import CreateUserUseCase
from authbackend.application.use_cases.users.delete_user import DeleteUserUseCase
from authbackend.application.use_cases.users.query_users import GetUserUseCase, ListUsersUseCase
from authbackend.application.use_cases.users.update_user import UpdateUserUseCase
from authbackend.infrastructure.audit import AuditAction, audit_log
from authbackend.infrastructure.auth_middleware import current_identity, require_auth
from authbackend.interfaces.http.dto.users import (
    PageQueryDTO,
    UserPageDTO,
    UserResponseDTO,
    UserWriteDTO,
)
from authbackend.shared.errors.validation import parse_payload
from authbackend.shared.middleware.request_logger import get_client_ip


class UsersController:
    def __init__(
        self,
        *,
        authenticate_use_case: AuthenticateRequestUseCase,
        list_users: ListUsersUseCase,
        get_user: GetUserUseCase,
        create_user: CreateUserUseCase,
        update_user: UpdateUserUseCase,
        delete_user: DeleteUserUseCase,
    ) -> None:
        self._authenticate_use_case = authenticate_use_case
        self._list_users = list_users
        self._get_user = get_user
        self._create_user = create_user
        self._update_user = update_user
        self._delete_user = delete_user

    def list_users(self) -> tuple[Response, int]:
        query = parse_payload(PageQueryDTO, request.args.to_dict())
        page = self._list_users.execute(query.page, query.page_size)
        return jsonify(UserPageDTO.from_page(page).model_dump(by_alias=True)), HTTPStatus.OK

    def get_user(self, user_id: int) -> tuple[Response, int]:
        user = self._get_user.execute(user_id)
        return jsonify(UserResponseDTO.from_user(user).model_dump()), HTTPStatus.OK

    def create_user(self) -> tuple[Response, int, dict[str, str]]:
        dto = parse_payload(UserWriteDTO, request.get_json(silent=True))
        user = self._create_user.execute(dto.username, dto.password)
        audit_log(
            AuditAction.USER_CREATED,
            user_id=current_identity().user_id,
            ip_address=get_client_ip(),
            details={"created_user_id": user.id},
        )
        location = url_for(".get_user", user_id=user.id)
        return (
            jsonify(UserResponseDTO.from_user(user).model_dump()),
            HTTPStatus.CREATED,
            {"Location": location},
        )

    def update_user(self, user_id: int) -> Response:
        dto = parse_payload(UserWriteDTO, request.get_json(silent=True))
        self._update_user.execute(user_id, dto.username, dto.password)
        audit_log(
            AuditAction.USER_UPDATED,
            user_id=current_identity().user_id,
            ip_address=get_client_ip(),
            details={"updated_user_id": user_id},
        )
        return Response(status=HTTPStatus.NO_CONTENT)

    def delete_user(self, user_id: int) -> Response:
        self._delete_user.execute(user_id)
        audit_log(
            AuditAction.USER_DELETED,
            user_id=current_identity().user_id,
            ip_address=get_client_ip(),
            details={"deleted_user_id": user_id},
        )
        return Response(status=HTTPStatus.NO_CONTENT)

    def as_blueprint(self) -> Blueprint:
        guard = require_auth(self._authenticate_use_case)
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("", endpoint="list_users", view_func=guard(self.list_users), methods=["GET"])
        bp.add_url_rule("", endpoint="create_user", view_func=guard(self.create_user), methods=["POST"])
        bp.add_url_rule(
            "/<int:user_id>", endpoint="get_user", view_func=guard(self.get_user), methods=["GET"]
        )
        bp.add_url_rule(
            "/<int:user_id>",
            endpoint="update_user",
            view_func=guard(self.update_user),
            methods=["PUT"],
        )
        bp.add_url_rule(
            "/<int:user_id>",
            endpoint="delete_user",
            view_func=guard(self.delete_user),
            methods=["DELETE"],
        )
        return bp
