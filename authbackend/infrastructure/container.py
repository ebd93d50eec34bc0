"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from authbackend.application.services.password_hashing import password_hasher_from_config
from authbackend.application.services.token_generator import TokenGenerator, uuid_token
from authbackend.application.use_cases.users.authenticate_request import (
    AuthenticateRequestUseCase,
)
from authbackend.application.use_cases.users.create_user import CreateUserUseCase
from authbackend.application.use_cases.users.delete_user import DeleteUserUseCase
from authbackend.application.use_cases.users.login_user import LoginUserUseCase
from authbackend.application.use_cases.users.logout_user import LogoutUserUseCase
from authbackend.application.use_cases.users.query_users import GetUserUseCase, ListUsersUseCase
from authbackend.application.use_cases.users.refresh_session import RefreshSessionUseCase
from authbackend.application.use_cases.users.update_user import UpdateUserUseCase
from authbackend.domain.users.repositories import PasswordHasher
from authbackend.infrastructure.db import ENGINE, build_session_factory, init_db
from authbackend.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyTokenRepository,
    SqlAlchemyUserRepository,
)
from authbackend.interfaces.http.controllers.auth_controller import AuthController
from authbackend.interfaces.http.controllers.users_controller import UsersController
from authbackend.shared.clock import Clock, utcnow


class Container:
    def __init__(
        self,
        engine: Engine | None = None,
        *,
        clock: Clock = utcnow,
        generate_token: TokenGenerator = uuid_token,
    ) -> None:
        self.engine = engine if engine is not None else ENGINE
        self._clock = clock
        self._generate_token = generate_token

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine, clock=self._clock)

    def init_schema(self) -> None:
        init_db(self.engine)

    @cached_property
    def password_hasher(self) -> PasswordHasher:
        return password_hasher_from_config()

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def token_repository(self) -> SqlAlchemyTokenRepository:
        return SqlAlchemyTokenRepository(self.session_factory)

    @cached_property
    def authenticate_request_use_case(self) -> AuthenticateRequestUseCase:
        return AuthenticateRequestUseCase(tokens=self.token_repository, clock=self._clock)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_repository,
            password_hasher=self.password_hasher,
            generate_token=self._generate_token,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(tokens=self.token_repository)

    @cached_property
    def refresh_session_use_case(self) -> RefreshSessionUseCase:
        return RefreshSessionUseCase(
            tokens=self.token_repository, generate_token=self._generate_token
        )

    @cached_property
    def create_user_use_case(self) -> CreateUserUseCase:
        return CreateUserUseCase(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def update_user_use_case(self) -> UpdateUserUseCase:
        return UpdateUserUseCase(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def delete_user_use_case(self) -> DeleteUserUseCase:
        return DeleteUserUseCase(users=self.user_repository)

    @cached_property
    def get_user_use_case(self) -> GetUserUseCase:
        return GetUserUseCase(users=self.user_repository)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            refresh_use_case=self.refresh_session_use_case,
            authenticate_use_case=self.authenticate_request_use_case,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            authenticate_use_case=self.authenticate_request_use_case,
            list_users=self.list_users_use_case,
            get_user=self.get_user_use_case,
            create_user=self.create_user_use_case,
            update_user=self.update_user_use_case,
            delete_user=self.delete_user_use_case,
        )
