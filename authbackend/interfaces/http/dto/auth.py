from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from authbackend.application.use_cases.users.login_user import SessionResult
from authbackend.domain.users.entities import AuthIdentity

from .users import UserResponseDTO


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class LoginRequestDTO(BaseModel):
    # No length rules on login; unknown names fail like wrong passwords.
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponseDTO(CamelModel):
    user: UserResponseDTO
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str

    @classmethod
    def from_session(cls, session: SessionResult) -> LoginResponseDTO:
        return cls(
            user=UserResponseDTO.from_user(session.user),
            access_token=session.token.access_token,
            refresh_token=session.token.refresh_token,
            expires_in=session.token.expires_in_ms,
            token_type=session.token.token_type,
        )


class IdentityResponseDTO(CamelModel):
    user_id: int
    username: str
    token_id: int

    @classmethod
    def from_identity(cls, identity: AuthIdentity) -> IdentityResponseDTO:
        return cls(
            user_id=identity.user_id,
            username=identity.username,
            token_id=identity.token_id,
        )
