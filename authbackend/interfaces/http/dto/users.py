from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from authbackend.domain.users.entities import USERNAME_MAX_LENGTH, USERNAME_MIN_LENGTH, Page, User
from authbackend.shared.errors.validation_types import ValidationErrorType


class UserResponseDTO(BaseModel):
    id: int
    username: str

    @classmethod
    def from_user(cls, user: User) -> UserResponseDTO:
        return cls(id=user.id, username=user.username)


class UserWriteDTO(BaseModel):
    username: str = Field(min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_BLANK.value,
                "Username cannot be blank",
                {},
            )
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_BLANK.value,
                "Password cannot be blank",
                {},
            )
        return value


class PageQueryDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)


class UserPageDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: list[UserResponseDTO]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[User]) -> UserPageDTO:
        return cls(
            items=[UserResponseDTO.from_user(user) for user in page.items],
            page=page.page,
            page_size=page.page_size,
            total_items=page.total_items,
            total_pages=page.total_pages,
        )
