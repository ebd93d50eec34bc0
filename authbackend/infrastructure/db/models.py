# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authbackend.domain.users.entities import TOKEN_MAX_LENGTH, TOKEN_TYPE_BEARER, USERNAME_MAX_LENGTH
from authbackend.infrastructure.db.lifecycle import LifecycleMixin
from authbackend.infrastructure.db.session import Base


class User(LifecycleMixin, Base):
    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_username_live",
            "username",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    tokens: Mapped[list["Token"]] = relationship("Token", back_populates="user")


class Token(LifecycleMixin, Base):
    __tablename__ = "tokens"
    # Hard-deleted rows must never hand their id to a later session.
    __table_args__ = {"sqlite_autoincrement": True}
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    access_token: Mapped[str] = mapped_column(String(TOKEN_MAX_LENGTH), nullable=False, index=True)
    refresh_token: Mapped[str] = mapped_column(String(TOKEN_MAX_LENGTH), nullable=False, index=True)
    expires_in: Mapped[int] = mapped_column(BigInteger, nullable=False)
    token_type: Mapped[str] = mapped_column(String(50), nullable=False, default=TOKEN_TYPE_BEARER)
    user: Mapped["User"] = relationship("User", back_populates="tokens", lazy="joined")
