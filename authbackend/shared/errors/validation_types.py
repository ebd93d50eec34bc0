# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum


class ValidationErrorType(str, Enum):
    USERNAME_BLANK = "username_blank"
    PASSWORD_BLANK = "password_blank"


__all__ = ["ValidationErrorType"]
