# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from typing import Protocol


class TokenGenerator(Protocol):
    def __call__(self) -> str: ...


def uuid_token() -> str:
    """128 random bits from the OS CSPRNG rendered as a UUID string."""

    return str(uuid.uuid4())
