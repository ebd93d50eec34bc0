# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authbackend.application.use_cases.users.create_user import CreateUserUseCase
from authbackend.domain.users.exceptions import UsernameConflictError
from authbackend.shared.config import load_config
from authbackend.shared.logging import logger


def seed_user(create_user: CreateUserUseCase) -> bool:
    """Create the SEED_USERNAME account if configured and not already live."""

    seed = load_config().seed
    if not seed.enabled:
        logger.debug("seed: SEED_USERNAME/SEED_PASSWORD not configured, skipping")
        return False

    try:
        user = create_user.execute(seed.username or "", seed.password or "")
    except UsernameConflictError:
        logger.info(f"seed: user '{seed.username}' already exists")
        return False

    logger.info(f"seed: created user '{user.username}' id={user.id}")
    return True


__all__ = ["seed_user"]
