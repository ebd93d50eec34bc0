# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .lifecycle import LifecycleMixin, live, select_live
from .session import ENGINE, Base, build_engine, build_session_factory, init_db

__all__ = [
    "Base",
    "ENGINE",
    "LifecycleMixin",
    "build_engine",
    "build_session_factory",
    "init_db",
    "live",
    "select_live",
]
