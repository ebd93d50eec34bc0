"""Password storage strategies.

``PlainTextPasswordHasher`` keeps passwords exactly as submitted and compares
them directly. This is weak and is only the default for parity with existing
data; set ``PASSWORD_STORAGE=werkzeug`` to store salted hashes instead.
"""

from __future__ import annotations

import secrets

from werkzeug.security import check_password_hash, generate_password_hash

from authbackend.domain.users.repositories import PasswordHasher
from authbackend.shared.config import load_config


class PlainTextPasswordHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, hashed: str) -> bool:
        return secrets.compare_digest(password.encode("utf-8"), hashed.encode("utf-8"))


class WerkzeugPasswordHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return str(generate_password_hash(password))

    def verify(self, password: str, hashed: str) -> bool:
        return bool(check_password_hash(hashed, password))


def password_hasher_from_config() -> PasswordHasher:
    if load_config().security.password_storage == "werkzeug":
        return WerkzeugPasswordHasher()
    return PlainTextPasswordHasher()
