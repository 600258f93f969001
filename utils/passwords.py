"""Password hashing and verification helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordVerifier(ABC):
    """Checks a plaintext password against a stored hash."""

    @abstractmethod
    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return True when ``plaintext`` matches ``hashed``."""


class WerkzeugPasswordVerifier(PasswordVerifier):
    """Verify hashes produced by :func:`werkzeug.security.generate_password_hash`."""

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not plaintext or not hashed:
            return False
        try:
            return check_password_hash(hashed, plaintext)
        except ValueError:
            # Unknown hash method stored in the column.
            return False


def hash_password(plaintext: str) -> str:
    """Hash a password for storage."""

    return generate_password_hash(plaintext)
