"""Shared helpers."""

from .passwords import PasswordVerifier, WerkzeugPasswordVerifier, hash_password

__all__ = ["PasswordVerifier", "WerkzeugPasswordVerifier", "hash_password"]
