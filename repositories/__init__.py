"""
Data access layer (Repository pattern)
"""
from .user_repository import INSERT_FAILED, UserRepository

__all__ = [
    "INSERT_FAILED",
    "UserRepository",
]
