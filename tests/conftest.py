"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app, get_user_repository  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from repositories import UserRepository  # noqa: E402
from utils.passwords import hash_password  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    LOG_LEVEL = "DEBUG"


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(_BaseTestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def repository(app: Flask) -> UserRepository:
    """Return the repository wired into the test application."""

    with app.app_context():
        return get_user_repository()


def make_user(
    username: str = "alice",
    email: str | None = None,
    password: str = "AlicePass123",
    **fields,
) -> User:
    """Build an unsaved user with a hashed password."""

    return User(
        username=username,
        email=email or f"{username}@example.com",
        password=hash_password(password),
        **fields,
    )
