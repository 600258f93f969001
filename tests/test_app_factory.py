"""Tests for the Flask application factory."""
from __future__ import annotations

import logging

from app import create_app, get_user_repository
from config import Config
from database import EngineConnectionProvider
from models import db
from repositories import UserRepository
from utils.passwords import WerkzeugPasswordVerifier


def test_repository_is_wired_into_extensions(app):
    """Application factory should build a repository over the app's engine."""
    with app.app_context():
        repository = get_user_repository()
        assert isinstance(repository, UserRepository)
        assert isinstance(repository.connection_provider, EngineConnectionProvider)
        assert repository.connection_provider.engine is db.engine
        assert isinstance(repository.password_verifier, WerkzeugPasswordVerifier)


def test_log_level_applies_to_repository_logger():
    """LOG_LEVEL sets the app and repository log levels."""

    class QuietConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        SQLALCHEMY_ENGINE_OPTIONS = {}
        LOG_LEVEL = "warning"

    app = create_app(QuietConfig)

    assert app.logger.level == logging.WARNING
    assert logging.getLogger("repositories").level == logging.WARNING


def test_repository_sees_rows_created_through_session(app, repository):
    """Rows written through the ORM session are visible to repository reads."""
    from conftest import make_user

    with app.app_context():
        db.session.add(make_user("henry", status="active", verified=True))
        db.session.commit()

    stored = repository.get_by_username("henry")
    assert stored is not None
    assert stored.status == "active"
    assert stored.verified is True
    assert stored.created_at is not None
