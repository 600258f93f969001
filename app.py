"""Application factory."""

import logging

from flask import Flask, current_app
from flask_migrate import Migrate

from config import Config
from database import EngineConnectionProvider
from models import db
from repositories import UserRepository
from utils.passwords import WerkzeugPasswordVerifier

migrate = Migrate()

REPOSITORY_EXTENSION = "user_repository"


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    _configure_logging(app)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)

    with app.app_context():
        provider = EngineConnectionProvider(db.engine)
    app.extensions[REPOSITORY_EXTENSION] = UserRepository(
        provider, password_verifier=WerkzeugPasswordVerifier()
    )

    return app


def get_user_repository() -> UserRepository:
    """Return the repository wired into the current application."""

    return current_app.extensions[REPOSITORY_EXTENSION]


def _configure_logging(app: Flask) -> None:
    """Apply the configured log level to the app and repository loggers."""

    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)

    repository_logger = logging.getLogger("repositories")
    repository_logger.setLevel(level)
    if not logging.getLogger().handlers and not repository_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s in %(name)s: %(message)s")
        )
        repository_logger.addHandler(handler)


if __name__ == "__main__":
    application = create_app()
    with application.app_context():
        db.create_all()
        application.logger.info("Created tables on %s", db.engine.url)
