"""SQLAlchemy engine backed connection provider."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from config import Config

from .abstract_provider import ConnectionProvider


class EngineConnectionProvider(ConnectionProvider):
    """Check connections out of a SQLAlchemy engine pool."""

    def __init__(self, engine: Engine | None = None):
        self.engine = engine or create_engine(
            Config.SQLALCHEMY_DATABASE_URI, **Config.SQLALCHEMY_ENGINE_OPTIONS
        )

    def acquire(self) -> Connection:
        """Check out a connection from the engine's pool."""

        return self.engine.connect()

    def release(self, connection: Connection) -> None:
        """Close the connection, rolling back anything left uncommitted."""

        connection.close()
