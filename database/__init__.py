"""Connection providers."""

from .abstract_provider import ConnectionProvider
from .engine_provider import EngineConnectionProvider

__all__ = ["ConnectionProvider", "EngineConnectionProvider"]
