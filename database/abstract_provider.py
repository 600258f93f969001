"""Connection provider abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sqlalchemy.engine import Connection


class ConnectionProvider(ABC):
    """Interface for handing out database connections."""

    @abstractmethod
    def acquire(self) -> Connection:
        """Return an open connection for a single operation."""

    @abstractmethod
    def release(self, connection: Connection) -> None:
        """Return a connection obtained from :meth:`acquire`."""
