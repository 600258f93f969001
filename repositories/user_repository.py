"""Repository for user data access."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator, Optional

from sqlalchemy import bindparam, func, insert, text, update
from sqlalchemy.engine import Connection, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from database.abstract_provider import ConnectionProvider
from models.user import STATUS_ACTIVE, STATUS_PENDING, User
from utils.passwords import PasswordVerifier, WerkzeugPasswordVerifier

logger = logging.getLogger(__name__)

INSERT_FAILED = -1

users_table = User.__table__

_SELECT_BY_ID = text("SELECT * FROM users WHERE id = :id")
_SELECT_BY_EMAIL = text("SELECT * FROM users WHERE email = :email")
_SELECT_BY_USERNAME = text("SELECT * FROM users WHERE username = :username")
_SELECT_BY_VERIFICATION_CODE = text(
    "SELECT * FROM users WHERE verification_code = :code"
)
_SELECT_BY_RESET_TOKEN = text("SELECT * FROM users WHERE reset_token = :token")
_SELECT_ALL = text("SELECT * FROM users")
_SELECT_BY_ROLE = text("SELECT * FROM users WHERE role = :role")
_SELECT_BY_IDS = text("SELECT * FROM users WHERE id IN :ids").bindparams(
    bindparam("ids", expanding=True)
)


def _as_datetime(value: Any) -> Optional[datetime]:
    # Textual SELECTs on SQLite hand timestamps back as ISO strings.
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime) and value.tzinfo is not None:
        # Stored values are naive UTC.
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _row_to_user(row: RowMapping) -> User:
    """Map a ``users`` row onto a transient :class:`User`."""

    user = User(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        password=row["password"],
        role=row["role"],
        status=row["status"],
        created_at=_as_datetime(row["created_at"]),
        updated_at=_as_datetime(row["updated_at"]),
    )

    # Older schemas predate the verification and reset columns.
    user.verification_code = row.get("verification_code")
    user.verification_expiry = _as_datetime(row.get("verification_expiry"))
    user.reset_token = row.get("reset_token")
    user.reset_token_expiry = _as_datetime(row.get("reset_token_expiry"))
    user.verified = bool(row.get("verified") or False)
    return user


class UserRepository:
    """Repository for user database operations.

    Every operation checks out one connection from the injected provider,
    runs a single parameterized statement and hands the connection back on
    every exit path. Storage failures are logged and reported through the
    return value (``INSERT_FAILED``, ``False``, ``None`` or an empty list)
    rather than raised.
    """

    def __init__(
        self,
        connection_provider: ConnectionProvider,
        password_verifier: Optional[PasswordVerifier] = None,
    ):
        self.connection_provider = connection_provider
        self.password_verifier = password_verifier or WerkzeugPasswordVerifier()

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        connection = self.connection_provider.acquire()
        try:
            yield connection
        finally:
            try:
                self.connection_provider.release(connection)
            except SQLAlchemyError:
                logger.exception("Failed to release database connection")

    def _fetch_one(self, statement, params: dict, lookup: str) -> Optional[User]:
        try:
            with self._connection() as connection:
                row = connection.execute(statement, params).mappings().first()
        except SQLAlchemyError:
            logger.exception("Failed to fetch user by %s", lookup)
            return None
        return _row_to_user(row) if row is not None else None

    def _fetch_all(self, statement, params: dict, lookup: str) -> list[User]:
        try:
            with self._connection() as connection:
                rows = connection.execute(statement, params).mappings().all()
        except SQLAlchemyError:
            logger.exception("Failed to list users %s", lookup)
            return []
        return [_row_to_user(row) for row in rows]

    def _write(self, statement, action: str, user_id: Optional[int]) -> bool:
        try:
            with self._connection() as connection:
                result = connection.execute(statement)
                connection.commit()
                affected = result.rowcount
        except SQLAlchemyError:
            logger.exception("Failed to %s for user %s", action, user_id)
            return False
        return affected > 0

    def insert(self, user: User) -> int:
        """
        Insert a new user.

        Args:
            user: User to persist; ``user.id`` is set on success

        Returns:
            The generated user ID, or ``INSERT_FAILED`` if the write failed
        """
        statement = insert(users_table).values(
            username=user.username,
            email=user.email,
            password=user.password,
            role=user.role,
            status=user.status,
            created_at=func.now(),
            verification_code=user.verification_code,
            verification_expiry=user.verification_expiry,
            verified=bool(user.verified),
        )
        try:
            with self._connection() as connection:
                result = connection.execute(statement)
                connection.commit()
                user_id = result.inserted_primary_key[0]
        except SQLAlchemyError:
            logger.exception("Failed to insert user %s", user.username)
            return INSERT_FAILED

        user.id = user_id
        logger.info("Inserted user %s with id %s", user.username, user_id)
        return user_id

    def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Get a user by ID.

        Args:
            user_id: ID of the user

        Returns:
            User object if found, None otherwise
        """
        return self._fetch_one(_SELECT_BY_ID, {"id": user_id}, "id")

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by email address.

        Args:
            email: Email address to search for

        Returns:
            User object if found, None otherwise
        """
        return self._fetch_one(_SELECT_BY_EMAIL, {"email": email}, "email")

    def get_by_username(self, username: str) -> Optional[User]:
        return self._fetch_one(
            _SELECT_BY_USERNAME, {"username": username}, "username"
        )

    def get_by_verification_code(self, code: str) -> Optional[User]:
        return self._fetch_one(
            _SELECT_BY_VERIFICATION_CODE, {"code": code}, "verification code"
        )

    def get_by_reset_token(self, token: str) -> Optional[User]:
        return self._fetch_one(
            _SELECT_BY_RESET_TOKEN, {"token": token}, "reset token"
        )

    def get_all(self) -> list[User]:
        """Return every user in storage order."""
        return self._fetch_all(_SELECT_ALL, {}, "(all)")

    def get_all_by_role(self, role: str) -> list[User]:
        """Return every user holding ``role``."""
        return self._fetch_all(_SELECT_BY_ROLE, {"role": role}, f"with role {role}")

    def get_by_ids(self, user_ids: Optional[Iterable[int]]) -> list[User]:
        """
        Get users matching any of the given IDs.

        Args:
            user_ids: IDs to look up; may be empty or None

        Returns:
            Matching users in storage order (not input order)
        """
        ids = list(user_ids or [])
        if not ids:
            return []
        return self._fetch_all(_SELECT_BY_IDS, {"ids": ids}, "by ids")

    def update(self, user: User) -> bool:
        """
        Update every mutable column of an existing user.

        Args:
            user: User object with updated values

        Returns:
            True if a row was updated, False otherwise
        """
        statement = (
            update(users_table)
            .where(users_table.c.id == user.id)
            .values(
                username=user.username,
                email=user.email,
                password=user.password,
                role=user.role,
                status=user.status,
                updated_at=func.now(),
                verification_code=user.verification_code,
                verification_expiry=user.verification_expiry,
                reset_token=user.reset_token,
                reset_token_expiry=user.reset_token_expiry,
                verified=bool(user.verified),
            )
        )
        return self._write(statement, "update", user.id)

    def update_verification_status(self, user_id: int, verified: bool) -> bool:
        """Set the verified flag; status follows as active or pending."""
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(
                verified=verified,
                status=STATUS_ACTIVE if verified else STATUS_PENDING,
                updated_at=func.now(),
            )
        )
        return self._write(statement, "update verification status", user_id)

    def set_password_reset_token(
        self, user_id: int, token: str, expiry: Optional[datetime]
    ) -> bool:
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(reset_token=token, reset_token_expiry=expiry, updated_at=func.now())
        )
        return self._write(statement, "set reset token", user_id)

    def update_password(self, user_id: int, new_password: str) -> bool:
        """
        Replace a user's password and clear any pending reset token.

        Args:
            user_id: ID of the user
            new_password: Already hashed password

        Returns:
            True if a row was updated, False otherwise
        """
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(
                password=new_password,
                reset_token=None,
                reset_token_expiry=None,
                updated_at=func.now(),
            )
        )
        return self._write(statement, "update password", user_id)

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Check credentials for a verified, active account.

        Unknown email, wrong password and an unverified or inactive account
        all yield None.

        Args:
            email: Email address of the account
            password: Plaintext password

        Returns:
            The authenticated user, or None
        """
        user = self.get_by_email(email)
        if user is None:
            return None
        if not self.password_verifier.verify(password, user.password):
            return None
        if not user.is_authenticatable:
            logger.debug("Rejected sign-in for inactive user %s", user.id)
            return None
        return user
