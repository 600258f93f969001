"""User model definition."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from utils.passwords import hash_password

from . import db


DEFAULT_ROLE = "member"
STATUS_PENDING = "pending"
STATUS_ACTIVE = "active"

VERIFICATION_CODE_TTL = timedelta(hours=24)
RESET_TOKEN_TTL = timedelta(hours=1)


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, as stored in the table."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(db.Model):
    """Represents an account record with credentials and verification metadata."""

    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
        db.UniqueConstraint("email", name="uq_users_email"),
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, default=DEFAULT_ROLE, index=True)
    status = db.Column(db.String(32), nullable=False, default=STATUS_PENDING)
    created_at = db.Column(db.DateTime, nullable=True, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=True)
    verification_code = db.Column(db.String(128), nullable=True)
    verification_expiry = db.Column(db.DateTime, nullable=True)
    reset_token = db.Column(db.String(128), nullable=True)
    reset_token_expiry = db.Column(db.DateTime, nullable=True)
    verified = db.Column(
        db.Boolean,
        nullable=True,
        default=False,
        server_default=db.false(),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("role", DEFAULT_ROLE)
        kwargs.setdefault("status", STATUS_PENDING)
        kwargs.setdefault("verified", False)
        super().__init__(**kwargs)

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password = hash_password(password)

    @property
    def is_authenticatable(self) -> bool:
        """Only verified, active accounts may sign in."""

        return bool(self.verified) and self.status == STATUS_ACTIVE

    def issue_verification_code(self, ttl: Optional[timedelta] = None) -> str:
        """Generate a fresh email verification code and its expiry."""

        self.verification_code = secrets.token_urlsafe(32)
        self.verification_expiry = utcnow() + (ttl or VERIFICATION_CODE_TTL)
        return self.verification_code

    def issue_reset_token(
        self, ttl: Optional[timedelta] = None
    ) -> tuple[str, datetime]:
        """Generate a password reset token and its expiry."""

        self.reset_token = secrets.token_urlsafe(32)
        self.reset_token_expiry = utcnow() + (ttl or RESET_TOKEN_TTL)
        return self.reset_token, self.reset_token_expiry

    def verification_expired(self, now: Optional[datetime] = None) -> bool:
        if self.verification_expiry is None:
            return True
        return self.verification_expiry < (now or utcnow())

    def reset_token_expired(self, now: Optional[datetime] = None) -> bool:
        if self.reset_token_expiry is None:
            return True
        return self.reset_token_expiry < (now or utcnow())

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.username} <{self.email}>>"
