"""Tests for the User model helpers."""

from datetime import datetime, timedelta

from models.user import User
from utils.passwords import WerkzeugPasswordVerifier


def test_new_user_defaults():
    """A new user starts as a pending, unverified member."""

    user = User(username="helper", email="helper@example.com")

    assert user.id is None
    assert user.role == "member"
    assert user.status == "pending"
    assert user.verified is False
    assert user.is_authenticatable is False


def test_set_password_stores_hash():
    """set_password stores a hash the verifier accepts."""

    user = User(username="helper", email="helper@example.com")
    user.set_password("password123")

    verifier = WerkzeugPasswordVerifier()
    assert user.password != "password123"
    assert verifier.verify("password123", user.password) is True
    assert verifier.verify("wrong", user.password) is False
    assert verifier.verify("password123", "not-a-hash") is False
    assert verifier.verify("password123", None) is False


def test_is_authenticatable_requires_verified_and_active():
    """Sign-in needs both the verified flag and active status."""

    user = User(username="gate", email="gate@example.com")

    user.verified = True
    assert user.is_authenticatable is False

    user.status = "active"
    assert user.is_authenticatable is True

    user.verified = False
    assert user.is_authenticatable is False


def test_issue_verification_code_sets_expiry():
    """Issuing a verification code sets a future expiry."""

    user = User(username="verify", email="verify@example.com")

    assert user.verification_expired() is True

    code = user.issue_verification_code()

    assert code == user.verification_code
    assert len(code) >= 32
    assert user.verification_expired() is False
    assert user.verification_expired(now=datetime.now() + timedelta(days=3)) is True


def test_issue_reset_token_with_custom_ttl():
    """Reset tokens honour a custom lifetime and rotate."""

    user = User(username="reset", email="reset@example.com")

    token, expiry = user.issue_reset_token(ttl=timedelta(minutes=5))

    assert token == user.reset_token
    assert expiry == user.reset_token_expiry
    assert user.reset_token_expired() is False
    assert user.reset_token_expired(now=expiry + timedelta(seconds=1)) is True
    assert user.issue_reset_token()[0] != token
