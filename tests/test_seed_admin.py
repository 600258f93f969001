"""Tests for the administrator seed script."""

from __future__ import annotations

import pytest

from conftest import make_user
from repositories import INSERT_FAILED
from scripts.seed_admin import ensure_admin


def test_ensure_admin_creates_account(repository):
    """A missing admin account is created able to sign in."""

    action = ensure_admin(repository, "root@example.com", "root", "RootPass123")

    assert action == "created"
    admin = repository.authenticate("root@example.com", "RootPass123")
    assert admin is not None
    assert admin.role == "admin"
    assert admin.username == "root"


def test_ensure_admin_promotes_existing_account(repository):
    """An existing account with the admin email is promoted."""

    existing = make_user("grace", email="grace@example.com")
    repository.insert(existing)

    action = ensure_admin(repository, "grace@example.com", "ignored", "GracePass123")

    assert action == "updated"
    admin = repository.authenticate("grace@example.com", "GracePass123")
    assert admin.id == existing.id
    assert admin.username == "grace"
    assert admin.role == "admin"
    assert admin.status == "active"
    assert admin.verified is True


def test_ensure_admin_raises_when_insert_fails(repository, monkeypatch):
    """A failed insert surfaces as an error from the seed helper."""

    monkeypatch.setattr(repository, "insert", lambda user: INSERT_FAILED)

    with pytest.raises(RuntimeError, match="Could not create admin user"):
        ensure_admin(repository, "root@example.com", "root", "RootPass123")
