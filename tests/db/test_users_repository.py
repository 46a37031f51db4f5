"""Unit tests for accounts, password hashing and session tokens."""

from __future__ import annotations

from datetime import timedelta

import pytest

from pantrypal.db.models import UserSessionORM
from pantrypal.db.repository import session_scope
from pantrypal.db.users import (
    EmailAlreadyRegisteredError,
    authenticate_user,
    get_user_for_token,
    hash_password,
    purge_expired_sessions,
    register_user,
    revoke_token,
    utcnow,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_register_normalizes_email_and_rejects_duplicates():
    user, token = register_user(email="  Chef@Example.COM ", password="secret123", name=" Chef ")

    assert user.email == "chef@example.com"
    assert user.name == "Chef"
    assert token
    assert get_user_for_token(token) == user

    with pytest.raises(EmailAlreadyRegisteredError):
        register_user(email="chef@example.com", password="another1", name="Imposter")


def test_authenticate_issues_new_token():
    register_user(email="a@example.com", password="secret123", name="A")

    assert authenticate_user(email="a@example.com", password="nope") is None
    assert authenticate_user(email="missing@example.com", password="secret123") is None

    result = authenticate_user(email="A@example.com", password="secret123")
    assert result is not None
    user, token = result
    assert get_user_for_token(token) == user


def test_revoked_token_no_longer_resolves():
    _, token = register_user(email="b@example.com", password="secret123", name="B")

    revoke_token(token)

    assert get_user_for_token(token) is None


def test_expired_tokens_are_rejected_and_purged():
    _, token = register_user(email="c@example.com", password="secret123", name="C")
    _, live_token = register_user(email="d@example.com", password="secret123", name="D")
    with session_scope() as session:
        session.get(UserSessionORM, token).expires_at = utcnow() - timedelta(seconds=1)

    assert purge_expired_sessions() == 1
    assert get_user_for_token(token) is None
    assert get_user_for_token(live_token) is not None
    assert purge_expired_sessions(now=utcnow() + timedelta(days=30)) == 1


def test_utcnow_is_naive_and_session_expiry_in_future():
    now = utcnow()
    _, token = register_user(email="e@example.com", password="secret123", name="E")

    assert now.tzinfo is None
    with session_scope() as session:
        assert session.get(UserSessionORM, token).expires_at > now


def test_overlong_multibyte_password_rejected_before_hashing():
    password = "é" * 40  # 40 characters, 80 bytes

    with pytest.raises(ValueError):
        hash_password(password)
    assert verify_password(password, hash_password("secret123")) is False
