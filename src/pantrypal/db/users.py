"""User accounts, password hashing and bearer-token sessions."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
from sqlalchemy import delete, select

from pantrypal.config import get_settings
from pantrypal.models.users import User

from .models import UserORM, UserSessionORM
from .repository import session_scope

logger = logging.getLogger(__name__)


# bcrypt only looks at the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72


class EmailAlreadyRegisteredError(ValueError):
    """Raised when registering an email that already has an account."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how SQLite stores session expiry."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_model(row: UserORM) -> User:
    return User.model_validate(
        {"id": row.id, "email": row.email, "name": row.name, "created_at": row.created_at}
    )


def _issue_token(session, user_id: int) -> str:
    ttl = timedelta(days=get_settings().session_ttl_days)
    token = secrets.token_urlsafe(32)
    session.add(
        UserSessionORM(token=token, user_id=user_id, expires_at=utcnow() + ttl)
    )
    return token


def register_user(*, email: str, password: str, name: str) -> Tuple[User, str]:
    """Create an account and return it together with a fresh bearer token."""

    normalized = normalize_email(email)
    with session_scope() as session:
        existing = session.execute(
            select(UserORM.id).where(UserORM.email == normalized)
        ).first()
        if existing:
            raise EmailAlreadyRegisteredError("Email already registered")

        row = UserORM(email=normalized, password_hash=hash_password(password), name=name.strip())
        session.add(row)
        session.flush()
        token = _issue_token(session, row.id)
        user = _to_model(row)

    logger.info("Registered user id=%s", user.id)
    return user, token


def authenticate_user(*, email: str, password: str) -> Optional[Tuple[User, str]]:
    """Return the user and a new token when the credentials are valid."""

    with session_scope() as session:
        row = session.execute(
            select(UserORM).where(UserORM.email == normalize_email(email))
        ).scalar_one_or_none()
        if row is None or not verify_password(password, row.password_hash):
            return None
        token = _issue_token(session, row.id)
        return _to_model(row), token


def get_user_for_token(token: str) -> Optional[User]:
    """Resolve a bearer token to its user, deleting it when expired."""

    if not token:
        return None
    with session_scope() as session:
        auth_session = session.get(UserSessionORM, token)
        if auth_session is None:
            return None
        if auth_session.expires_at <= utcnow():
            session.delete(auth_session)
            return None
        row = session.get(UserORM, auth_session.user_id)
        if row is None:
            return None
        return _to_model(row)


def revoke_token(token: str) -> None:
    with session_scope() as session:
        session.execute(delete(UserSessionORM).where(UserSessionORM.token == token))


def purge_expired_sessions(now: Optional[datetime] = None) -> int:
    """Delete expired sessions and return how many were removed."""

    cutoff = now or utcnow()
    with session_scope() as session:
        result = session.execute(
            delete(UserSessionORM).where(UserSessionORM.expires_at <= cutoff)
        )
        removed = result.rowcount or 0
    if removed:
        logger.info("Purged %s expired session(s)", removed)
    return removed


__all__ = [
    "MAX_PASSWORD_BYTES",
    "EmailAlreadyRegisteredError",
    "authenticate_user",
    "get_user_for_token",
    "hash_password",
    "normalize_email",
    "purge_expired_sessions",
    "register_user",
    "revoke_token",
    "utcnow",
    "verify_password",
]
