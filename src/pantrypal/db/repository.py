"""SQLite engine bootstrap and transactional session helper."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from pantrypal.config import get_settings
from pantrypal.db.models import Base

logger = logging.getLogger(__name__)

# One engine per resolved database file; tests point each run at a fresh file.
_factories: Dict[Path, sessionmaker[Session]] = {}
_engines: Dict[Path, Engine] = {}


def _on_connect(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _build_engine(db_path: Path) -> Engine:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _on_connect)
    try:
        Base.metadata.create_all(engine)
    except OperationalError as exc:
        # Two workers racing on a fresh file both try CREATE TABLE.
        if "already exists" not in str(exc).lower():
            raise
        logger.debug("Schema already present at %s", db_path)
    logger.info("Opened pantry database at %s", db_path)
    return engine


def get_engine(database_path: Path | None = None) -> Engine:
    """Return the engine for ``database_path`` (default: configured path), creating tables once."""

    db_path = (database_path or get_settings().database_path).resolve()
    engine = _engines.get(db_path)
    if engine is None:
        engine = _engines[db_path] = _build_engine(db_path)
        _factories[db_path] = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )
    return engine


def get_session(database_path: Path | None = None) -> Session:
    db_path = (database_path or get_settings().database_path).resolve()
    if db_path not in _factories:
        get_engine(db_path)
    return _factories[db_path]()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on any error."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_repository_state() -> None:
    """Dispose every cached engine so the next call reconnects (used by tests)."""

    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
    _factories.clear()


__all__ = ["get_engine", "get_session", "reset_repository_state", "session_scope"]
