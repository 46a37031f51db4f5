"""Category data access helpers."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from pantrypal.models.pantry import Category

from .models import CategoryORM
from .repository import session_scope

DEFAULT_CATEGORIES = [
    {"name": "Produce", "icon": "🥬"},
    {"name": "Dairy", "icon": "🥛"},
    {"name": "Meat & Seafood", "icon": "🥩"},
    {"name": "Bakery", "icon": "🍞"},
    {"name": "Frozen", "icon": "🧊"},
    {"name": "Beverages", "icon": "🥤"},
    {"name": "Snacks", "icon": "🍿"},
    {"name": "Pantry Staples", "icon": "🥫"},
    {"name": "Condiments", "icon": "🧂"},
    {"name": "Other", "icon": "📦"},
]


def seed_categories(session: Session) -> None:
    exists = session.execute(select(CategoryORM.id).limit(1)).first()
    if exists:
        return
    for record in DEFAULT_CATEGORIES:
        session.add(CategoryORM(name=record["name"], icon=record["icon"]))
    session.flush()


def _to_model(row: CategoryORM) -> Category:
    return Category.model_validate({"id": row.id, "name": row.name, "icon": row.icon})


def list_categories() -> List[Category]:
    """Return categories ordered by name (seeded with defaults if empty)."""

    with session_scope() as session:
        seed_categories(session)
        rows = session.execute(select(CategoryORM).order_by(CategoryORM.name)).scalars().all()
        return [_to_model(row) for row in rows]


__all__ = ["DEFAULT_CATEGORIES", "list_categories", "seed_categories"]
