"""Pantry data access helpers."""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pantrypal.models.pantry import PantryItem

from .categories import seed_categories
from .models import CategoryORM, PantryItemORM
from .repository import session_scope

_UNSET = object()

DEFAULT_UNIT = "piece"


class UnknownCategoryError(ValueError):
    """Raised when a pantry item references a category that does not exist."""


def _to_model(row: PantryItemORM) -> PantryItem:
    category = row.category
    return PantryItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "quantity": row.quantity,
            "unit": row.unit,
            "expiry_date": row.expiry_date,
            "category_id": row.category_id,
            "category_name": category.name if category else None,
            "category_icon": category.icon if category else None,
            "notes": row.notes,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _check_category(session: Session, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    seed_categories(session)
    if session.get(CategoryORM, category_id) is None:
        raise UnknownCategoryError(f"Category {category_id} does not exist")


def _owned_item(session: Session, user_id: int, item_id: int) -> PantryItemORM:
    row = session.get(PantryItemORM, item_id)
    if row is None or row.user_id != user_id:
        raise ValueError(f"Pantry item {item_id} not found")
    return row


def _ordered_items_query(user_id: int):
    # Undated items sort after dated ones.
    return (
        select(PantryItemORM)
        .where(PantryItemORM.user_id == user_id)
        .order_by(
            PantryItemORM.expiry_date.is_(None),
            PantryItemORM.expiry_date.asc(),
            PantryItemORM.name.asc(),
        )
    )


def list_pantry_items(*, user_id: int) -> List[PantryItem]:
    """Return the user's pantry ordered by expiry date (soonest first)."""

    with session_scope() as session:
        rows = session.execute(_ordered_items_query(user_id)).scalars().unique().all()
        return [_to_model(row) for row in rows]


def list_pantry_names(*, user_id: int) -> List[str]:
    with session_scope() as session:
        rows = session.execute(
            select(PantryItemORM.name)
            .where(PantryItemORM.user_id == user_id)
            .order_by(PantryItemORM.id)
        ).all()
        return [row[0] for row in rows]


def list_expiring_items(
    *, user_id: int, within_days: int = 3, today: Optional[date] = None
) -> List[PantryItem]:
    """Return dated items expiring on or before ``today + within_days`` (expired included)."""

    cutoff = (today or date.today()) + timedelta(days=within_days)
    with session_scope() as session:
        rows = (
            session.execute(
                select(PantryItemORM)
                .where(
                    PantryItemORM.user_id == user_id,
                    PantryItemORM.expiry_date.is_not(None),
                    PantryItemORM.expiry_date <= cutoff,
                )
                .order_by(PantryItemORM.expiry_date.asc(), PantryItemORM.name.asc())
            )
            .scalars()
            .unique()
            .all()
        )
        return [_to_model(row) for row in rows]


def insert_pantry_item(
    session: Session,
    *,
    user_id: int,
    name: str,
    quantity: float = 1.0,
    unit: Optional[str] = None,
    category_id: Optional[int] = None,
    expiry_date: Optional[date] = None,
    notes: Optional[str] = None,
) -> PantryItem:
    """Add an item inside the caller's transaction; nothing is committed here."""

    _check_category(session, category_id)
    db_item = PantryItemORM(
        user_id=user_id,
        name=name.strip(),
        quantity=float(quantity),
        unit=(unit or DEFAULT_UNIT).strip() or DEFAULT_UNIT,
        category_id=category_id,
        expiry_date=expiry_date,
        notes=notes,
    )
    session.add(db_item)
    session.flush()
    session.refresh(db_item)
    return _to_model(db_item)


def create_pantry_item(
    *,
    user_id: int,
    name: str,
    quantity: float = 1.0,
    unit: Optional[str] = None,
    category_id: Optional[int] = None,
    expiry_date: Optional[date] = None,
    notes: Optional[str] = None,
) -> PantryItem:
    with session_scope() as session:
        return insert_pantry_item(
            session,
            user_id=user_id,
            name=name,
            quantity=quantity,
            unit=unit,
            category_id=category_id,
            expiry_date=expiry_date,
            notes=notes,
        )


def update_pantry_item(
    item_id: int,
    *,
    user_id: int,
    name: Optional[str] = None,
    quantity: Optional[float] = None,
    unit: Optional[str] = None,
    category_id: Optional[int] | object = _UNSET,
    expiry_date: Optional[date] | object = _UNSET,
    notes: Optional[str] | object = _UNSET,
) -> PantryItem:
    with session_scope() as session:
        db_item = _owned_item(session, user_id, item_id)

        if name is not None:
            db_item.name = name.strip()
        if quantity is not None:
            db_item.quantity = float(quantity)
        if unit is not None:
            db_item.unit = unit.strip() or DEFAULT_UNIT
        if category_id is not _UNSET:
            _check_category(session, category_id)  # type: ignore[arg-type]
            db_item.category_id = category_id  # type: ignore[assignment]
        if expiry_date is not _UNSET:
            db_item.expiry_date = expiry_date  # type: ignore[assignment]
        if notes is not _UNSET:
            db_item.notes = notes  # type: ignore[assignment]

        session.flush()
        session.refresh(db_item)
        return _to_model(db_item)


def delete_pantry_item(item_id: int, *, user_id: int) -> None:
    with session_scope() as session:
        db_item = _owned_item(session, user_id, item_id)
        session.delete(db_item)


def get_pantry_item(item_id: int, *, user_id: int) -> Optional[PantryItem]:
    with session_scope() as session:
        row = session.get(PantryItemORM, item_id)
        if row is None or row.user_id != user_id:
            return None
        return _to_model(row)


__all__ = [
    "UnknownCategoryError",
    "create_pantry_item",
    "delete_pantry_item",
    "get_pantry_item",
    "insert_pantry_item",
    "list_expiring_items",
    "list_pantry_items",
    "list_pantry_names",
    "update_pantry_item",
]
