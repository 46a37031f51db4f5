"""Shopping list persistence helpers."""
# mypy: ignore-errors

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import delete, select

from pantrypal.models.pantry import PantryItem
from pantrypal.models.shopping import DEFAULT_SHOPPING_CATEGORY, ShoppingListItem

from .models import ShoppingListItemORM
from .pantry import DEFAULT_UNIT, insert_pantry_item
from .repository import session_scope

_UNSET = object()


def _to_model(row: ShoppingListItemORM) -> ShoppingListItem:
    return ShoppingListItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "quantity": row.quantity,
            "unit": row.unit,
            "category": row.category,
            "notes": row.notes,
            "is_checked": row.is_checked,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _owned_item(session, user_id: int, item_id: int) -> ShoppingListItemORM:
    db_item = session.get(ShoppingListItemORM, item_id)
    if db_item is None or db_item.user_id != user_id:
        raise ValueError(f"Shopping list item {item_id} not found")
    return db_item


def list_shopping_items(*, user_id: int) -> List[ShoppingListItem]:
    """Return the user's shopping list (unchecked items first)."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(ShoppingListItemORM)
                .where(ShoppingListItemORM.user_id == user_id)
                .order_by(
                    ShoppingListItemORM.is_checked.asc(),
                    ShoppingListItemORM.created_at.asc(),
                    ShoppingListItemORM.id.asc(),
                )
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def create_shopping_item(
    *,
    user_id: int,
    name: str,
    quantity: Optional[float] = None,
    unit: Optional[str] = None,
    category: Optional[str] = None,
    notes: Optional[str] = None,
) -> ShoppingListItem:
    with session_scope() as session:
        db_item = ShoppingListItemORM(
            user_id=user_id,
            name=name.strip(),
            quantity=float(quantity) if quantity is not None else None,
            unit=unit.strip() if unit else None,
            category=(category or "").strip() or DEFAULT_SHOPPING_CATEGORY,
            notes=notes,
            is_checked=False,
        )
        session.add(db_item)
        session.flush()
        session.refresh(db_item)
        return _to_model(db_item)


def update_shopping_item(
    item_id: int,
    *,
    user_id: int,
    name: str | object = _UNSET,
    quantity: float | None | object = _UNSET,
    unit: str | None | object = _UNSET,
    category: str | None | object = _UNSET,
    notes: str | None | object = _UNSET,
    is_checked: bool | object = _UNSET,
) -> ShoppingListItem:
    with session_scope() as session:
        db_item = _owned_item(session, user_id, item_id)

        if name is not _UNSET and name is not None:
            db_item.name = str(name).strip()
        if quantity is not _UNSET:
            db_item.quantity = float(quantity) if quantity is not None else None
        if unit is not _UNSET:
            db_item.unit = unit.strip() if unit else None
        if category is not _UNSET:
            db_item.category = (category or "").strip() or DEFAULT_SHOPPING_CATEGORY
        if notes is not _UNSET:
            db_item.notes = notes
        if is_checked is not _UNSET and is_checked is not None:
            db_item.is_checked = bool(is_checked)

        session.flush()
        session.refresh(db_item)
        return _to_model(db_item)


def delete_shopping_item(item_id: int, *, user_id: int) -> None:
    with session_scope() as session:
        db_item = _owned_item(session, user_id, item_id)
        session.delete(db_item)


def reset_shopping_list(*, user_id: int) -> None:
    """Remove every item from the user's shopping list."""

    with session_scope() as session:
        session.execute(delete(ShoppingListItemORM).where(ShoppingListItemORM.user_id == user_id))


def clear_checked_items(*, user_id: int) -> int:
    """Remove checked-off items and return how many were deleted."""

    with session_scope() as session:
        result = session.execute(
            delete(ShoppingListItemORM).where(
                ShoppingListItemORM.user_id == user_id,
                ShoppingListItemORM.is_checked.is_(True),
            )
        )
        return result.rowcount or 0


def get_shopping_item(item_id: int, *, user_id: int) -> Optional[ShoppingListItem]:
    with session_scope() as session:
        row = session.get(ShoppingListItemORM, item_id)
        if row is None or row.user_id != user_id:
            return None
        return _to_model(row)


def move_to_pantry(
    item_id: int,
    *,
    user_id: int,
    quantity: Optional[float] = None,
    unit: Optional[str] = None,
    category_id: Optional[int] = None,
    expiry_date: Optional[date] = None,
) -> PantryItem:
    """Create a pantry item from a shopping list entry and drop the entry in one transaction."""

    with session_scope() as session:
        record = _owned_item(session, user_id, item_id)

        final_quantity = quantity if quantity is not None else record.quantity or 1.0
        final_unit = unit if unit is not None else record.unit or DEFAULT_UNIT

        item = insert_pantry_item(
            session,
            user_id=user_id,
            name=record.name,
            quantity=final_quantity,
            unit=final_unit,
            category_id=category_id,
            expiry_date=expiry_date,
            notes=record.notes,
        )
        session.delete(record)
        session.flush()
        return item


__all__ = [
    "clear_checked_items",
    "move_to_pantry",
    "create_shopping_item",
    "delete_shopping_item",
    "get_shopping_item",
    "list_shopping_items",
    "reset_shopping_list",
    "update_shopping_item",
]
