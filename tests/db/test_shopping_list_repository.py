"""Unit tests for the shopping list repository helpers."""

from __future__ import annotations

from datetime import date

import pytest

from sqlalchemy.orm import Session

from pantrypal.db.models import ShoppingListItemORM
from pantrypal.db.pantry import list_pantry_items
from pantrypal.db.shopping_list import (
    clear_checked_items,
    create_shopping_item,
    delete_shopping_item,
    get_shopping_item,
    list_shopping_items,
    move_to_pantry,
    reset_shopping_list,
    update_shopping_item,
)
from pantrypal.db.users import register_user


@pytest.fixture()
def user_id() -> int:
    user, _ = register_user(email="shopper@example.com", password="secret123", name="Sam")
    return user.id


def test_create_and_list_shopping_items(user_id):
    create_shopping_item(user_id=user_id, name="milk", quantity=2, unit="cartons")
    create_shopping_item(user_id=user_id, name="spinach", category="Produce")

    items = list_shopping_items(user_id=user_id)
    assert [item.name for item in items] == ["milk", "spinach"]
    assert [item.category for item in items] == ["Groceries", "Produce"]
    assert all(item.id for item in items)


def test_checked_items_sort_after_unchecked(user_id):
    first = create_shopping_item(user_id=user_id, name="eggs")
    create_shopping_item(user_id=user_id, name="bread")
    update_shopping_item(first.id, user_id=user_id, is_checked=True)

    assert [item.name for item in list_shopping_items(user_id=user_id)] == ["bread", "eggs"]


def test_update_and_delete_shopping_item(user_id):
    item = create_shopping_item(user_id=user_id, name="olive oil", quantity=1, unit="bottle")

    updated = update_shopping_item(
        item.id,
        user_id=user_id,
        quantity=2,
        notes="cold pressed only",
        is_checked=True,
    )
    assert updated.is_checked is True
    assert updated.quantity == 2
    assert updated.notes == "cold pressed only"

    toggled = update_shopping_item(item.id, user_id=user_id, is_checked=False)
    assert toggled.is_checked is False

    delete_shopping_item(item.id, user_id=user_id)
    assert get_shopping_item(item.id, user_id=user_id) is None


def test_reset_and_clear_checked(user_id):
    lemons = create_shopping_item(user_id=user_id, name="lemons", quantity=4)
    create_shopping_item(user_id=user_id, name="garlic", quantity=1, unit="head")
    update_shopping_item(lemons.id, user_id=user_id, is_checked=True)

    assert clear_checked_items(user_id=user_id) == 1
    assert [item.name for item in list_shopping_items(user_id=user_id)] == ["garlic"]

    reset_shopping_list(user_id=user_id)
    assert list_shopping_items(user_id=user_id) == []


def test_move_to_pantry_uses_item_values_and_defaults(user_id):
    with_quantity = create_shopping_item(user_id=user_id, name="yogurt", quantity=3, unit="cup")
    bare = create_shopping_item(user_id=user_id, name="basil")

    moved = move_to_pantry(with_quantity.id, user_id=user_id, expiry_date=date(2024, 7, 1))
    defaulted = move_to_pantry(bare.id, user_id=user_id)

    assert (moved.name, moved.quantity, moved.unit) == ("yogurt", 3, "cup")
    assert moved.expiry_date == date(2024, 7, 1)
    assert (defaulted.quantity, defaulted.unit) == (1.0, "piece")
    assert list_shopping_items(user_id=user_id) == []
    assert {item.name for item in list_pantry_items(user_id=user_id)} == {"yogurt", "basil"}


def test_update_missing_item_raises(user_id):
    with pytest.raises(ValueError):
        update_shopping_item(999, user_id=user_id, name="nope")


def test_move_to_pantry_rolls_back_when_removal_fails(user_id, monkeypatch):
    item = create_shopping_item(user_id=user_id, name="butter")
    original_delete = Session.delete

    def failing_delete(self, instance):
        if isinstance(instance, ShoppingListItemORM):
            raise RuntimeError("disk full")
        return original_delete(self, instance)

    monkeypatch.setattr(Session, "delete", failing_delete)

    with pytest.raises(RuntimeError):
        move_to_pantry(item.id, user_id=user_id)

    monkeypatch.setattr(Session, "delete", original_delete)
    assert list_pantry_items(user_id=user_id) == []
    assert [entry.name for entry in list_shopping_items(user_id=user_id)] == ["butter"]


def test_update_ignores_null_name_and_checked_flag(user_id):
    item = create_shopping_item(user_id=user_id, name="Milk")
    update_shopping_item(item.id, user_id=user_id, is_checked=True)

    updated = update_shopping_item(item.id, user_id=user_id, name=None, is_checked=None)

    assert updated.name == "Milk"
    assert updated.is_checked is True
