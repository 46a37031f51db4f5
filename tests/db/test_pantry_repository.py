"""Unit tests for the pantry repository helpers."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from pantrypal.db.categories import DEFAULT_CATEGORIES, list_categories
from pantrypal.db.models import PantryItemORM
from pantrypal.db.pantry import (
    UnknownCategoryError,
    create_pantry_item,
    delete_pantry_item,
    get_pantry_item,
    list_expiring_items,
    list_pantry_items,
    list_pantry_names,
    update_pantry_item,
)
from pantrypal.db.repository import session_scope
from pantrypal.db.users import register_user


@pytest.fixture()
def user_id() -> int:
    user, _ = register_user(email="pantry@example.com", password="secret123", name="Pat")
    return user.id


@pytest.fixture()
def other_user_id() -> int:
    user, _ = register_user(email="other@example.com", password="secret123", name="Oli")
    return user.id


def _category_id(name: str) -> int:
    return next(category.id for category in list_categories() if category.name == name)


def test_categories_seeded_once_and_ordered_by_name():
    categories = list_categories()

    assert len(categories) == len(DEFAULT_CATEGORIES)
    assert [c.name for c in categories] == sorted(c["name"] for c in DEFAULT_CATEGORIES)
    assert len(list_categories()) == len(categories)


def test_create_applies_defaults_and_category_details(user_id):
    dairy = _category_id("Dairy")

    item = create_pantry_item(user_id=user_id, name="  Milk ", category_id=dairy)

    assert item.name == "Milk"
    assert item.quantity == 1.0
    assert item.unit == "piece"
    assert item.category_name == "Dairy"
    assert item.category_icon == "🥛"


def test_create_with_unknown_category_raises(user_id):
    with pytest.raises(UnknownCategoryError):
        create_pantry_item(user_id=user_id, name="Mystery", category_id=9999)

    assert list_pantry_items(user_id=user_id) == []


def test_list_orders_by_expiry_with_undated_last(user_id):
    today = date.today()
    create_pantry_item(user_id=user_id, name="Rice")
    create_pantry_item(user_id=user_id, name="Yogurt", expiry_date=today + timedelta(days=5))
    create_pantry_item(user_id=user_id, name="Apples")
    create_pantry_item(user_id=user_id, name="Milk", expiry_date=today + timedelta(days=1))

    names = [item.name for item in list_pantry_items(user_id=user_id)]

    assert names == ["Milk", "Yogurt", "Apples", "Rice"]
    assert list_pantry_names(user_id=user_id) == ["Rice", "Yogurt", "Apples", "Milk"]


def test_list_expiring_includes_expired_and_window(user_id):
    today = date(2024, 3, 1)
    create_pantry_item(user_id=user_id, name="Old", expiry_date=today - timedelta(days=2))
    create_pantry_item(user_id=user_id, name="Edge", expiry_date=today + timedelta(days=3))
    create_pantry_item(user_id=user_id, name="Far", expiry_date=today + timedelta(days=4))
    create_pantry_item(user_id=user_id, name="Undated")

    expiring = list_expiring_items(user_id=user_id, within_days=3, today=today)

    assert [item.name for item in expiring] == ["Old", "Edge"]


def test_update_is_partial_and_can_clear_fields(user_id):
    produce = _category_id("Produce")
    item = create_pantry_item(
        user_id=user_id,
        name="Carrots",
        quantity=6,
        unit="piece",
        category_id=produce,
        expiry_date=date(2024, 6, 1),
        notes="organic",
    )

    updated = update_pantry_item(item.id, user_id=user_id, quantity=3)
    assert updated.quantity == 3
    assert updated.unit == "piece"
    assert updated.category_name == "Produce"
    assert updated.notes == "organic"

    cleared = update_pantry_item(item.id, user_id=user_id, category_id=None, expiry_date=None)
    assert cleared.category_id is None
    assert cleared.category_name is None
    assert cleared.expiry_date is None

    with session_scope() as session:
        row = session.get(PantryItemORM, item.id)
        assert row is not None and row.quantity == 3


def test_items_are_scoped_to_their_owner(user_id, other_user_id):
    item = create_pantry_item(user_id=user_id, name="Coffee")

    assert list_pantry_items(user_id=other_user_id) == []
    assert get_pantry_item(item.id, user_id=other_user_id) is None
    with pytest.raises(ValueError):
        update_pantry_item(item.id, user_id=other_user_id, quantity=2)
    with pytest.raises(ValueError):
        delete_pantry_item(item.id, user_id=other_user_id)

    delete_pantry_item(item.id, user_id=user_id)
    assert get_pantry_item(item.id, user_id=user_id) is None


def test_update_missing_item_raises(user_id):
    with pytest.raises(ValueError):
        update_pantry_item(999, user_id=user_id, name="nope")
