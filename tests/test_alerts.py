"""Tests for expiry/low-stock alerts and restock suggestions."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from pantrypal.alerts import build_alerts, restock_suggestions
from pantrypal.models.pantry import PantryItem
from pantrypal.models.shopping import ShoppingListItem

TODAY = date(2024, 5, 10)


def _item(item_id: int, name: str, *, quantity: float = 5, expires_in: int | None = None) -> PantryItem:
    expiry = TODAY + timedelta(days=expires_in) if expires_in is not None else None
    return PantryItem(id=item_id, name=name, quantity=quantity, unit="piece", expiry_date=expiry)


def _listed(name: str) -> ShoppingListItem:
    now = datetime(2024, 5, 10, 9, 0)
    return ShoppingListItem(id=1, name=name, created_at=now, updated_at=now)


def test_alert_types_titles_and_messages():
    items = [
        _item(1, "Milk", expires_in=-2),
        _item(2, "Yogurt", expires_in=0),
        _item(3, "Spinach", expires_in=1),
        _item(4, "Cheese", expires_in=3),
        _item(5, "Rice", expires_in=4),
        _item(6, "Pasta"),
    ]

    alerts = build_alerts(items, today=TODAY)

    assert [(a.id, a.type, a.title, a.message) for a in alerts] == [
        ("expired-1", "expired", "Item Expired", "Milk has expired 2 days ago"),
        ("today-2", "urgent", "Expires Today!", "Yogurt expires today. Use it now!"),
        ("soon-3", "warning", "Expiring Soon", "Spinach expires in 1 day"),
        ("soon-4", "warning", "Expiring Soon", "Cheese expires in 3 days"),
    ]


def test_low_stock_alert_is_independent_of_expiry_and_sorted_last():
    items = [
        _item(1, "Eggs", quantity=2),
        _item(2, "Butter", quantity=1.5, expires_in=-1),
        _item(3, "Flour", quantity=2.5),
    ]

    alerts = build_alerts(items, today=TODAY)

    assert [a.id for a in alerts] == ["expired-2", "low-1", "low-2"]
    assert [a.priority for a in alerts] == [1, 4, 4]
    assert alerts[1].message == "Only 2 Eggs left"
    assert alerts[2].message == "Only 1.5 Butter left"


def test_expired_one_day_uses_singular():
    [alert] = build_alerts([_item(7, "Bread", expires_in=-1)], today=TODAY)

    assert alert.message == "Bread has expired 1 day ago"


def test_thresholds_are_configurable():
    items = [_item(1, "Tea", quantity=4, expires_in=5)]

    alerts = build_alerts(items, today=TODAY, window_days=7, low_stock_threshold=4)

    assert [a.type for a in alerts] == ["warning", "low_stock"]


def test_restock_suggestions_skip_items_already_listed():
    pantry = [
        _item(1, "Milk", quantity=1),
        _item(2, "Eggs", quantity=2),
        _item(3, "Flour", quantity=10),
    ]

    suggestions = restock_suggestions(pantry, [_listed(" milk ")], today=TODAY)

    assert [item.name for item in suggestions.low_stock] == ["Eggs"]


def test_restock_suggestions_expiring_window_excludes_expired():
    pantry = [
        _item(1, "Old", expires_in=-1),
        _item(2, "Today", expires_in=0),
        _item(3, "Soon", expires_in=3),
        _item(4, "Later", expires_in=4),
        _item(5, "Undated"),
    ]

    suggestions = restock_suggestions(pantry, [], today=TODAY)

    assert [item.name for item in suggestions.expiring_soon] == ["Today", "Soon"]


def test_restock_suggestions_cap_each_group_at_five():
    pantry = [_item(i, f"Item {i}", quantity=1, expires_in=1) for i in range(1, 9)]

    suggestions = restock_suggestions(pantry, [], today=TODAY)

    assert len(suggestions.low_stock) == 5
    assert len(suggestions.expiring_soon) == 5
