"""Expiry and low-stock alerts derived from pantry contents."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Sequence

from pantrypal.models.pantry import PantryAlert, PantryItem
from pantrypal.models.shopping import ShoppingListItem, ShoppingSuggestions

DEFAULT_WINDOW_DAYS = 3
DEFAULT_LOW_STOCK_THRESHOLD = 2.0
SUGGESTIONS_PER_GROUP = 5

_PRIORITIES = {"expired": 1, "urgent": 2, "warning": 3, "low_stock": 4}


def _days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def _format_quantity(quantity: float) -> str:
    return f"{quantity:g}"


def _expiry_alert(item: PantryItem, today: date, window_days: int) -> PantryAlert | None:
    if item.expiry_date is None:
        return None
    delta = (item.expiry_date - today).days
    if delta < 0:
        return PantryAlert(
            id=f"expired-{item.id}",
            type="expired",
            title="Item Expired",
            message=f"{item.name} has expired {_days(-delta)} ago",
            item_id=item.id,
            priority=_PRIORITIES["expired"],
        )
    if delta == 0:
        return PantryAlert(
            id=f"today-{item.id}",
            type="urgent",
            title="Expires Today!",
            message=f"{item.name} expires today. Use it now!",
            item_id=item.id,
            priority=_PRIORITIES["urgent"],
        )
    if delta <= window_days:
        return PantryAlert(
            id=f"soon-{item.id}",
            type="warning",
            title="Expiring Soon",
            message=f"{item.name} expires in {_days(delta)}",
            item_id=item.id,
            priority=_PRIORITIES["warning"],
        )
    return None


def build_alerts(
    items: Iterable[PantryItem],
    *,
    today: date | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
    low_stock_threshold: float = DEFAULT_LOW_STOCK_THRESHOLD,
) -> List[PantryAlert]:
    """Return alerts for the given items sorted by priority.

    Each item yields at most one expiry alert (expired, due today or due within
    ``window_days``) and, independently, a low-stock alert when its quantity is
    at or below ``low_stock_threshold``. Items sharing a priority keep their
    input order.
    """

    reference = today or date.today()
    alerts: List[PantryAlert] = []
    for item in items:
        expiry = _expiry_alert(item, reference, window_days)
        if expiry is not None:
            alerts.append(expiry)
        if item.quantity <= low_stock_threshold:
            alerts.append(
                PantryAlert(
                    id=f"low-{item.id}",
                    type="low_stock",
                    title="Low Stock",
                    message=f"Only {_format_quantity(item.quantity)} {item.name} left",
                    item_id=item.id,
                    priority=_PRIORITIES["low_stock"],
                )
            )
    return sorted(alerts, key=lambda alert: alert.priority)


def restock_suggestions(
    pantry: Sequence[PantryItem],
    shopping_list: Sequence[ShoppingListItem],
    *,
    today: date | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
    low_stock_threshold: float = DEFAULT_LOW_STOCK_THRESHOLD,
    limit: int = SUGGESTIONS_PER_GROUP,
) -> ShoppingSuggestions:
    """Suggest pantry items to restock: low stock not yet listed, and expiring soon."""

    reference = today or date.today()
    cutoff = reference + timedelta(days=window_days)
    listed = {entry.name.strip().lower() for entry in shopping_list}

    low_stock = [
        item
        for item in pantry
        if item.quantity <= low_stock_threshold and item.name.strip().lower() not in listed
    ]
    expiring_soon = [
        item
        for item in pantry
        if item.expiry_date is not None and reference <= item.expiry_date <= cutoff
    ]
    return ShoppingSuggestions(low_stock=low_stock[:limit], expiring_soon=expiring_soon[:limit])


__all__ = ["build_alerts", "restock_suggestions"]
