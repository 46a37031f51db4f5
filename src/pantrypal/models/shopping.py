"""Shopping list models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pantrypal.models.pantry import PantryItem

DEFAULT_SHOPPING_CATEGORY = "Groceries"


class ShoppingListItem(BaseModel):
    """Single entry on the household shopping list."""

    id: int
    name: str
    quantity: Optional[float] = Field(default=None)
    unit: Optional[str] = Field(default=None)
    category: str = Field(default=DEFAULT_SHOPPING_CATEGORY)
    notes: Optional[str] = Field(default=None, max_length=1000)
    is_checked: bool = Field(default=False)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


class ShoppingSuggestions(BaseModel):
    """Pantry items worth restocking soon."""

    low_stock: list[PantryItem] = Field(default_factory=list)
    expiring_soon: list[PantryItem] = Field(default_factory=list)


__all__ = ["DEFAULT_SHOPPING_CATEGORY", "ShoppingListItem", "ShoppingSuggestions"]
