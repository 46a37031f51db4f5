"""Pantry inventory models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AlertType = Literal["expired", "urgent", "warning", "low_stock"]


class Category(BaseModel):
    """Grouping used to organise pantry items."""

    id: int
    name: str
    icon: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class PantryItem(BaseModel):
    """Item currently stored in a household pantry."""

    id: int
    name: str
    quantity: float
    unit: str
    expiry_date: Optional[date] = Field(default=None)
    category_id: Optional[int] = Field(default=None)
    category_name: Optional[str] = Field(default=None)
    category_icon: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class PantryAlert(BaseModel):
    """Expiry or stock notification derived from a pantry item."""

    id: str
    type: AlertType
    title: str
    message: str
    item_id: int
    priority: int

    model_config = ConfigDict(frozen=True)


__all__ = ["AlertType", "Category", "PantryAlert", "PantryItem"]
