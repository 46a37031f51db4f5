"""User account models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """Registered household member."""

    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class AuthResponse(BaseModel):
    """Payload returned after registering or logging in."""

    user: User
    token: str


__all__ = ["AuthResponse", "User"]
