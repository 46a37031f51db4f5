"""Saved recipe bookmarks."""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import select

from pantrypal.models.recipes import SavedRecipe

from .models import SavedRecipeORM
from .repository import session_scope


def _to_model(row: SavedRecipeORM) -> SavedRecipe:
    return SavedRecipe.model_validate(
        {
            "id": row.id,
            "recipe_api_id": row.recipe_api_id,
            "title": row.title,
            "image_url": row.image_url,
            "source": row.source,
            "saved_at": row.saved_at,
        }
    )


def save_recipe(
    *,
    user_id: int,
    recipe_api_id: str,
    title: str,
    image_url: Optional[str] = None,
    source: Optional[str] = None,
) -> Tuple[SavedRecipe, bool]:
    """Bookmark a recipe; returns the record and whether it was newly created."""

    api_id = str(recipe_api_id).strip()
    with session_scope() as session:
        existing = session.execute(
            select(SavedRecipeORM).where(
                SavedRecipeORM.user_id == user_id,
                SavedRecipeORM.recipe_api_id == api_id,
            )
        ).scalar_one_or_none()
        if existing is not None:
            return _to_model(existing), False

        row = SavedRecipeORM(
            user_id=user_id,
            recipe_api_id=api_id,
            title=title.strip(),
            image_url=image_url,
            source=source,
        )
        session.add(row)
        session.flush()
        session.refresh(row)
        return _to_model(row), True


def list_saved_recipes(*, user_id: int) -> List[SavedRecipe]:
    """Return the user's bookmarks, most recently saved first."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(SavedRecipeORM)
                .where(SavedRecipeORM.user_id == user_id)
                .order_by(SavedRecipeORM.saved_at.desc(), SavedRecipeORM.id.desc())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def delete_saved_recipe(saved_id: int, *, user_id: int) -> None:
    with session_scope() as session:
        row = session.get(SavedRecipeORM, saved_id)
        if row is None or row.user_id != user_id:
            raise ValueError(f"Saved recipe {saved_id} not found")
        session.delete(row)


__all__ = ["delete_saved_recipe", "list_saved_recipes", "save_recipe"]
