# smartmeal/app/infra/db/memory_repo.py
"""
Process-local repositories.

Used by the test suite and by RECIPES_BACKEND=memory for local runs without
Supabase. They mirror what the database does for us in production: ids and
timestamps are assigned here, and updated_at moves forward on every update.
"""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence
from uuid import UUID, uuid4

from smartmeal.app.domain.errors import ConflictError
from smartmeal.app.domain.models import (
    PreferenceProfile,
    Recipe,
    RecipeListQuery,
    RecipePage,
    RecipeSource,
    RecipeUpdate,
    SortOrder,
    build_pagination,
)
from smartmeal.app.infra.db.base import ProfileRepository, RecipeRepository


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _next_timestamp(previous: Optional[datetime]) -> datetime:
    now = _now_utc()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _copy_recipe(recipe: Recipe) -> Recipe:
    return replace(
        recipe,
        ingredients=list(recipe.ingredients),
        preparation_steps=list(recipe.preparation_steps),
    )


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self) -> None:
        self._rows: dict[UUID, Recipe] = {}
        self._lock = threading.Lock()

    def create(
        self,
        owner_id: str,
        title: str,
        ingredients: Sequence[str],
        preparation_steps: Sequence[str],
        source: RecipeSource,
    ) -> Recipe:
        now = _now_utc()
        recipe = Recipe(
            id=uuid4(),
            user_id=owner_id,
            title=title,
            ingredients=list(ingredients),
            preparation_steps=list(preparation_steps),
            source=RecipeSource(source),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._rows[recipe.id] = recipe
        return _copy_recipe(recipe)

    def _owned(self, recipe_id: UUID, owner_id: str) -> Optional[Recipe]:
        recipe = self._rows.get(recipe_id)
        if recipe is None or recipe.user_id != owner_id:
            return None
        return recipe

    def get(self, recipe_id: UUID, owner_id: str) -> Optional[Recipe]:
        with self._lock:
            recipe = self._owned(recipe_id, owner_id)
            return _copy_recipe(recipe) if recipe else None

    def list(self, owner_id: str, query: RecipeListQuery) -> RecipePage:
        with self._lock:
            rows = [
                recipe
                for recipe in self._rows.values()
                if recipe.user_id == owner_id
                and (query.source is None or recipe.source == query.source)
            ]

        rows.sort(
            key=lambda recipe: (getattr(recipe, query.sort.value), str(recipe.id)),
            reverse=query.order == SortOrder.DESC,
        )
        page_rows = rows[query.offset:query.offset + query.limit]

        return RecipePage(
            recipes=[_copy_recipe(recipe) for recipe in page_rows],
            pagination=build_pagination(query.page, query.limit, len(rows)),
        )

    def update(
        self,
        recipe_id: UUID,
        owner_id: str,
        changes: RecipeUpdate,
    ) -> Optional[Recipe]:
        with self._lock:
            recipe = self._owned(recipe_id, owner_id)
            if recipe is None:
                return None

            data = changes.as_changes()
            if not data:
                return _copy_recipe(recipe)

            updated = replace(recipe, **data, updated_at=_next_timestamp(recipe.updated_at))
            self._rows[recipe_id] = updated
            return _copy_recipe(updated)

    def delete(self, recipe_id: UUID, owner_id: str) -> bool:
        with self._lock:
            if self._owned(recipe_id, owner_id) is None:
                return False
            del self._rows[recipe_id]
            return True


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self) -> None:
        self._profiles: dict[str, PreferenceProfile] = {}
        self._lock = threading.Lock()

    def get_by_owner(self, owner_id: str) -> Optional[PreferenceProfile]:
        with self._lock:
            profile = self._profiles.get(owner_id)
            return replace(profile, ingredients_to_avoid=list(profile.ingredients_to_avoid)) if profile else None

    def create(self, owner_id: str, ingredients_to_avoid: Sequence[str]) -> PreferenceProfile:
        now = _now_utc()
        profile = PreferenceProfile(
            id=uuid4(),
            user_id=owner_id,
            ingredients_to_avoid=list(ingredients_to_avoid),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            if owner_id in self._profiles:
                raise ConflictError("Profile already exists")
            self._profiles[owner_id] = profile
        return replace(profile, ingredients_to_avoid=list(profile.ingredients_to_avoid))

    def update_ingredients_to_avoid(
        self,
        owner_id: str,
        ingredients_to_avoid: Sequence[str],
    ) -> Optional[PreferenceProfile]:
        with self._lock:
            profile = self._profiles.get(owner_id)
            if profile is None:
                return None
            updated = replace(
                profile,
                ingredients_to_avoid=list(ingredients_to_avoid),
                updated_at=_next_timestamp(profile.updated_at),
            )
            self._profiles[owner_id] = updated
            return replace(updated, ingredients_to_avoid=list(updated.ingredients_to_avoid))
