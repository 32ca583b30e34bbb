from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Callable, Optional, Sequence
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from smartmeal.app.domain.errors import ConflictError, PersistenceError
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

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
RANGE_NOT_SATISFIABLE = "PGRST103"
READ_ATTEMPTS = 2


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _as_str_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def _row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=UUID(str(row["id"])),
        user_id=str(row["user_id"]),
        title=str(row["title"]),
        ingredients=_as_str_list(row.get("ingredients")),
        preparation_steps=_as_str_list(row.get("preparation_steps")),
        source=RecipeSource(str(row["source"])),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _row_to_profile(row: dict[str, Any]) -> PreferenceProfile:
    return PreferenceProfile(
        id=UUID(str(row["id"])),
        user_id=str(row["user_id"]),
        ingredients_to_avoid=_as_str_list(row.get("ingredients_to_avoid")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _error_reason(error: Exception) -> str:
    message = getattr(error, "message", None)
    return str(message or error)


def _create_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


class _SupabaseTable:
    TABLE_NAME = ""

    def __init__(self, client: Client | None = None):
        self._client = client or _create_supabase_client()

    def _table(self):
        return self._client.table(self.TABLE_NAME)

    def _read(self, operation: str, owner_id: str, build: Callable[[], Any]) -> Any:
        # reads are idempotent, so a dropped connection gets one more try
        for attempt in range(1, READ_ATTEMPTS + 1):
            try:
                return build().execute()
            except httpx.TransportError as error:
                if attempt == READ_ATTEMPTS:
                    logger.error("%s failed: owner=%s error=%s", operation, owner_id, error)
                    raise PersistenceError(operation, str(error)) from error
                logger.warning("%s transport error, retrying: owner=%s error=%s", operation, owner_id, error)
            except (APIError, httpx.HTTPError) as error:
                logger.error("%s failed: owner=%s error=%s", operation, owner_id, _error_reason(error))
                raise PersistenceError(operation, _error_reason(error)) from error

    def _write(self, operation: str, owner_id: str, build: Callable[[], Any]) -> Any:
        try:
            return build().execute()
        except (APIError, httpx.HTTPError) as error:
            logger.error("%s failed: owner=%s error=%s", operation, owner_id, _error_reason(error))
            raise PersistenceError(operation, _error_reason(error)) from error


class SupabaseRecipeRepository(_SupabaseTable, RecipeRepository):
    TABLE_NAME = "recipes"

    def create(
        self,
        owner_id: str,
        title: str,
        ingredients: Sequence[str],
        preparation_steps: Sequence[str],
        source: RecipeSource,
    ) -> Recipe:
        row = {
            "user_id": owner_id,
            "title": title,
            "ingredients": list(ingredients),
            "preparation_steps": list(preparation_steps),
            "source": RecipeSource(source).value,
        }
        result = self._write("recipe.create", owner_id, lambda: self._table().insert(row))

        if not result.data:
            raise PersistenceError("recipe.create", "insert returned no rows")

        recipe = _row_to_recipe(result.data[0])
        logger.info("Created recipe: id=%s, owner=%s, source=%s", recipe.id, owner_id, recipe.source.value)
        return recipe

    def get(self, recipe_id: UUID, owner_id: str) -> Optional[Recipe]:
        result = self._read(
            "recipe.get",
            owner_id,
            lambda: self._table()
            .select("*")
            .eq("id", str(recipe_id))
            .eq("user_id", owner_id)
            .limit(1),
        )
        rows = result.data or []
        return _row_to_recipe(rows[0]) if rows else None

    def list(self, owner_id: str, query: RecipeListQuery) -> RecipePage:
        desc = query.order == SortOrder.DESC

        def build():
            builder = self._table().select("*", count="exact").eq("user_id", owner_id)
            if query.source is not None:
                builder = builder.eq("source", query.source.value)
            return (
                builder.order(query.sort.value, desc=desc)
                .order("id", desc=desc)
                .range(query.offset, query.offset + query.limit - 1)
            )

        try:
            result = self._read("recipe.list", owner_id, build)
        except PersistenceError as error:
            if not self._is_range_error(error):
                raise
            # PostgREST refuses ranges past the end; report an empty page with the real total
            total = self._count(owner_id, query.source)
            return RecipePage(recipes=[], pagination=build_pagination(query.page, query.limit, total))

        rows = result.data or []
        total = getattr(result, "count", None)
        if total is None:
            total = query.offset + len(rows)

        return RecipePage(
            recipes=[_row_to_recipe(row) for row in rows],
            pagination=build_pagination(query.page, query.limit, total),
        )

    @staticmethod
    def _is_range_error(error: PersistenceError) -> bool:
        cause = error.__cause__
        return isinstance(cause, APIError) and getattr(cause, "code", None) == RANGE_NOT_SATISFIABLE

    def _count(self, owner_id: str, source: RecipeSource | None) -> int:
        def build():
            builder = self._table().select("id", count="exact", head=True).eq("user_id", owner_id)
            if source is not None:
                builder = builder.eq("source", source.value)
            return builder

        result = self._read("recipe.count", owner_id, build)
        return getattr(result, "count", None) or 0

    def update(
        self,
        recipe_id: UUID,
        owner_id: str,
        changes: RecipeUpdate,
    ) -> Optional[Recipe]:
        data = changes.as_changes()
        if not data:
            return self.get(recipe_id, owner_id)

        # updated_at is maintained by the recipes_updated_at_trigger
        result = self._write(
            "recipe.update",
            owner_id,
            lambda: self._table().update(data).eq("id", str(recipe_id)).eq("user_id", owner_id),
        )
        rows = result.data or []
        if not rows:
            return None

        logger.info("Updated recipe: id=%s, owner=%s, fields=%s", recipe_id, owner_id, sorted(data))
        return _row_to_recipe(rows[0])

    def delete(self, recipe_id: UUID, owner_id: str) -> bool:
        result = self._write(
            "recipe.delete",
            owner_id,
            lambda: self._table()
            .delete(count="exact")
            .eq("id", str(recipe_id))
            .eq("user_id", owner_id),
        )
        deleted = getattr(result, "count", None)
        if deleted is None:
            deleted = len(result.data or [])

        if deleted:
            logger.info("Deleted recipe: id=%s, owner=%s", recipe_id, owner_id)
        return deleted > 0


class SupabaseProfileRepository(_SupabaseTable, ProfileRepository):
    TABLE_NAME = "profiles"

    def get_by_owner(self, owner_id: str) -> Optional[PreferenceProfile]:
        result = self._read(
            "profile.get",
            owner_id,
            lambda: self._table().select("*").eq("user_id", owner_id).limit(1),
        )
        rows = result.data or []
        return _row_to_profile(rows[0]) if rows else None

    def create(self, owner_id: str, ingredients_to_avoid: Sequence[str]) -> PreferenceProfile:
        row = {"user_id": owner_id, "ingredients_to_avoid": list(ingredients_to_avoid)}
        try:
            result = self._table().insert(row).execute()
        except APIError as error:
            if getattr(error, "code", None) == UNIQUE_VIOLATION:
                raise ConflictError("Profile already exists") from error
            logger.error("profile.create failed: owner=%s error=%s", owner_id, _error_reason(error))
            raise PersistenceError("profile.create", _error_reason(error)) from error
        except httpx.HTTPError as error:
            logger.error("profile.create failed: owner=%s error=%s", owner_id, error)
            raise PersistenceError("profile.create", str(error)) from error

        if not result.data:
            raise PersistenceError("profile.create", "insert returned no rows")
        return _row_to_profile(result.data[0])

    def update_ingredients_to_avoid(
        self,
        owner_id: str,
        ingredients_to_avoid: Sequence[str],
    ) -> Optional[PreferenceProfile]:
        result = self._write(
            "profile.update",
            owner_id,
            lambda: self._table()
            .update({"ingredients_to_avoid": list(ingredients_to_avoid)})
            .eq("user_id", owner_id),
        )
        rows = result.data or []
        return _row_to_profile(rows[0]) if rows else None
