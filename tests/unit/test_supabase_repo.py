from __future__ import annotations

from unittest.mock import MagicMock, call
from uuid import UUID

import httpx
import pytest
from postgrest.exceptions import APIError

from smartmeal.app.domain.errors import ConflictError, PersistenceError
from smartmeal.app.domain.models import (
    RecipeListQuery,
    RecipeSortField,
    RecipeSource,
    RecipeUpdate,
    SortOrder,
)
from smartmeal.app.infra.db.supabase_recipes_repo import (
    SupabaseProfileRepository,
    SupabaseRecipeRepository,
)

OWNER = "user-1"
RECIPE_ID = UUID("6f1c2f4e-3a0b-4d8e-9b7a-2c1d0e5f6a7b")
ROW = {
    "id": str(RECIPE_ID),
    "user_id": OWNER,
    "title": "Soup",
    "ingredients": ["water", "salt"],
    "preparation_steps": ["boil"],
    "source": "manual",
    "created_at": "2025-01-10T12:00:00Z",
    "updated_at": "2025-01-10T12:00:00Z",
}
PROFILE_ROW = {
    "id": "0e2d6a3c-1b4f-4c5e-8d7a-9f0b1c2d3e4f",
    "user_id": OWNER,
    "ingredients_to_avoid": ["peanut"],
    "created_at": "2025-01-10T12:00:00+00:00",
    "updated_at": "2025-01-10T12:00:00+00:00",
}


def _result(data=None, count=None) -> MagicMock:
    return MagicMock(data=data, count=count)


@pytest.fixture
def builder() -> MagicMock:
    mock = MagicMock()
    for method in ("select", "eq", "order", "range", "limit", "insert", "update", "delete"):
        getattr(mock, method).return_value = mock
    return mock


@pytest.fixture
def client(builder: MagicMock) -> MagicMock:
    mock = MagicMock()
    mock.table.return_value = builder
    return mock


class TestSupabaseRecipeRepositoryCreate:
    def test_inserts_row(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([ROW])
        repo = SupabaseRecipeRepository(client)

        recipe = repo.create(OWNER, "Soup", ["water", "salt"], ["boil"], RecipeSource.MANUAL)

        client.table.assert_called_with("recipes")
        builder.insert.assert_called_once_with(
            {
                "user_id": OWNER,
                "title": "Soup",
                "ingredients": ["water", "salt"],
                "preparation_steps": ["boil"],
                "source": "manual",
            }
        )
        assert recipe.id == RECIPE_ID
        assert recipe.source == RecipeSource.MANUAL
        assert recipe.created_at.tzinfo is not None

    def test_empty_insert_result(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([])

        with pytest.raises(PersistenceError):
            SupabaseRecipeRepository(client).create(OWNER, "Soup", ["water"], ["boil"], RecipeSource.AI)

    def test_writes_are_not_retried(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = httpx.ConnectError("connection reset")

        with pytest.raises(PersistenceError):
            SupabaseRecipeRepository(client).create(OWNER, "Soup", ["water"], ["boil"], RecipeSource.AI)

        assert builder.execute.call_count == 1


class TestSupabaseRecipeRepositoryGet:
    def test_scoped_to_owner(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([ROW])

        recipe = SupabaseRecipeRepository(client).get(RECIPE_ID, OWNER)

        assert recipe.title == "Soup"
        builder.eq.assert_has_calls([call("id", str(RECIPE_ID)), call("user_id", OWNER)])

    def test_missing(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([])
        assert SupabaseRecipeRepository(client).get(RECIPE_ID, OWNER) is None

    def test_transport_error_retried_once(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = [httpx.ConnectError("connection reset"), _result([ROW])]

        recipe = SupabaseRecipeRepository(client).get(RECIPE_ID, OWNER)

        assert recipe.id == RECIPE_ID
        assert builder.execute.call_count == 2

    def test_transport_error_twice(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(PersistenceError):
            SupabaseRecipeRepository(client).get(RECIPE_ID, OWNER)

        assert builder.execute.call_count == 2

    def test_api_error_not_retried(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = APIError({"message": "permission denied", "code": "42501"})

        with pytest.raises(PersistenceError) as exc_info:
            SupabaseRecipeRepository(client).get(RECIPE_ID, OWNER)

        assert "permission denied" in str(exc_info.value)
        assert builder.execute.call_count == 1


class TestSupabaseRecipeRepositoryList:
    def test_query_shape(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([ROW], count=21)
        query = RecipeListQuery(
            page=2,
            limit=10,
            sort=RecipeSortField.TITLE,
            order=SortOrder.ASC,
            source=RecipeSource.MANUAL,
        )

        page = SupabaseRecipeRepository(client).list(OWNER, query)

        builder.select.assert_called_once_with("*", count="exact")
        builder.eq.assert_has_calls([call("user_id", OWNER), call("source", "manual")])
        builder.order.assert_has_calls([call("title", desc=False), call("id", desc=False)])
        builder.range.assert_called_once_with(10, 19)
        assert len(page.recipes) == 1
        assert page.pagination.total_items == 21
        assert page.pagination.total_pages == 3
        assert page.pagination.has_next is True
        assert page.pagination.has_previous is True

    def test_range_past_the_end(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = [
            APIError({"message": "Requested range not satisfiable", "code": "PGRST103"}),
            _result(None, count=3),
        ]

        page = SupabaseRecipeRepository(client).list(OWNER, RecipeListQuery(page=9, limit=10))

        assert page.recipes == []
        assert page.pagination.total_items == 3
        assert page.pagination.has_next is False

    def test_other_api_errors_propagate(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = APIError({"message": "boom", "code": "XX000"})

        with pytest.raises(PersistenceError):
            SupabaseRecipeRepository(client).list(OWNER, RecipeListQuery())


class TestSupabaseRecipeRepositoryUpdateDelete:
    def test_update_sends_only_changed_fields(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([dict(ROW, title="Better soup")])

        recipe = SupabaseRecipeRepository(client).update(RECIPE_ID, OWNER, RecipeUpdate(title="Better soup"))

        builder.update.assert_called_once_with({"title": "Better soup"})
        assert recipe.title == "Better soup"

    def test_update_missing(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([])
        assert SupabaseRecipeRepository(client).update(RECIPE_ID, OWNER, RecipeUpdate(title="x")) is None

    def test_delete_uses_count(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([], count=1)

        assert SupabaseRecipeRepository(client).delete(RECIPE_ID, OWNER) is True
        builder.delete.assert_called_once_with(count="exact")

    def test_delete_nothing(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([], count=0)
        assert SupabaseRecipeRepository(client).delete(RECIPE_ID, OWNER) is False


class TestSupabaseProfileRepository:
    def test_get_by_owner(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([PROFILE_ROW])

        profile = SupabaseProfileRepository(client).get_by_owner(OWNER)

        client.table.assert_called_with("profiles")
        assert profile.ingredients_to_avoid == ["peanut"]

    def test_unique_violation_is_conflict(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = APIError({"message": "duplicate key", "code": "23505"})

        with pytest.raises(ConflictError):
            SupabaseProfileRepository(client).create(OWNER, [])

    def test_other_insert_errors(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.side_effect = APIError({"message": "boom", "code": "XX000"})

        with pytest.raises(PersistenceError):
            SupabaseProfileRepository(client).create(OWNER, [])

    def test_update(self, client: MagicMock, builder: MagicMock) -> None:
        builder.execute.return_value = _result([dict(PROFILE_ROW, ingredients_to_avoid=["milk"])])

        profile = SupabaseProfileRepository(client).update_ingredients_to_avoid(OWNER, ["milk"])

        builder.update.assert_called_once_with({"ingredients_to_avoid": ["milk"]})
        assert profile.ingredients_to_avoid == ["milk"]
