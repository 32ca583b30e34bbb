# smartmeal/app/infra/db/base.py
"""
Abstract repositories for recipes and preference profiles.
This interface allows easy swapping between storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from smartmeal.app.domain.models import (
    PreferenceProfile,
    Recipe,
    RecipeListQuery,
    RecipePage,
    RecipeSource,
    RecipeUpdate,
)


class RecipeRepository(ABC):
    """
    Abstract interface for recipe persistence.

    Every operation is scoped by owner. A recipe that exists but belongs to a
    different owner is reported exactly like a missing one.

    Implementations:
    - SupabaseRecipeRepository: Postgres table behind Supabase
    - InMemoryRecipeRepository: process-local store for tests and local runs
    """

    @abstractmethod
    def create(
        self,
        owner_id: str,
        title: str,
        ingredients: Sequence[str],
        preparation_steps: Sequence[str],
        source: RecipeSource,
    ) -> Recipe:
        """
        Persist a new recipe.

        Args:
            owner_id: Owner of the recipe
            title: Recipe title
            ingredients: Ingredient lines
            preparation_steps: Ordered steps
            source: Where the recipe came from

        Returns:
            The created Recipe with id and timestamps assigned
        """
        pass

    @abstractmethod
    def get(self, recipe_id: UUID, owner_id: str) -> Optional[Recipe]:
        """
        Get a recipe by id.

        Returns:
            The recipe, or None if missing or owned by someone else
        """
        pass

    @abstractmethod
    def list(self, owner_id: str, query: RecipeListQuery) -> RecipePage:
        """
        List recipes of an owner, filtered, sorted and paginated.

        The source filter applies before counting, so the pagination totals
        describe the filtered set.
        """
        pass

    @abstractmethod
    def update(
        self,
        recipe_id: UUID,
        owner_id: str,
        changes: RecipeUpdate,
    ) -> Optional[Recipe]:
        """
        Apply a partial update. Fields absent from ``changes`` are untouched.

        Returns:
            The updated recipe, or None if nothing matched
        """
        pass

    @abstractmethod
    def delete(self, recipe_id: UUID, owner_id: str) -> bool:
        """
        Delete a recipe.

        Returns:
            True if a row was removed, False if nothing matched
        """
        pass


class ProfileRepository(ABC):
    """
    Abstract interface for preference profiles (one per owner).
    """

    @abstractmethod
    def get_by_owner(self, owner_id: str) -> Optional[PreferenceProfile]:
        pass

    @abstractmethod
    def create(self, owner_id: str, ingredients_to_avoid: Sequence[str]) -> PreferenceProfile:
        """
        Create the owner's profile.

        Raises:
            ConflictError: If the owner already has a profile
        """
        pass

    @abstractmethod
    def update_ingredients_to_avoid(
        self,
        owner_id: str,
        ingredients_to_avoid: Sequence[str],
    ) -> Optional[PreferenceProfile]:
        pass
