# smartmeal/app/services/recipe_service.py
"""
Recipe orchestration service.
Validates caller input, enforces ownership and composes generation,
conflict checking and persistence.
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Mapping
from uuid import UUID

from smartmeal.app.domain.errors import PersistenceError, RecipeNotFoundError
from smartmeal.app.domain.models import (
    GenerateRecipeResult,
    Recipe,
    RecipeListQuery,
    RecipePage,
)
from smartmeal.app.infra.db.base import ProfileRepository, RecipeRepository
from smartmeal.app.schemas.recipes import (
    CreateRecipeRequest,
    GenerateRecipeRequest,
    RecipeListParams,
    UpdateRecipeRequest,
)
from smartmeal.app.validation import parse_model, parse_recipe_id
from smartmeal.services.ingredient_conflicts import check_ingredient_conflicts
from smartmeal.services.recipe_generator import RecipeGenerator

logger = logging.getLogger(__name__)


class RecipeService:
    """
    Service for the recipe operations exposed to callers.

    Responsibilities:
    - Generate drafts from ingredients and flag ingredients the owner avoids
    - Create, read, list, update and delete the owner's recipes
    - Report foreign and missing recipes the same way (RecipeNotFoundError)

    Commands can be given as request models or as plain mappings.
    """

    def __init__(
        self,
        recipes: RecipeRepository,
        profiles: ProfileRepository,
        generator: RecipeGenerator,
    ):
        self._recipes = recipes
        self._profiles = profiles
        self._generator = generator

    def generate_recipe(
        self,
        owner_id: str,
        command: GenerateRecipeRequest | Mapping[str, Any],
    ) -> GenerateRecipeResult:
        """
        Generate a draft recipe. Nothing is persisted.

        Args:
            owner_id: The caller
            command: Ingredients to cook with (at least 3)

        Returns:
            GenerateRecipeResult with the draft and any ingredient warnings

        Raises:
            InvalidInputError: If fewer than 3 non-empty ingredients are given
            GenerationUnavailableError: If the generation service fails
        """
        request = parse_model(GenerateRecipeRequest, command)
        draft = self._generator.generate(request.ingredients)
        warnings = check_ingredient_conflicts(draft.ingredients, self._ingredients_to_avoid(owner_id))

        logger.info("recipe.generate owner=%s warnings=%d", owner_id, len(warnings))
        return GenerateRecipeResult(recipe=draft, warnings=warnings)

    def _ingredients_to_avoid(self, owner_id: str) -> list[str]:
        # warnings are advisory; a failed profile lookup must not cost the user the draft
        try:
            profile = self._profiles.get_by_owner(owner_id)
        except PersistenceError as error:
            logger.warning("recipe.generate profile lookup failed owner=%s reason=%s", owner_id, error.reason)
            return []
        return list(profile.ingredients_to_avoid) if profile else []

    def create_recipe(
        self,
        owner_id: str,
        command: CreateRecipeRequest | Mapping[str, Any],
    ) -> Recipe:
        """
        Save a recipe, typed in by the user or accepted from a draft.

        The source tag is taken from the caller as declared.
        """
        request = parse_model(CreateRecipeRequest, command)
        recipe = self._recipes.create(
            owner_id,
            request.title,
            request.ingredients,
            request.preparation_steps,
            request.source,
        )
        logger.info("recipe.create owner=%s id=%s source=%s", owner_id, recipe.id, recipe.source.value)
        return recipe

    def list_recipes(
        self,
        owner_id: str,
        query: RecipeListQuery | RecipeListParams | Mapping[str, Any] | None = None,
    ) -> RecipePage:
        """
        Raises:
            InvalidInputError: If page, limit, sort, order or source is out of range,
                whatever form the query is given in
        """
        if query is None:
            query = {}
        elif isinstance(query, RecipeListQuery):
            query = asdict(query)
        params = parse_model(RecipeListParams, query)
        return self._recipes.list(owner_id, params.to_query())

    def get_recipe(self, owner_id: str, recipe_id: UUID | str) -> Recipe:
        """
        Raises:
            InvalidInputError: If recipe_id is not a UUID
            RecipeNotFoundError: If missing or owned by someone else
        """
        parsed_id = parse_recipe_id(recipe_id)
        recipe = self._recipes.get(parsed_id, owner_id)
        if recipe is None:
            raise RecipeNotFoundError(str(parsed_id))
        return recipe

    def update_recipe(
        self,
        owner_id: str,
        recipe_id: UUID | str,
        command: UpdateRecipeRequest | Mapping[str, Any],
    ) -> Recipe:
        parsed_id = parse_recipe_id(recipe_id)
        request = parse_model(UpdateRecipeRequest, command)
        changes = request.to_update()

        recipe = self._recipes.update(parsed_id, owner_id, changes)
        if recipe is None:
            raise RecipeNotFoundError(str(parsed_id))

        logger.info("recipe.update owner=%s id=%s fields=%s", owner_id, parsed_id, sorted(changes.as_changes()))
        return recipe

    def delete_recipe(self, owner_id: str, recipe_id: UUID | str) -> None:
        parsed_id = parse_recipe_id(recipe_id)
        if not self._recipes.delete(parsed_id, owner_id):
            raise RecipeNotFoundError(str(parsed_id))
        logger.info("recipe.delete owner=%s id=%s", owner_id, parsed_id)
