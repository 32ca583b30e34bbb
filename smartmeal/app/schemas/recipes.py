from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from smartmeal.app.domain.models import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_TITLE_LENGTH,
    GenerateRecipeResult,
    Pagination,
    Recipe,
    RecipeListQuery,
    RecipePage,
    RecipeSortField,
    RecipeSource,
    RecipeUpdate,
    SortOrder,
)
from smartmeal.services.recipe_generator import sanitize_ingredients

MIN_GENERATION_INGREDIENTS = 3


def _clean_lines(value: list[str], empty_message: str) -> list[str]:
    cleaned = [item.strip() for item in value]
    if any(not item for item in cleaned):
        raise ValueError(empty_message)
    return cleaned


def _clean_title(value: str) -> str:
    title = value.strip()
    if not title:
        raise ValueError("Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title must not exceed {MAX_TITLE_LENGTH} characters")
    return title


# =============================================================================
# Requests
# =============================================================================

class GenerateRecipeRequest(BaseModel):
    ingredients: list[str]

    @field_validator("ingredients")
    @classmethod
    def _check_ingredients(cls, value: list[str]) -> list[str]:
        cleaned = _clean_lines(value, "Ingredient cannot be empty")
        # every ingredient must still be non-empty after prompt sanitization
        if any(not item.strip() for item in sanitize_ingredients(cleaned)):
            raise ValueError("Ingredient has no usable characters")
        if len(cleaned) < MIN_GENERATION_INGREDIENTS:
            raise ValueError(
                f"At least {MIN_GENERATION_INGREDIENTS} ingredients are required to generate a recipe"
            )
        return cleaned


class CreateRecipeRequest(BaseModel):
    title: str
    ingredients: list[str]
    preparation_steps: list[str]
    source: RecipeSource

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("ingredients")
    @classmethod
    def _check_ingredients(cls, value: list[str]) -> list[str]:
        cleaned = _clean_lines(value, "Ingredient cannot be empty")
        if not cleaned:
            raise ValueError("At least one ingredient is required")
        return cleaned

    @field_validator("preparation_steps")
    @classmethod
    def _check_steps(cls, value: list[str]) -> list[str]:
        cleaned = _clean_lines(value, "Preparation step cannot be empty")
        if not cleaned:
            raise ValueError("At least one preparation step is required")
        return cleaned


class UpdateRecipeRequest(BaseModel):
    """All fields optional, but at least one has to be sent."""
    title: Optional[str] = None
    ingredients: Optional[list[str]] = None
    preparation_steps: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: Optional[str]) -> Optional[str]:
        return _clean_title(value) if value is not None else None

    @field_validator("ingredients")
    @classmethod
    def _check_ingredients(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        cleaned = _clean_lines(value, "Ingredient cannot be empty")
        if not cleaned:
            raise ValueError("At least one ingredient is required")
        return cleaned

    @field_validator("preparation_steps")
    @classmethod
    def _check_steps(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        cleaned = _clean_lines(value, "Preparation step cannot be empty")
        if not cleaned:
            raise ValueError("At least one preparation step is required")
        return cleaned

    @model_validator(mode="after")
    def _require_one_field(self) -> "UpdateRecipeRequest":
        if self.title is None and self.ingredients is None and self.preparation_steps is None:
            raise ValueError(
                "At least one field (title, ingredients, or preparation_steps) must be provided"
            )
        return self

    def to_update(self) -> RecipeUpdate:
        return RecipeUpdate(
            title=self.title,
            ingredients=self.ingredients,
            preparation_steps=self.preparation_steps,
        )


class RecipeListParams(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: RecipeSortField = RecipeSortField.CREATED_AT
    order: SortOrder = SortOrder.DESC
    source: Optional[RecipeSource] = None

    def to_query(self) -> RecipeListQuery:
        return RecipeListQuery(
            page=self.page,
            limit=self.limit,
            sort=self.sort,
            order=self.order,
            source=self.source,
        )


# =============================================================================
# Responses
# =============================================================================

class RecipeResponse(BaseModel):
    id: str
    user_id: str
    title: str
    ingredients: list[str]
    preparation_steps: list[str]
    source: RecipeSource
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


class RecipeListResponse(BaseModel):
    recipes: list[RecipeResponse]
    pagination: PaginationResponse


class GeneratedRecipeResponse(BaseModel):
    title: str
    ingredients: list[str]
    preparation_steps: list[str]


class IngredientWarningResponse(BaseModel):
    type: Literal["ingredient_to_avoid"] = "ingredient_to_avoid"
    message: str
    ingredient: str


class GenerateRecipeResponse(BaseModel):
    recipe: GeneratedRecipeResponse
    warnings: list[IngredientWarningResponse] = Field(default_factory=list)


class SuccessResponse(BaseModel):
    success: Literal[True] = True
    message: str


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[dict[str, str]] = None


# =============================================================================
# Mapping
# =============================================================================

def recipe_to_response(recipe: Recipe) -> RecipeResponse:
    return RecipeResponse(
        id=str(recipe.id),
        user_id=recipe.user_id,
        title=recipe.title,
        ingredients=list(recipe.ingredients),
        preparation_steps=list(recipe.preparation_steps),
        source=recipe.source,
        created_at=recipe.created_at,
        updated_at=recipe.updated_at,
    )


def pagination_to_response(pagination: Pagination) -> PaginationResponse:
    return PaginationResponse(
        page=pagination.page,
        limit=pagination.limit,
        total_items=pagination.total_items,
        total_pages=pagination.total_pages,
        has_next=pagination.has_next,
        has_previous=pagination.has_previous,
    )


def page_to_response(page: RecipePage) -> RecipeListResponse:
    return RecipeListResponse(
        recipes=[recipe_to_response(recipe) for recipe in page.recipes],
        pagination=pagination_to_response(page.pagination),
    )


def generation_to_response(result: GenerateRecipeResult) -> GenerateRecipeResponse:
    return GenerateRecipeResponse(
        recipe=GeneratedRecipeResponse(
            title=result.recipe.title,
            ingredients=list(result.recipe.ingredients),
            preparation_steps=list(result.recipe.preparation_steps),
        ),
        warnings=[
            IngredientWarningResponse(message=warning.message, ingredient=warning.ingredient)
            for warning in result.warnings
        ],
    )
