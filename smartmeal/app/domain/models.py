# smartmeal/app/domain/models.py
"""
Domain models for recipes and user preference profiles.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

MAX_TITLE_LENGTH = 255
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
WARNING_TYPE_INGREDIENT_TO_AVOID = "ingredient_to_avoid"


class RecipeSource(str, Enum):
    """Where a saved recipe came from. Informational only."""
    AI = "ai"
    MANUAL = "manual"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class RecipeSortField(str, Enum):
    """Columns a recipe listing may be ordered by."""
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"


@dataclass
class Recipe:
    """A recipe persisted for a single owner."""
    id: UUID
    user_id: str
    title: str
    ingredients: list[str]
    preparation_steps: list[str]
    source: RecipeSource
    created_at: datetime
    updated_at: datetime


@dataclass
class GeneratedDraft:
    """A generated recipe that has not been saved."""
    title: str
    ingredients: list[str]
    preparation_steps: list[str]


@dataclass
class IngredientWarning:
    ingredient: str
    message: str
    type: str = WARNING_TYPE_INGREDIENT_TO_AVOID


@dataclass
class GenerateRecipeResult:
    recipe: GeneratedDraft
    warnings: list[IngredientWarning] = field(default_factory=list)


@dataclass
class RecipeUpdate:
    """
    Partial update of a recipe.
    Fields left as None are not touched by the repository.
    """
    title: Optional[str] = None
    ingredients: Optional[list[str]] = None
    preparation_steps: Optional[list[str]] = None

    def as_changes(self) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        if self.title is not None:
            changes["title"] = self.title
        if self.ingredients is not None:
            changes["ingredients"] = list(self.ingredients)
        if self.preparation_steps is not None:
            changes["preparation_steps"] = list(self.preparation_steps)
        return changes

    @property
    def is_empty(self) -> bool:
        return not self.as_changes()


@dataclass
class RecipeListQuery:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort: RecipeSortField = RecipeSortField.CREATED_AT
    order: SortOrder = SortOrder.DESC
    source: Optional[RecipeSource] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Pagination:
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


@dataclass
class RecipePage:
    recipes: list[Recipe]
    pagination: Pagination


@dataclass
class PreferenceProfile:
    """Per-user preferences. One profile per owner."""
    id: UUID
    user_id: str
    ingredients_to_avoid: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def build_pagination(page: int, limit: int, total_items: int) -> Pagination:
    """Compute page metadata for a listing of ``total_items`` rows."""
    total_pages = math.ceil(total_items / limit) if limit else 0
    return Pagination(
        page=page,
        limit=limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1,
    )
