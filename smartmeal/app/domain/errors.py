from __future__ import annotations

from typing import Optional


class SmartMealError(Exception):
    pass


class InvalidInputError(SmartMealError):
    def __init__(
        self,
        message: str = "Invalid request data",
        details: Optional[dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RecipeNotFoundError(SmartMealError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class ProfileNotFoundError(SmartMealError):
    def __init__(self, owner_id: str):
        super().__init__(f"Profile not found for user: {owner_id}")
        self.owner_id = owner_id


class GenerationUnavailableError(SmartMealError):
    def __init__(self, reason: str = "Recipe generation service unavailable"):
        super().__init__(f"Failed to generate recipe: {reason}")
        self.reason = reason


class PersistenceError(SmartMealError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Persistence error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class ConflictError(SmartMealError):
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message)
