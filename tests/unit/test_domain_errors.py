from __future__ import annotations

from smartmeal.app.domain.errors import (
    ConflictError,
    GenerationUnavailableError,
    InvalidInputError,
    PersistenceError,
    ProfileNotFoundError,
    RecipeNotFoundError,
    SmartMealError,
)


class TestSmartMealError:
    def test_base_exception(self) -> None:
        error = SmartMealError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestInvalidInputError:
    def test_default_message(self) -> None:
        error = InvalidInputError()
        assert str(error) == "Invalid request data"
        assert error.details == {}

    def test_field_details(self) -> None:
        error = InvalidInputError("Invalid request data", {"title": "Title is required"})
        assert error.message == "Invalid request data"
        assert error.details == {"title": "Title is required"}


class TestRecipeNotFoundError:
    def test_includes_recipe_id(self) -> None:
        error = RecipeNotFoundError("abc-123")
        assert "abc-123" in str(error)
        assert error.recipe_id == "abc-123"


class TestProfileNotFoundError:
    def test_includes_owner(self) -> None:
        error = ProfileNotFoundError("user-1")
        assert "user-1" in str(error)
        assert error.owner_id == "user-1"


class TestGenerationUnavailableError:
    def test_default_reason(self) -> None:
        error = GenerationUnavailableError()
        assert "Failed to generate recipe" in str(error)
        assert error.reason == "Recipe generation service unavailable"

    def test_custom_reason(self) -> None:
        error = GenerationUnavailableError("timeout")
        assert "timeout" in str(error)
        assert error.reason == "timeout"


class TestPersistenceError:
    def test_includes_operation_and_reason(self) -> None:
        error = PersistenceError("recipe.create", "Connection refused")
        assert "recipe.create" in str(error)
        assert "Connection refused" in str(error)
        assert error.operation == "recipe.create"
        assert error.reason == "Connection refused"


class TestConflictError:
    def test_default_message(self) -> None:
        assert str(ConflictError()) == "Resource already exists"


class TestExceptionHierarchy:
    def test_all_domain_errors_inherit_from_smartmeal_error(self) -> None:
        assert issubclass(InvalidInputError, SmartMealError)
        assert issubclass(RecipeNotFoundError, SmartMealError)
        assert issubclass(ProfileNotFoundError, SmartMealError)
        assert issubclass(GenerationUnavailableError, SmartMealError)
        assert issubclass(PersistenceError, SmartMealError)
        assert issubclass(ConflictError, SmartMealError)
