from __future__ import annotations

from smartmeal.services.errors import (
    GeminiConfigurationError,
    GeminiPromptError,
    GeminiRequestError,
    GeminiResponseError,
    GenerationTimeoutError,
    RateLimitedError,
    ServiceError,
)


class TestServiceError:
    def test_base_exception(self) -> None:
        error = ServiceError("Base service error")
        assert str(error) == "Base service error"
        assert isinstance(error, Exception)


class TestRateLimitedError:
    def test_rate_limited(self) -> None:
        error = RateLimitedError("Too many requests")
        assert "Too many requests" in str(error)
        assert isinstance(error, ServiceError)


class TestGenerationTimeoutError:
    def test_timeout_with_model_and_seconds(self) -> None:
        error = GenerationTimeoutError("gemini-2.5-flash", 30.0)
        assert "gemini-2.5-flash" in str(error)
        assert "30" in str(error)
        assert error.model_name == "gemini-2.5-flash"
        assert error.timeout_seconds == 30.0


class TestExceptionHierarchy:
    def test_all_errors_inherit_from_service_error(self) -> None:
        assert issubclass(GeminiConfigurationError, ServiceError)
        assert issubclass(GeminiPromptError, ServiceError)
        assert issubclass(GeminiRequestError, ServiceError)
        assert issubclass(GeminiResponseError, ServiceError)
        assert issubclass(RateLimitedError, ServiceError)
        assert issubclass(GenerationTimeoutError, ServiceError)
