# smartmeal/app/error_handlers.py
"""
Maps domain exceptions to JSON error responses.
Body shape: {"error": ..., "message": ..., "details": {...}}
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from smartmeal.app.domain.errors import (
    ConflictError,
    GenerationUnavailableError,
    InvalidInputError,
    PersistenceError,
    ProfileNotFoundError,
    RecipeNotFoundError,
)
from smartmeal.app.validation import field_errors

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict[str, str]] = None,
) -> JSONResponse:
    body: dict[str, object] = {"error": error, "message": message}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        "Invalid request data",
        field_errors(exc.errors()),
    )


async def _invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", exc.message, exc.details)


async def _recipe_not_found_handler(request: Request, exc: RecipeNotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "Not found", "Recipe not found")


async def _profile_not_found_handler(request: Request, exc: ProfileNotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "Not found", "Profile not found")


async def _conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return error_response(status.HTTP_409_CONFLICT, "Conflict", str(exc))


async def _generation_unavailable_handler(request: Request, exc: GenerationUnavailableError) -> JSONResponse:
    logger.warning("%s %s generation unavailable: %s", request.method, request.url.path, exc.reason)
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Service temporarily unavailable",
        "The recipe generation service is currently unavailable. Please try again later.",
    )


async def _persistence_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("%s %s persistence failure during %s", request.method, request.url.path, exc.operation)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "An unexpected error occurred",
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(InvalidInputError, _invalid_input_handler)
    app.add_exception_handler(RecipeNotFoundError, _recipe_not_found_handler)
    app.add_exception_handler(ProfileNotFoundError, _profile_not_found_handler)
    app.add_exception_handler(ConflictError, _conflict_handler)
    app.add_exception_handler(GenerationUnavailableError, _generation_unavailable_handler)
    app.add_exception_handler(PersistenceError, _persistence_handler)
