from __future__ import annotations

from typing import Any, Iterable, Mapping, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from smartmeal.app.domain.errors import InvalidInputError

ModelT = TypeVar("ModelT", bound=BaseModel)

_REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def _error_message(error: Mapping[str, Any]) -> str:
    if error.get("type") == "value_error":
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
    return str(error.get("msg", "Invalid value"))


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Collapse pydantic/FastAPI error entries into ``{"field.path": message}``."""
    details: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(loc) or "request"
        details.setdefault(field, _error_message(error))
    return details


def parse_model(model_cls: Type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError("Invalid request data", field_errors(exc.errors())) from exc


def parse_recipe_id(value: UUID | str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as exc:
        raise InvalidInputError("Invalid recipe ID format", {"id": "Invalid recipe ID format"}) from exc
