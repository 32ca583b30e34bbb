# smartmeal/services/recipe_generator.py
"""
Turns a list of ingredients into a draft recipe using the Gemini API.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Callable, Protocol, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from smartmeal.app.domain.errors import GenerationUnavailableError
from smartmeal.app.domain.models import MAX_TITLE_LENGTH, GeneratedDraft
from smartmeal.services.errors import ServiceError

logger = logging.getLogger(__name__)

RECIPE_SYSTEM_PROMPT = Path(__file__).resolve().parent / "prompts" / "RECIPE_SYSTEM_PROMPT.txt"
MAX_INGREDIENT_LENGTH = 100

_DISALLOWED_CHARS_RE = re.compile(r"[^\w\s,.-]")
_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class ContentClient(Protocol):
    def generate_content(
        self,
        user_prompt: str,
        system_prompt_path: Path,
        *,
        response_mime_type: str | None = None,
    ) -> str:
        ...


class _DraftPayload(BaseModel):
    title: str = Field(..., min_length=1)
    ingredients: list[str] = Field(..., min_length=1)
    preparation_steps: list[str] = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def _clean_title(cls, value: str) -> str:
        title = value.strip()
        if not title:
            raise ValueError("title must not be blank")
        return title[:MAX_TITLE_LENGTH]

    @field_validator("ingredients", "preparation_steps")
    @classmethod
    def _drop_blank_lines(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item and item.strip()]
        if not cleaned:
            raise ValueError("must contain at least one non-empty entry")
        return cleaned


def sanitize_ingredients(ingredients: Sequence[str]) -> list[str]:
    """Trim, cap at 100 chars and strip everything but word chars, spaces, comma, dot and hyphen."""
    return [
        _DISALLOWED_CHARS_RE.sub("", ingredient.strip()[:MAX_INGREDIENT_LENGTH])
        for ingredient in ingredients
    ]


def _build_prompt(ingredients: Sequence[str]) -> str:
    lines = [f"- {item}" for item in ingredients if item.strip()]
    return "Ingredients:\n" + "\n".join(lines)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _CODE_FENCE_RE.match(stripped)
    return match.group(1) if match else stripped


def parse_generated_recipe(text: str) -> GeneratedDraft:
    try:
        payload = _DraftPayload.model_validate(json.loads(_strip_code_fence(text)))
    except (json.JSONDecodeError, ValidationError) as err:
        raise GenerationUnavailableError("unparseable response from generation service") from err

    return GeneratedDraft(
        title=payload.title,
        ingredients=payload.ingredients,
        preparation_steps=payload.preparation_steps,
    )


class RecipeGenerator:
    """
    Stateless adapter around the text-generation service.

    Every call sanitizes its input before anything is sent upstream. Failures
    are not retried; they surface as GenerationUnavailableError.
    """

    def __init__(
        self,
        client_factory: Callable[[], ContentClient],
        system_prompt_path: Path = RECIPE_SYSTEM_PROMPT,
    ):
        self._client_factory = client_factory
        self._system_prompt_path = system_prompt_path

    def generate(self, ingredients: Sequence[str]) -> GeneratedDraft:
        sanitized = sanitize_ingredients(ingredients)
        prompt = _build_prompt(sanitized)

        try:
            client = self._client_factory()
            text = client.generate_content(
                prompt,
                self._system_prompt_path,
                response_mime_type="application/json",
            )
        except ServiceError as err:
            logger.warning("generation.fail reason=%s", err)
            raise GenerationUnavailableError(str(err)) from err

        if not text:
            raise GenerationUnavailableError("empty response from generation service")

        draft = parse_generated_recipe(text)
        logger.info("generation.ok ingredients=%d title=%r", len(sanitized), draft.title)
        return draft
