from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from smartmeal.app.domain.models import PreferenceProfile

MAX_AVOIDED_INGREDIENTS = 100
MAX_AVOIDED_INGREDIENT_LENGTH = 100


def _normalize_avoided(value: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in value:
        term = item.strip()
        if not term:
            continue
        if len(term) > MAX_AVOIDED_INGREDIENT_LENGTH:
            raise ValueError(
                f"Ingredient to avoid must not exceed {MAX_AVOIDED_INGREDIENT_LENGTH} characters"
            )
        key = term.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(term)
    if len(out) > MAX_AVOIDED_INGREDIENTS:
        raise ValueError(f"At most {MAX_AVOIDED_INGREDIENTS} ingredients to avoid are allowed")
    return out


class CreateProfileRequest(BaseModel):
    ingredients_to_avoid: list[str] = Field(default_factory=list)

    @field_validator("ingredients_to_avoid")
    @classmethod
    def _normalize(cls, value: list[str]) -> list[str]:
        return _normalize_avoided(value)


class UpdateProfileRequest(BaseModel):
    ingredients_to_avoid: list[str]

    @field_validator("ingredients_to_avoid")
    @classmethod
    def _normalize(cls, value: list[str]) -> list[str]:
        return _normalize_avoided(value)


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    ingredients_to_avoid: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def profile_to_response(profile: PreferenceProfile) -> ProfileResponse:
    return ProfileResponse(
        id=str(profile.id),
        user_id=profile.user_id,
        ingredients_to_avoid=list(profile.ingredients_to_avoid),
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )
