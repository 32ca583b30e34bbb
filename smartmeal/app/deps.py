# smartmeal/app/deps.py (singletons exposed as FastAPI dependencies)

from __future__ import annotations

from functools import lru_cache, partial

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, ClientOptions, create_client

from smartmeal.app.config import settings
from smartmeal.app.infra.db.base import ProfileRepository, RecipeRepository
from smartmeal.app.infra.db.memory_repo import InMemoryProfileRepository, InMemoryRecipeRepository
from smartmeal.app.infra.db.supabase_recipes_repo import (
    SupabaseProfileRepository,
    SupabaseRecipeRepository,
)
from smartmeal.app.services.profile_service import ProfileService
from smartmeal.app.services.recipe_service import RecipeService
from smartmeal.services.gemini_client import GeminiClient
from smartmeal.services.recipe_generator import RecipeGenerator

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(
            str(settings.SUPABASE_URL),
            settings.SUPABASE_SERVICE_ROLE_KEY,
            options=ClientOptions(postgrest_client_timeout=settings.DATABASE_TIMEOUT_SECONDS),
        )
    return _client


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Takes Authorization: Bearer <access_token> issued by Supabase,
    validates it against GoTrue and returns the minimal user data.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = cred.credentials
    try:
        res = supa.auth.get_user(token)
        user = res.user if res else None
        if not user:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

        name = None
        meta = getattr(user, "user_metadata", None) or {}
        if isinstance(meta, dict):
            name = meta.get("name")

        return CurrentUser(id=str(user.id), email=user.email, name=name)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid/expired token")


@lru_cache(maxsize=1)
def _memory_recipes() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@lru_cache(maxsize=1)
def _memory_profiles() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


def get_recipe_repository() -> RecipeRepository:
    if settings.RECIPES_BACKEND == "memory":
        return _memory_recipes()
    return SupabaseRecipeRepository(get_supabase())


def get_profile_repository() -> ProfileRepository:
    if settings.RECIPES_BACKEND == "memory":
        return _memory_profiles()
    return SupabaseProfileRepository(get_supabase())


def get_recipe_generator() -> RecipeGenerator:
    return RecipeGenerator(
        partial(
            GeminiClient,
            api_key=settings.GEMINI_API_KEY.get_secret_value(),
            model_name=settings.GEMINI_MODEL,
            timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
        )
    )


def get_recipe_service(
    recipes: RecipeRepository = Depends(get_recipe_repository),
    profiles: ProfileRepository = Depends(get_profile_repository),
    generator: RecipeGenerator = Depends(get_recipe_generator),
) -> RecipeService:
    return RecipeService(recipes, profiles, generator)


def get_profile_service(
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> ProfileService:
    return ProfileService(profiles)
