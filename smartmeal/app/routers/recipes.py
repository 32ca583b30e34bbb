# smartmeal/app/routers/recipes.py
"""
Recipe routes: AI generation plus CRUD over the caller's recipes.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from starlette.concurrency import run_in_threadpool

from smartmeal.app.deps import CurrentUser, get_current_user, get_recipe_service
from smartmeal.app.domain.models import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    RecipeListQuery,
    RecipeSortField,
    RecipeSource,
    SortOrder,
)
from smartmeal.app.schemas.recipes import (
    CreateRecipeRequest,
    GenerateRecipeRequest,
    GenerateRecipeResponse,
    RecipeListResponse,
    RecipeResponse,
    SuccessResponse,
    UpdateRecipeRequest,
    generation_to_response,
    page_to_response,
    recipe_to_response,
)
from smartmeal.app.services.recipe_service import RecipeService

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.post("/generate", response_model=GenerateRecipeResponse)
async def generate_recipe(
    payload: GenerateRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> GenerateRecipeResponse:
    result = await run_in_threadpool(service.generate_recipe, user.id, payload)
    return generation_to_response(result)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: CreateRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    recipe = await run_in_threadpool(service.create_recipe, user.id, payload)
    return recipe_to_response(recipe)


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: RecipeSortField = Query(RecipeSortField.CREATED_AT),
    order: SortOrder = Query(SortOrder.DESC),
    source: Optional[RecipeSource] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    query = RecipeListQuery(page=page, limit=limit, sort=sort, order=order, source=source)
    result = await run_in_threadpool(service.list_recipes, user.id, query)
    return page_to_response(result)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    recipe = await run_in_threadpool(service.get_recipe, user.id, recipe_id)
    return recipe_to_response(recipe)


@router.patch("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    payload: UpdateRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    recipe = await run_in_threadpool(service.update_recipe, user.id, recipe_id, payload)
    return recipe_to_response(recipe)


@router.delete("/{recipe_id}", response_model=SuccessResponse)
async def delete_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> SuccessResponse:
    await run_in_threadpool(service.delete_recipe, user.id, recipe_id)
    return SuccessResponse(message="Recipe deleted successfully")
