from __future__ import annotations

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from smartmeal.app.deps import CurrentUser, get_current_user, get_profile_service
from smartmeal.app.schemas.profiles import (
    CreateProfileRequest,
    ProfileResponse,
    UpdateProfileRequest,
    profile_to_response,
)
from smartmeal.app.services.profile_service import ProfileService

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    profile = await run_in_threadpool(service.get_profile, user.id)
    return profile_to_response(profile)


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    payload: CreateProfileRequest,
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    profile = await run_in_threadpool(service.create_profile, user.id, payload)
    return profile_to_response(profile)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: UpdateProfileRequest,
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    profile = await run_in_threadpool(service.update_profile, user.id, payload)
    return profile_to_response(profile)
