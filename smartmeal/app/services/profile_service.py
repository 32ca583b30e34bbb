from __future__ import annotations

import logging
from typing import Any, Mapping

from smartmeal.app.domain.errors import ProfileNotFoundError
from smartmeal.app.domain.models import PreferenceProfile
from smartmeal.app.infra.db.base import ProfileRepository
from smartmeal.app.schemas.profiles import CreateProfileRequest, UpdateProfileRequest
from smartmeal.app.validation import parse_model

logger = logging.getLogger(__name__)


class ProfileService:
    """Manages the single preference profile each user may have."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def get_profile(self, owner_id: str) -> PreferenceProfile:
        profile = self._profiles.get_by_owner(owner_id)
        if profile is None:
            raise ProfileNotFoundError(owner_id)
        return profile

    def create_profile(
        self,
        owner_id: str,
        command: CreateProfileRequest | Mapping[str, Any],
    ) -> PreferenceProfile:
        """
        Raises:
            ConflictError: If the user already has a profile
        """
        request = parse_model(CreateProfileRequest, command)
        profile = self._profiles.create(owner_id, request.ingredients_to_avoid)
        logger.info("profile.create owner=%s avoided=%d", owner_id, len(profile.ingredients_to_avoid))
        return profile

    def update_profile(
        self,
        owner_id: str,
        command: UpdateProfileRequest | Mapping[str, Any],
    ) -> PreferenceProfile:
        request = parse_model(UpdateProfileRequest, command)
        profile = self._profiles.update_ingredients_to_avoid(owner_id, request.ingredients_to_avoid)
        if profile is None:
            raise ProfileNotFoundError(owner_id)
        logger.info("profile.update owner=%s avoided=%d", owner_id, len(profile.ingredients_to_avoid))
        return profile
