"""User profile access."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from family_photos.domain.errors import NotInFamilyError, ReadError
from family_photos.domain.models import UserProfile

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user id, if present."""

    def add_favorite(self, user_id: UUID, photo_id: UUID) -> None:
        """Add a photo id to the user's favorites set."""

    def remove_favorite(self, user_id: UUID, photo_id: UUID) -> None:
        """Remove a photo id from the user's favorites set."""

    def set_family(self, user_id: UUID, family_id: UUID, family_name: str) -> None:
        """Record the family a user belongs to."""


@dataclass
class UserService:
    """Application service for profile lookups."""

    repository: UserRepository

    def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the user's profile or raise a read error."""
        try:
            profile = self.repository.get_profile(user_id)
        except Exception as exc:
            logger.exception("Failed to load profile", extra={"user_id": str(user_id)})
            raise ReadError("Failed to load profile") from exc
        if profile is None:
            raise ReadError("User data not found")
        return profile

    def require_family(
        self, user_id: UUID, action: str = "upload photos"
    ) -> tuple[UserProfile, UUID]:
        """Return the profile and family id, rejecting users outside a family."""
        profile = self.get_profile(user_id)
        if profile.family_id is None:
            raise NotInFamilyError(action)
        return profile, profile.family_id
