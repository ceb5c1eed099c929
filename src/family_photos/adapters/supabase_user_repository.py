"""Supabase-backed user profile repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from family_photos.domain.models import UserProfile, normalize_family_name
from family_photos.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profiles and favorites."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("users")
            .select("id, email, display_name, family_id, favorites")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        family_id = row.get("family_id")
        return UserProfile(
            id=UUID(str(row["id"])),
            email=row.get("email"),
            display_name=row.get("display_name"),
            family_id=UUID(str(family_id)) if family_id else None,
            favorites=_parse_uuid_set(row.get("favorites")),
        )

    def add_favorite(self, user_id: UUID, photo_id: UUID) -> None:
        """Append a photo id to the favorites array unless already present."""
        self._update_favorites("add_favorite", user_id, photo_id)

    def remove_favorite(self, user_id: UUID, photo_id: UUID) -> None:
        """Remove a photo id from the favorites array, if present."""
        self._update_favorites("remove_favorite", user_id, photo_id)

    def set_family(self, user_id: UUID, family_id: UUID, family_name: str) -> None:
        """Store the user's family id and display name."""
        self.client.table("users").update(
            {
                "family_id": str(family_id),
                "family_name": family_name,
                "family_name_lower": normalize_family_name(family_name),
            }
        ).eq("id", str(user_id)).execute()

    def _update_favorites(self, function: str, user_id: UUID, photo_id: UUID) -> None:
        # One UPDATE per call; the row lock orders concurrent toggles.
        self.client.rpc(
            function, {"p_user_id": str(user_id), "p_photo_id": str(photo_id)}
        ).execute()


def _parse_uuid_set(value: object) -> frozenset[UUID]:
    if not isinstance(value, list):
        return frozenset()
    return frozenset(UUID(str(item)) for item in value)
