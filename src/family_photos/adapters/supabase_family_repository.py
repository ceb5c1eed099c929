"""Supabase-backed family repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from family_photos.domain.models import Family
from family_photos.services.families import FamilyRepository


@dataclass
class SupabaseFamilyRepository(FamilyRepository):
    """Supabase implementation for family persistence."""

    client: Client

    def find_by_name_lower(self, name_lower: str) -> Family | None:
        """Return the family with a normalized name, if present."""
        response = (
            self.client.table("families")
            .select("id, name, name_lower, created_by, created_at, members")
            .eq("name_lower", name_lower)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def create_family(self, name: str, name_lower: str, created_by: UUID) -> Family:
        """Create a family row and return it."""
        response = (
            self.client.table("families")
            .insert(
                {
                    "name": name,
                    "name_lower": name_lower,
                    "created_by": str(created_by),
                    "created_at": datetime.now(tz=UTC).isoformat(),
                    "members": [str(created_by)],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create family in Supabase")
        return _parse_row(response.data[0])

    def add_member(self, family_id: UUID, user_id: UUID) -> None:
        """Union a user id into the family's members array in one statement."""
        self.client.rpc(
            "add_family_member",
            {"p_family_id": str(family_id), "p_user_id": str(user_id)},
        ).execute()


def _parse_row(row: dict[str, object]) -> Family:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    members = row.get("members") or []
    return Family(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        name_lower=str(row.get("name_lower") or ""),
        created_by=UUID(str(row["created_by"])),
        created_at=created_at,
        members=frozenset(UUID(str(member)) for member in members),
    )
