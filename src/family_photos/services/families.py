"""Family membership: join an existing family or create a new one."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from family_photos.domain.errors import ValidationError
from family_photos.domain.models import Family, normalize_family_name
from family_photos.services.users import UserRepository


class FamilyRepository(Protocol):
    """Persistence interface for families."""

    def find_by_name_lower(self, name_lower: str) -> Family | None:
        """Return the family with a normalized name, if present."""

    def create_family(self, name: str, name_lower: str, created_by: UUID) -> Family:
        """Create a family with the creator as its first member."""

    def add_member(self, family_id: UUID, user_id: UUID) -> None:
        """Add a user to a family's member set."""


@dataclass
class FamilyService:
    """Application service for family membership."""

    family_repository: FamilyRepository
    user_repository: UserRepository

    def join_or_create(self, user_id: UUID, family_name: str) -> Family:
        """Join the family with this name (case-insensitive) or create it."""
        name = family_name.strip()
        if not name:
            raise ValidationError("Please enter a family name")
        name_lower = normalize_family_name(name)

        family = self.family_repository.find_by_name_lower(name_lower)
        if family is None:
            family = self.family_repository.create_family(
                name=name, name_lower=name_lower, created_by=user_id
            )
        elif user_id not in family.members:
            self.family_repository.add_member(family.id, user_id)

        self.user_repository.set_family(user_id, family.id, family.name)
        return family
