"""Domain models for families and viewers."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UserProfile:
    """Represents a user profile stored in the database."""

    id: UUID
    email: str | None
    display_name: str | None
    family_id: UUID | None
    favorites: frozenset[UUID] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Family:
    """A sharing partition; photos belong to exactly one family."""

    id: UUID
    name: str
    name_lower: str
    created_by: UUID
    created_at: datetime
    members: frozenset[UUID] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ViewerContext:
    """Identity of the user driving a gallery or upload request."""

    user_id: UUID
    display_name: str | None = None
    timezone: str = "UTC"


def normalize_family_name(name: str) -> str:
    """Return the case-insensitive lookup key for a family name."""
    return name.strip().lower()
