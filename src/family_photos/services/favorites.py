"""Favorites toggling with optimistic updates and rollback."""

import asyncio
import logging
from dataclasses import dataclass, field
from uuid import UUID

from family_photos.domain.errors import FavoriteToggleError, ToggleInProgressError
from family_photos.services.users import UserRepository

logger = logging.getLogger(__name__)

IDLE = "IDLE"
PENDING = "PENDING"
SETTLED = "SETTLED"
ROLLED_BACK = FavoriteToggleError.state


@dataclass(frozen=True)
class FavoriteToggle:
    """Outcome of a settled toggle."""

    photo_id: UUID
    is_favorite: bool
    state: str


@dataclass
class FavoritesService:
    """Toggles favorites per viewer, one in-flight update per photo.

    Each (user, photo) pair moves IDLE -> PENDING -> SETTLED or ROLLED_BACK.
    Only in-flight toggles are tracked; a finished toggle reports its final
    state through the returned FavoriteToggle or the raised
    FavoriteToggleError. The caller's favorites set is updated before the
    remote write and restored if that write fails.
    """

    repository: UserRepository
    _pending: set[tuple[UUID, UUID]] = field(default_factory=set)

    def state(self, user_id: UUID, photo_id: UUID) -> str:
        """Return PENDING while a toggle is in flight, else IDLE."""
        return PENDING if (user_id, photo_id) in self._pending else IDLE

    async def toggle(
        self, user_id: UUID, favorites: set[UUID], photo_id: UUID
    ) -> FavoriteToggle:
        """Flip a photo's favorite membership."""
        key = (user_id, photo_id)
        if key in self._pending:
            raise ToggleInProgressError("This photo is still being updated")

        was_favorite = photo_id in favorites
        self._pending.add(key)
        if was_favorite:
            favorites.discard(photo_id)
            remote = self.repository.remove_favorite
        else:
            favorites.add(photo_id)
            remote = self.repository.add_favorite

        try:
            await asyncio.to_thread(remote, user_id, photo_id)
        except Exception as exc:
            if was_favorite:
                favorites.add(photo_id)
            else:
                favorites.discard(photo_id)
            logger.exception(
                "Failed to update favorites",
                extra={"user_id": str(user_id), "photo_id": str(photo_id)},
            )
            raise FavoriteToggleError("Failed to update favorites") from exc
        finally:
            self._pending.discard(key)

        return FavoriteToggle(
            photo_id=photo_id, is_favorite=not was_favorite, state=SETTLED
        )
