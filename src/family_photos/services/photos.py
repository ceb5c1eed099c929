"""Family photo library: reads and deletes."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from family_photos.domain.errors import (
    NotPhotoOwnerError,
    PhotoNotFoundError,
    ReadError,
)
from family_photos.domain.gallery import FAVORITES_ALBUM
from family_photos.domain.models import ViewerContext
from family_photos.domain.photos import NewPhoto, Photo
from family_photos.services.storage import BlobStore
from family_photos.services.users import UserService

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photo metadata."""

    def list_family_photos(self, family_id: UUID) -> list[Photo]:
        """Return every photo belonging to a family."""

    def create_photo(self, photo: NewPhoto) -> Photo:
        """Create a photo record and return it with its assigned id."""

    def get_photo(self, photo_id: UUID) -> Photo | None:
        """Return a photo by id, if present."""

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo record."""


@dataclass
class GallerySnapshot:
    """Photos and favorites loaded for one viewer session."""

    family_id: UUID
    photos: list[Photo] = field(default_factory=list)
    favorites: set[UUID] = field(default_factory=set)


@dataclass
class PhotoLibraryService:
    """Application service for reading and deleting family photos."""

    photo_repository: PhotoRepository
    user_service: UserService
    blob_store: BlobStore

    async def load_family_photos(self, viewer: ViewerContext) -> GallerySnapshot:
        """Load the viewer's family photos, newest first, with fresh URLs."""
        profile, family_id = self.user_service.require_family(
            viewer.user_id, action="view photos"
        )
        try:
            records = self.photo_repository.list_family_photos(family_id)
        except Exception as exc:
            logger.exception(
                "Failed to query family photos", extra={"family_id": str(family_id)}
            )
            raise ReadError("Failed to load photos") from exc

        resolved = await asyncio.gather(
            *(self._with_download_url(photo) for photo in records)
        )
        photos = [photo for photo in resolved if photo is not None]
        photos.sort(key=lambda photo: photo.upload_date, reverse=True)
        return GallerySnapshot(
            family_id=family_id,
            photos=photos,
            favorites=set(profile.favorites),
        )

    def list_album_names(self, viewer: ViewerContext) -> list[str]:
        """Return album names already used within the viewer's family."""
        _, family_id = self.user_service.require_family(
            viewer.user_id, action="view albums"
        )
        try:
            records = self.photo_repository.list_family_photos(family_id)
        except Exception as exc:
            raise ReadError("Failed to load albums") from exc
        names = {
            photo.album.strip()
            for photo in records
            if photo.album and photo.album.strip()
        }
        names.discard(FAVORITES_ALBUM)
        return sorted(names)

    def get_photo(self, viewer: ViewerContext, photo_id: UUID) -> Photo:
        """Return a photo visible to the viewer."""
        _, family_id = self.user_service.require_family(
            viewer.user_id, action="view photos"
        )
        try:
            photo = self.photo_repository.get_photo(photo_id)
        except Exception as exc:
            raise ReadError("Failed to load photo") from exc
        if photo is None or photo.family_id != family_id:
            raise PhotoNotFoundError(f"Photo {photo_id} not found")
        return photo

    async def delete_photo(self, viewer: ViewerContext, photo_id: UUID) -> Photo:
        """Delete a photo record, then its blob. Only the uploader may delete."""
        photo = self.get_photo(viewer, photo_id)
        if photo.uploaded_by != viewer.user_id:
            raise NotPhotoOwnerError("Only the uploader can delete this photo")

        try:
            self.photo_repository.delete_photo(photo.id)
        except Exception as exc:
            raise ReadError("Failed to delete photo") from exc
        try:
            await self.blob_store.delete(photo.image_path)
        except Exception:
            # The record is already gone; an orphaned blob is tolerated.
            logger.exception(
                "Failed to delete photo blob",
                extra={"photo_id": str(photo.id), "image_path": photo.image_path},
            )
        return photo

    async def _with_download_url(self, photo: Photo) -> Photo | None:
        try:
            url = await self.blob_store.resolve_url(photo.image_path)
        except Exception:
            logger.exception(
                "Failed to resolve download URL", extra={"photo_id": str(photo.id)}
            )
            return None
        return replace(photo, download_url=url)
