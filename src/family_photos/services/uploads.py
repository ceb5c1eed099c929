"""Concurrent multi-file upload pipeline."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from family_photos.domain.errors import (
    BatchUploadError,
    EmptySelectionError,
    MissingAlbumError,
    NonImageFileError,
    PerItemUploadError,
    ReservedAlbumError,
)
from family_photos.domain.gallery import FAVORITES_ALBUM
from family_photos.domain.models import ViewerContext
from family_photos.domain.photos import LocalFile, NewPhoto, Photo, UploadItem
from family_photos.services.photos import PhotoRepository
from family_photos.services.storage import BlobStore
from family_photos.services.users import UserService

logger = logging.getLogger(__name__)


@dataclass
class UploadForm:
    """Transient upload form state shared by every file in a batch."""

    files: list[LocalFile] = field(default_factory=list)
    description: str = ""
    tags: list[str] = field(default_factory=list)
    album: str = ""
    new_album: str = ""

    def clear(self) -> None:
        """Reset the form after a successful submission."""
        self.files = []
        self.description = ""
        self.tags = []
        self.album = ""
        self.new_album = ""


@dataclass(frozen=True)
class UploadResult:
    """Items and created photos of a fully successful batch."""

    items: list[UploadItem]
    photos: list[Photo]


@dataclass(frozen=True)
class _BatchMetadata:
    uploaded_by: UUID
    uploaded_by_name: str | None
    family_id: UUID
    description: str | None
    tags: tuple[str, ...]
    album: str


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class UploadPipeline:
    """Uploads each selected file independently: blob, URL, then record."""

    photo_repository: PhotoRepository
    user_service: UserService
    blob_store: BlobStore
    max_concurrency: int = 4
    clock: Callable[[], datetime] = _utc_now

    async def submit(self, form: UploadForm, viewer: ViewerContext) -> UploadResult:
        """Upload every file in the form.

        Raises a ValidationError before any I/O for bad input, and
        BatchUploadError once all items settled if any of them failed. Items
        that succeeded stay persisted either way.
        """
        files = list(form.files)
        validate_selection(files)
        album = resolve_album(form.album, form.new_album)
        tags = normalize_tags(form.tags)
        description = form.description.strip() or None

        profile, family_id = self.user_service.require_family(viewer.user_id)
        uploaded_by_name = viewer.display_name or profile.display_name or profile.email

        base_ms = int(self.clock().timestamp() * 1000)
        items = [UploadItem(file=file, index=index) for index, file in enumerate(files)]
        semaphore = asyncio.Semaphore(max(1, self.max_concurrency))
        metadata = _BatchMetadata(
            uploaded_by=viewer.user_id,
            uploaded_by_name=uploaded_by_name,
            family_id=family_id,
            description=description,
            tags=tags,
            album=album,
        )

        async def upload(item: UploadItem) -> Photo:
            async with semaphore:
                return await self._upload_item(
                    item,
                    image_path=build_image_path(
                        family_id, viewer.user_id, base_ms + item.index, item.file.name
                    ),
                    metadata=metadata,
                )

        outcomes = await asyncio.gather(
            *(upload(item) for item in items), return_exceptions=True
        )
        if any(isinstance(outcome, BaseException) for outcome in outcomes):
            raise BatchUploadError(items)

        photos = [outcome for outcome in outcomes if isinstance(outcome, Photo)]
        logger.info(
            "Uploaded photo batch",
            extra={"family_id": str(family_id), "count": len(photos)},
        )
        form.clear()
        return UploadResult(items=items, photos=photos)

    async def _upload_item(
        self, item: UploadItem, image_path: str, metadata: _BatchMetadata
    ) -> Photo:
        item.image_path = image_path
        file = item.file

        def on_progress(sent: int, total: int) -> None:
            item.advance(100 if total <= 0 else sent * 100 // total)

        try:
            await self.blob_store.put(
                image_path, file.content, file.content_type, on_progress=on_progress
            )
            download_url = await self.blob_store.resolve_url(image_path)
            new_photo = NewPhoto(
                image_path=image_path,
                download_url=download_url,
                upload_date=self.clock(),
                file_name=image_path.rsplit("/", 1)[-1],
                file_size=file.size,
                file_type=file.content_type,
                uploaded_by=metadata.uploaded_by,
                uploaded_by_name=metadata.uploaded_by_name,
                family_id=metadata.family_id,
                description=metadata.description,
                tags=metadata.tags,
                album=metadata.album,
            )
            photo = await asyncio.to_thread(
                self.photo_repository.create_photo, new_photo
            )
        except Exception as exc:
            error = PerItemUploadError(item)
            item.error = str(error)
            logger.exception(
                "Photo upload failed",
                extra={"file_name": file.name, "image_path": image_path},
            )
            raise error from exc

        item.photo = photo
        item.advance(100)
        return photo


def validate_selection(files: list[LocalFile]) -> None:
    """Reject empty selections and non-image files."""
    if not files:
        raise EmptySelectionError()
    for file in files:
        if not file.is_image:
            raise NonImageFileError(file.name)


def resolve_album(existing: str, new_album: str) -> str:
    """Pick the typed new album name, else the chosen existing album."""
    name = new_album.strip() or existing.strip()
    if not name:
        raise MissingAlbumError()
    if name.lower() == FAVORITES_ALBUM.lower():
        raise ReservedAlbumError(name)
    return name


def normalize_tags(tags: list[str]) -> tuple[str, ...]:
    """Strip, drop blanks and deduplicate tags in first-seen order."""
    cleaned = (tag.strip() for tag in tags)
    return tuple(dict.fromkeys(tag for tag in cleaned if tag))


def build_image_path(
    family_id: UUID, user_id: UUID, timestamp_ms: int, file_name: str
) -> str:
    """Return the blob key for one uploaded file."""
    safe_name = file_name.replace("/", "_")
    return f"families/{family_id}/{user_id}_{timestamp_ms}_{safe_name}"
