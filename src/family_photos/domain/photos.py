"""Domain models for photos and upload items."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

DEFAULT_ALBUM = "Default Album"


@dataclass(frozen=True)
class Photo:
    """Photo metadata record owned by a family."""

    id: UUID
    image_path: str
    download_url: str
    upload_date: datetime
    uploaded_by: UUID
    uploaded_by_name: str | None
    family_id: UUID
    file_name: str
    file_size: int
    file_type: str
    description: str | None = None
    tags: tuple[str, ...] = ()
    album: str | None = None


@dataclass(frozen=True)
class NewPhoto:
    """Photo attributes written by the upload pipeline."""

    image_path: str
    download_url: str
    upload_date: datetime
    uploaded_by: UUID
    uploaded_by_name: str | None
    family_id: UUID
    file_name: str
    file_size: int
    file_type: str
    description: str | None
    tags: tuple[str, ...]
    album: str


@dataclass(frozen=True)
class LocalFile:
    """A file selected for upload."""

    name: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_image(self) -> bool:
        return self.content_type.lower().startswith("image/")


@dataclass
class UploadItem:
    """Per-file upload state for one batch submission."""

    file: LocalFile
    index: int
    progress: int = 0
    error: str | None = None
    image_path: str | None = None
    photo: Photo | None = field(default=None, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.photo is not None and self.error is None

    def advance(self, progress: int) -> None:
        """Raise progress, ignoring updates that would move it backwards."""
        clamped = max(0, min(100, progress))
        if clamped > self.progress:
            self.progress = clamped


def effective_album(photo: Photo) -> str:
    """Return the album name, falling back to the default album."""
    if photo.album and photo.album.strip():
        return photo.album.strip()
    return DEFAULT_ALBUM
