"""Pydantic response models for the photo API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from family_photos.domain.gallery import GalleryView, PhotoGroup
from family_photos.domain.photos import Photo, UploadItem, effective_album


class PhotoOut(BaseModel):
    """Photo as rendered in the gallery grid."""

    id: UUID
    download_url: str
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    album: str
    upload_date: datetime
    uploaded_by: UUID
    uploaded_by_name: str | None = None
    file_size: int
    file_type: str
    is_favorite: bool = False

    @classmethod
    def from_photo(cls, photo: Photo, favorites: set[UUID]) -> "PhotoOut":
        return cls(
            id=photo.id,
            download_url=photo.download_url,
            description=photo.description,
            tags=list(photo.tags),
            album=effective_album(photo),
            upload_date=photo.upload_date,
            uploaded_by=photo.uploaded_by,
            uploaded_by_name=photo.uploaded_by_name,
            file_size=photo.file_size,
            file_type=photo.file_type,
            is_favorite=photo.id in favorites,
        )


class PhotoGroupOut(BaseModel):
    """A titled group of photos."""

    label: str
    title: str
    synthetic: bool
    photos: list[PhotoOut]

    @classmethod
    def from_group(cls, group: PhotoGroup, favorites: set[UUID]) -> "PhotoGroupOut":
        return cls(
            label=group.label,
            title=group.title,
            synthetic=group.synthetic,
            photos=[PhotoOut.from_photo(photo, favorites) for photo in group.photos],
        )


class GalleryOut(BaseModel):
    """Gallery page payload."""

    groups: list[PhotoGroupOut]
    tags: list[str]
    albums: list[str]
    total_count: int
    filtered_count: int

    @classmethod
    def from_view(cls, view: GalleryView, favorites: set[UUID]) -> "GalleryOut":
        return cls(
            groups=[
                PhotoGroupOut.from_group(group, favorites) for group in view.groups
            ],
            tags=view.tags,
            albums=view.albums,
            total_count=view.total_count,
            filtered_count=view.filtered_count,
        )


class UploadItemOut(BaseModel):
    """Outcome of one file in an upload batch."""

    file_name: str
    progress: int
    error: str | None = None
    photo_id: UUID | None = None

    @classmethod
    def from_item(cls, item: UploadItem) -> "UploadItemOut":
        return cls(
            file_name=item.file.name,
            progress=item.progress,
            error=item.error,
            photo_id=item.photo.id if item.photo else None,
        )


class UploadOut(BaseModel):
    """Upload batch payload."""

    status: str
    message: str | None = None
    items: list[UploadItemOut]


class FavoriteOut(BaseModel):
    """Favorite toggle result."""

    photo_id: UUID
    is_favorite: bool
    state: str


class FamilyIn(BaseModel):
    """Join-or-create request body."""

    name: str = Field(min_length=1)


class FamilyOut(BaseModel):
    """Family the viewer belongs to."""

    id: UUID
    name: str
    member_count: int
