"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from family_photos.domain.photos import NewPhoto, Photo
from family_photos.services.photos import PhotoRepository

PHOTO_COLUMNS = (
    "id, image_path, download_url, description, tags, album, upload_date, "
    "uploaded_by, uploaded_by_name, family_id, file_name, file_size, file_type"
)


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo metadata persistence."""

    client: Client

    def list_family_photos(self, family_id: UUID) -> list[Photo]:
        """Return every photo row for a family, newest first."""
        response = (
            self.client.table("photos")
            .select(PHOTO_COLUMNS)
            .eq("family_id", str(family_id))
            .order("upload_date", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_photo(self, photo: NewPhoto) -> Photo:
        """Create a photo metadata row and return it."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    "image_path": photo.image_path,
                    "download_url": photo.download_url,
                    "description": photo.description,
                    "tags": list(photo.tags),
                    "album": photo.album,
                    "upload_date": photo.upload_date.isoformat(),
                    "uploaded_by": str(photo.uploaded_by),
                    "uploaded_by_name": photo.uploaded_by_name,
                    "family_id": str(photo.family_id),
                    "file_name": photo.file_name,
                    "file_size": photo.file_size,
                    "file_type": photo.file_type,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo metadata")
        return _parse_row(response.data[0])

    def get_photo(self, photo_id: UUID) -> Photo | None:
        """Return a photo row by id, if present."""
        response = (
            self.client.table("photos")
            .select(PHOTO_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo metadata row."""
        self.client.table("photos").delete().eq("id", str(photo_id)).execute()


def _parse_row(row: dict[str, object]) -> Photo:
    upload_date_raw = row.get("upload_date")
    upload_date = (
        datetime.fromisoformat(upload_date_raw)
        if isinstance(upload_date_raw, str) and upload_date_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    if upload_date.tzinfo is None:
        upload_date = upload_date.replace(tzinfo=UTC)
    tags = row.get("tags") or []
    return Photo(
        id=UUID(str(row["id"])),
        image_path=str(row.get("image_path") or ""),
        download_url=str(row.get("download_url") or ""),
        upload_date=upload_date,
        uploaded_by=UUID(str(row["uploaded_by"])),
        uploaded_by_name=row.get("uploaded_by_name"),
        family_id=UUID(str(row["family_id"])),
        file_name=str(row.get("file_name") or ""),
        file_size=int(row.get("file_size") or 0),
        file_type=str(row.get("file_type") or ""),
        description=row.get("description"),
        tags=tuple(str(tag) for tag in tags) if isinstance(tags, list) else (),
        album=row.get("album"),
    )
