"""Error taxonomy for the photo core."""

from family_photos.domain.photos import UploadItem


class FamilyPhotosError(Exception):
    """Base class for domain errors."""


class ValidationError(FamilyPhotosError):
    """Input rejected before any I/O was attempted."""


class EmptySelectionError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Please select at least one photo to upload")


class NonImageFileError(ValidationError):
    def __init__(self, file_name: str) -> None:
        super().__init__("Please select only image files")
        self.file_name = file_name


class MissingAlbumError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Please choose an album or enter a new album name")


class ReservedAlbumError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(f'"{name}" is reserved, please choose another album name')
        self.name = name


class NotInFamilyError(ValidationError):
    def __init__(self, action: str = "upload photos") -> None:
        super().__init__(f"You need to be part of a family to {action}")


class ReadError(FamilyPhotosError):
    """Profile or photo store call failed; callers may offer a retry."""


class PerItemUploadError(FamilyPhotosError):
    """Blob or record write failure for a single upload item."""

    def __init__(self, item: UploadItem) -> None:
        super().__init__(f"Failed to upload {item.file.name}")
        self.item = item


class BatchUploadError(FamilyPhotosError):
    """At least one item of an upload batch failed."""

    def __init__(self, items: list[UploadItem]) -> None:
        self.items = items
        failed = [item for item in items if item.error]
        super().__init__(
            f"{len(failed)} of {len(items)} photos failed to upload. Please try again."
        )

    @property
    def failed_items(self) -> list[UploadItem]:
        return [item for item in self.items if item.error]

    @property
    def succeeded_items(self) -> list[UploadItem]:
        return [item for item in self.items if item.succeeded]


class PhotoNotFoundError(FamilyPhotosError):
    """Photo id does not exist or is outside the viewer's family."""


class NotPhotoOwnerError(FamilyPhotosError):
    """Only the uploader may delete a photo."""


class ToggleInProgressError(FamilyPhotosError):
    """A favorite toggle for this photo has not settled yet."""


class FavoriteToggleError(FamilyPhotosError):
    """Remote favorites update failed and local state was rolled back."""

    state = "ROLLED_BACK"
