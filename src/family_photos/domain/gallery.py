"""View models produced by the gallery aggregation engine."""

from dataclasses import dataclass, field
from typing import Literal

from family_photos.domain.photos import Photo

FAVORITES_ALBUM = "Favorites"
TODAY = "Today"
YESTERDAY = "Yesterday"

GroupMode = Literal["date", "album"]


@dataclass(frozen=True)
class GalleryCriteria:
    """Active search and filter selections."""

    search: str = ""
    tag: str = ""
    album: str = ""
    group_by: GroupMode = "date"


@dataclass
class PhotoGroup:
    """Ordered photos sharing a date bucket or album."""

    label: str
    photos: list[Photo] = field(default_factory=list)
    title: str = ""
    synthetic: bool = False

    def __post_init__(self) -> None:
        if not self.title:
            self.title = self.label


@dataclass(frozen=True)
class GalleryView:
    """Grouped, filtered gallery plus the facet lists for the filter bar."""

    groups: list[PhotoGroup]
    tags: list[str]
    albums: list[str]
    total_count: int
    filtered_count: int
