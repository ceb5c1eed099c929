"""Gallery aggregation: filtering, grouping and facet extraction.

Every function here is pure. Photos are expected in upload-date descending
order, which is how the photo library returns them, and that order is
preserved inside every group.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from family_photos.domain.gallery import (
    FAVORITES_ALBUM,
    TODAY,
    YESTERDAY,
    GalleryCriteria,
    GalleryView,
    PhotoGroup,
)
from family_photos.domain.photos import Photo, effective_album

DAYS_PER_WEEK = 7


def filter_photos(
    photos: Iterable[Photo],
    favorites: set[UUID] | frozenset[UUID],
    criteria: GalleryCriteria,
) -> list[Photo]:
    """Return photos matching the active search, tag and album filters."""
    if criteria.album == FAVORITES_ALBUM:
        return [photo for photo in photos if photo.id in favorites]

    search = criteria.search.strip().lower()
    return [
        photo
        for photo in photos
        if _matches_search(photo, search)
        and (not criteria.tag or criteria.tag in photo.tags)
        and (not criteria.album or effective_album(photo) == criteria.album)
    ]


def date_bucket(upload_date: datetime, now: datetime) -> str:
    """Return the display bucket for an upload date relative to now."""
    local = _to_local(upload_date, now)
    today = now.date()
    day = local.date()
    if day == today:
        return TODAY
    if day == today - timedelta(days=1):
        return YESTERDAY
    # Weeks start on Sunday.
    week_start = today - timedelta(days=(today.weekday() + 1) % DAYS_PER_WEEK)
    if week_start <= day < week_start + timedelta(days=DAYS_PER_WEEK):
        return f"{local:%A}"
    if day.year == today.year:
        return f"{local:%B} {local.day}"
    return f"{local:%B} {local.day}, {local.year}"


def group_by_date(photos: Iterable[Photo], now: datetime) -> list[PhotoGroup]:
    """Bucket photos by upload date, keeping first-seen bucket order."""
    groups: dict[str, PhotoGroup] = {}
    for photo in photos:
        label = date_bucket(photo.upload_date, now)
        if label not in groups:
            groups[label] = PhotoGroup(label=label)
        groups[label].photos.append(photo)
    for group in groups.values():
        group.title = group_title(group, now)
    return list(groups.values())


def group_title(group: PhotoGroup, now: datetime) -> str:
    """Return the display title, adding a year for weekday/month-day buckets."""
    if group.synthetic or group.label in {TODAY, YESTERDAY} or "," in group.label:
        return group.label
    for photo in group.photos:
        local = _to_local(photo.upload_date, now)
        if local.year != now.year:
            return f"{group.label}, {local.year}"
    return group.label


def group_by_album(
    photos: Iterable[Photo], favorites: set[UUID] | frozenset[UUID]
) -> list[PhotoGroup]:
    """Group photos by album behind a synthetic Favorites group.

    The Favorites group may repeat photos that also appear in their own album
    group; it is a separate view, not a partition.
    """
    photo_list = list(photos)
    favorites_group = PhotoGroup(
        label=FAVORITES_ALBUM,
        photos=[photo for photo in photo_list if photo.id in favorites],
        synthetic=True,
    )
    albums: dict[str, PhotoGroup] = {}
    for photo in photo_list:
        album = effective_album(photo)
        if album not in albums:
            albums[album] = PhotoGroup(label=album)
        albums[album].photos.append(photo)
    return [favorites_group, *albums.values()]


def tag_facets(photos: Iterable[Photo]) -> list[str]:
    """Return distinct tags across all photos."""
    return sorted({tag for photo in photos for tag in photo.tags})


def album_facets(photos: Iterable[Photo]) -> list[str]:
    """Return album filter options, Favorites first."""
    albums = {effective_album(photo) for photo in photos}
    albums.discard(FAVORITES_ALBUM)
    return [FAVORITES_ALBUM, *sorted(albums)]


def build_gallery_view(
    photos: list[Photo],
    favorites: set[UUID] | frozenset[UUID],
    criteria: GalleryCriteria,
    now: datetime,
) -> GalleryView:
    """Filter, group and extract facets for one gallery render."""
    filtered = filter_photos(photos, favorites, criteria)
    if criteria.group_by == "album":
        groups = group_by_album(filtered, favorites)
    else:
        groups = group_by_date(filtered, now)
    return GalleryView(
        groups=groups,
        tags=tag_facets(photos),
        albums=album_facets(photos),
        total_count=len(photos),
        filtered_count=len(filtered),
    )


def photo_details(photo: Photo, timezone_name: str) -> dict[str, object]:
    """Return the fields shown when a single photo is opened."""
    local = photo.upload_date.astimezone(ZoneInfo(timezone_name))
    hour = local.hour % 12 or 12
    return {
        "id": str(photo.id),
        "download_url": photo.download_url,
        "uploaded": f"{local:%B} {local.day}, {local.year}",
        "time": f"{hour}:{local:%M} {local:%p}",
        "description": photo.description,
        "uploaded_by_name": photo.uploaded_by_name,
        "album": effective_album(photo),
        "tags": list(photo.tags),
    }


def viewer_now(timezone_name: str) -> datetime:
    """Return the current time in the viewer's timezone."""
    return datetime.now(tz=ZoneInfo(timezone_name))


def _matches_search(photo: Photo, search: str) -> bool:
    if not search:
        return True
    if photo.description and search in photo.description.lower():
        return True
    if any(search in tag.lower() for tag in photo.tags):
        return True
    return search in effective_album(photo).lower()


def _to_local(value: datetime, now: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    if now.tzinfo is None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value.astimezone(now.tzinfo)
